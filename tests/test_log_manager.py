from __future__ import annotations

import json
import logging
from pathlib import Path

from app.Log import JsonFormatter, LaravelFormatter, LogManager


def make_record(context: dict) -> logging.LogRecord:
    record = logging.LogRecord('translatable', logging.WARNING, __file__, 1, 'Column probe failed', None, None)
    record.context = context
    return record


class TestLogManager:

    def test_single_channel_writes_context(self, tmp_path: Path) -> None:
        path = tmp_path / 'audit.log'
        manager = LogManager({
            'default': 'audit',
            'channels': {'audit': {'driver': 'single', 'path': str(path), 'level': 'debug'}},
        })

        manager.warning('Column probe failed', {'table': 'posts'})
        for handler in manager.channel().logger.handlers:
            handler.flush()

        content = path.read_text()
        assert 'audit.WARNING: Column probe failed' in content
        assert '{"table": "posts"}' in content

    def test_channels_are_cached(self) -> None:
        manager = LogManager({'default': 'null', 'channels': {'null': {'driver': 'null'}}})

        assert manager.channel() is manager.channel('null')
        assert isinstance(manager.channel().logger.handlers[0], logging.NullHandler)

    def test_level_is_applied(self) -> None:
        manager = LogManager({'channels': {'quiet': {'driver': 'null', 'level': 'error'}}})

        assert manager.channel('quiet').logger.level == logging.ERROR

    def test_stack_channel_uses_member_handlers(self, tmp_path: Path) -> None:
        manager = LogManager({'channels': {
            'stack': {'driver': 'stack', 'channels': ['file']},
            'file': {'driver': 'single', 'path': str(tmp_path / 'stack.log')},
        }})

        handlers = manager.channel('stack').logger.handlers

        assert manager.channel('file').logger.handlers[0] in handlers

    def test_forget_channel(self) -> None:
        manager = LogManager({'channels': {'null': {'driver': 'null'}}})
        first = manager.channel('null')

        manager.forget_channel('null')

        assert manager.channel('null') is not first


class TestFormatters:

    def test_laravel_format(self) -> None:
        line = LaravelFormatter().format(make_record({'column': 'title'}))

        assert line.endswith('translatable.WARNING: Column probe failed {"column": "title"}')

    def test_json_format(self) -> None:
        entry = json.loads(JsonFormatter().format(make_record({'column': 'title'})))

        assert entry['level'] == 'WARNING'
        assert entry['channel'] == 'translatable'
        assert entry['context'] == {'column': 'title'}
