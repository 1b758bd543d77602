from __future__ import annotations

from pathlib import Path
from typing import Any, Dict
from unittest.mock import patch

import pytest

from app.Cache import ArrayCacheStore, CacheManager, CacheStore, FileCacheStore


class TestArrayCacheStore:

    def test_put_get_forget(self) -> None:
        store = ArrayCacheStore()

        store.put('key', ['name'], 60)
        assert store.get('key') == ['name']
        assert store.has('key')

        assert store.forget('key') is True
        assert store.get('key', 'missing') == 'missing'

    def test_expired_items_are_dropped(self) -> None:
        store = ArrayCacheStore()

        with patch('time.time', return_value=1000.0):
            store.put('key', 'value', 10)
        with patch('time.time', return_value=1011.0):
            assert store.get('key') is None

    def test_remember_calls_the_callback_once(self) -> None:
        store = ArrayCacheStore()
        calls = []

        def compute() -> str:
            calls.append(1)
            return 'computed'

        assert store.remember('key', None, compute) == 'computed'
        assert store.remember('key', None, compute) == 'computed'
        assert len(calls) == 1

    def test_pull_and_many(self) -> None:
        store = ArrayCacheStore()
        store.forever('a', 1)
        store.forever('b', 2)

        assert store.many(['a', 'b', 'c']) == {'a': 1, 'b': 2, 'c': None}
        assert store.pull('a') == 1
        assert not store.has('a')


class TestFileCacheStore:

    def test_values_survive_a_new_store(self, tmp_path: Path) -> None:
        FileCacheStore(str(tmp_path)).put('key', {'locales': ['en', 'fr']})

        assert FileCacheStore(str(tmp_path)).get('key') == {'locales': ['en', 'fr']}

    def test_flush(self, tmp_path: Path) -> None:
        store = FileCacheStore(str(tmp_path))
        store.put('a', 1)
        store.put('b', 2)

        store.flush()

        assert list(tmp_path.glob('*.cache')) == []
        assert store.get('a') is None


class TestCacheManager:

    @pytest.fixture
    def manager(self, tmp_path: Path) -> CacheManager:
        return CacheManager({
            'default': 'array',
            'prefix': 'app',
            'stores': {
                'array': {'driver': 'array'},
                'file': {'driver': 'file', 'path': str(tmp_path)},
            },
        })

    def test_stores_are_built_once(self, manager: CacheManager) -> None:
        assert manager.store() is manager.store('array')
        assert isinstance(manager.store('file'), FileCacheStore)

    def test_keys_are_prefixed(self, manager: CacheManager) -> None:
        manager.put('locales', ['en'])

        assert manager.key('locales') == 'app:locales'
        assert manager.store().get('app:locales') == ['en']
        assert manager.get('locales') == ['en']

    def test_unknown_store(self, manager: CacheManager) -> None:
        with pytest.raises(ValueError):
            manager.store('redis')

    def test_custom_driver(self, manager: CacheManager) -> None:
        class DictStore(ArrayCacheStore):
            pass

        manager.config['stores']['custom'] = {'driver': 'dict'}
        manager.extend('dict', lambda store_config: DictStore())

        store: CacheStore = manager.store('custom')
        assert isinstance(store, DictStore)

    def test_defaults_come_from_config_module(self) -> None:
        manager = CacheManager()
        config: Dict[str, Any] = manager.config

        assert 'array' in config['stores']
        assert isinstance(manager.store('array'), ArrayCacheStore)
