from __future__ import annotations

import logging
import logging.handlers
from typing import Any, Dict, Optional, Union
from pathlib import Path
from datetime import datetime
import json
import sys


def _to_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelName(level.upper()) if level.upper() in logging._nameToLevel else logging.INFO


class LogChannel:
    """Laravel-style log channel."""

    def __init__(self, name: str, handler: logging.Handler, level: Union[str, int] = logging.INFO) -> None:
        self.name = name
        self.logger = logging.getLogger(name)
        self.logger.setLevel(_to_level(level))
        self.logger.handlers.clear()
        self.logger.addHandler(handler)
        self.logger.propagate = False

    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, context)

    def warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, context)

    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.ERROR, message, context)

    def critical(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.CRITICAL, message, context)

    def _log(self, level: int, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        extra = {'context': context} if context else {}
        self.logger.log(level, message, extra=extra)


class LaravelFormatter(logging.Formatter):
    """Formats records as ``[date] channel.LEVEL: message {context}``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        log_line = f"[{timestamp}] {record.name}.{record.levelname}: {record.getMessage()}"

        context = getattr(record, 'context', {})
        if context:
            log_line += f" {json.dumps(context, default=str)}"

        if record.exc_info:
            log_line += f"\n{self.formatException(record.exc_info)}"

        return log_line


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'channel': record.name,
            'message': record.getMessage(),
            'context': getattr(record, 'context', {}),
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class LogManager:
    """Laravel-style log manager building channels from ``config/logging.py``."""

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        if config is None:
            from config.logging import get_logging_config
            config = get_logging_config()
        self._config = config
        self._channels: Dict[str, LogChannel] = {}
        self._default_channel = config.get('default', 'stderr')

    def channel(self, name: Optional[str] = None) -> LogChannel:
        """Get a log channel, creating it on first use."""
        if name is None:
            name = self._default_channel

        if name not in self._channels:
            self._create_channel(name)

        return self._channels[name]

    def _create_channel(self, name: str) -> None:
        config = self._config.get('channels', {}).get(name, {})
        driver = config.get('driver', 'stderr')
        level = config.get('level', self._config.get('level', logging.INFO))

        if driver == 'single':
            path = Path(config.get('path', f'storage/logs/{name}.log'))
            path.parent.mkdir(parents=True, exist_ok=True)
            handler: logging.Handler = logging.FileHandler(path)
        elif driver == 'daily':
            path = Path(config.get('path', f'storage/logs/{name}.log'))
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.handlers.TimedRotatingFileHandler(
                path, when='midnight', interval=1, backupCount=config.get('days', 14)
            )
        elif driver == 'stack':
            self._create_stack_channel(name, config)
            return
        elif driver == 'null':
            handler = logging.NullHandler()
        else:
            handler = logging.StreamHandler(sys.stderr)

        handler.setFormatter(self._get_formatter(config))
        self._channels[name] = LogChannel(name, handler, level)

    def _create_stack_channel(self, name: str, config: Dict[str, Any]) -> None:
        """A stack channel writes through the handlers of its member channels."""
        stack = LogChannel(name, logging.NullHandler(), config.get('level', logging.DEBUG))
        for channel_name in config.get('channels', []):
            for handler in self.channel(channel_name).logger.handlers:
                stack.logger.addHandler(handler)
        self._channels[name] = stack

    def _get_formatter(self, config: Dict[str, Any]) -> logging.Formatter:
        if config.get('formatter', 'laravel') == 'json':
            return JsonFormatter()
        return LaravelFormatter()

    def forget_channel(self, name: str) -> None:
        """Remove a channel."""
        self._channels.pop(name, None)

    # Proxy methods to default channel
    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().debug(message, context)

    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().info(message, context)

    def warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().warning(message, context)

    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().error(message, context)


# Global log manager instance
log_manager_instance: Optional[LogManager] = None


def get_log_manager() -> LogManager:
    """Get the global log manager instance."""
    global log_manager_instance
    if log_manager_instance is None:
        log_manager_instance = LogManager()
    return log_manager_instance


def logger(channel: Optional[str] = None) -> LogChannel:
    """Get a log channel."""
    return get_log_manager().channel(channel)
