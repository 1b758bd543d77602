from __future__ import annotations

import copy
import threading
from collections.abc import MutableMapping
from typing import Any, Callable, Dict, Iterator, Optional, Union

_MISSING = object()


def _dot_get(items: Dict[str, Any], key: str, default: Any = None) -> Any:
    current: Any = items
    for segment in key.split('.'):
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        else:
            return default
    return current


def _dot_set(items: Dict[str, Any], key: str, value: Any) -> None:
    segments = key.split('.')
    current = items
    for segment in segments[:-1]:
        if not isinstance(current.get(segment), dict):
            current[segment] = {}
        current = current[segment]
    current[segments[-1]] = value


def _merge_recursive(first: Dict[str, Any], second: Dict[str, Any]) -> Dict[str, Any]:
    result = copy.deepcopy(first)
    for key, value in second.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _merge_recursive(result[key], value)
        else:
            result[key] = value
    return result


class ConfigRepository(MutableMapping[str, Any]):
    """Laravel-style configuration repository with dot notation access."""

    def __init__(self, items: Optional[Dict[str, Any]] = None) -> None:
        self._items: Dict[str, Any] = items or {}
        self._lock = threading.RLock()

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation."""
        with self._lock:
            return _dot_get(self._items, key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value using dot notation."""
        with self._lock:
            _dot_set(self._items, key, value)

    def has(self, key: str) -> bool:
        """Check if a configuration key exists."""
        with self._lock:
            return _dot_get(self._items, key, _MISSING) is not _MISSING

    def forget(self, key: str) -> None:
        """Remove a configuration value."""
        with self._lock:
            *parents, last = key.split('.')
            container = _dot_get(self._items, '.'.join(parents), None) if parents else self._items
            if isinstance(container, dict):
                container.pop(last, None)

    def all(self) -> Dict[str, Any]:
        """Get all configuration items."""
        with self._lock:
            return copy.deepcopy(self._items)

    def merge(self, items: Dict[str, Any]) -> None:
        """Merge configuration items."""
        with self._lock:
            self._items = _merge_recursive(self._items, items)

    def merge_config_from(self, namespace: str, loader: Callable[[], Dict[str, Any]]) -> None:
        """Merge a package's defaults under a namespace, keeping values already set."""
        with self._lock:
            defaults = loader()
            current = _dot_get(self._items, namespace, {})
            _dot_set(self._items, namespace, _merge_recursive(defaults, current if isinstance(current, dict) else {}))

    # MutableMapping interface
    def __getitem__(self, key: str) -> Any:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        if not self.has(key):
            raise KeyError(key)
        self.forget(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)


def _load_default_items() -> Dict[str, Any]:
    from config.app import get_app_config
    from config.cache import get_cache_config
    from config.logging import get_logging_config
    from config.translatable import get_translatable_config

    return {
        'app': get_app_config(),
        'cache': get_cache_config(),
        'logging': get_logging_config(),
        'translatable': get_translatable_config(),
    }


config_instance: Optional[ConfigRepository] = None


def config(key: Optional[str] = None, default: Any = None) -> Union[ConfigRepository, Any]:
    """Get the configuration repository or a configuration value."""
    global config_instance
    if config_instance is None:
        config_instance = ConfigRepository(_load_default_items())

    if key is None:
        return config_instance

    return config_instance.get(key, default)


def set_config_repository(repository: Optional[ConfigRepository]) -> None:
    """Swap the global repository; ``None`` reloads defaults on next access."""
    global config_instance
    config_instance = repository


__all__ = [
    'ConfigRepository',
    'config',
    'set_config_repository',
]
