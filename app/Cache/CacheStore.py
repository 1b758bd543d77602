from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional
from abc import ABC, abstractmethod
from pathlib import Path
import time
import pickle
import hashlib


class CacheStore(ABC):
    """Abstract cache store following Laravel's cache interface."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Retrieve an item from the cache."""
        pass

    @abstractmethod
    def put(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store an item in the cache for ``ttl`` seconds (forever when None)."""
        pass

    @abstractmethod
    def forget(self, key: str) -> bool:
        """Remove an item from the cache."""
        pass

    @abstractmethod
    def flush(self) -> bool:
        """Remove all items from the cache."""
        pass

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def many(self, keys: List[str]) -> Dict[str, Any]:
        """Retrieve multiple items from the cache."""
        return {key: self.get(key) for key in keys}

    def forever(self, key: str, value: Any) -> bool:
        return self.put(key, value, None)

    def remember(self, key: str, ttl: Optional[int], callback: Callable[[], Any]) -> Any:
        """Get an item from the cache or store the result of callback."""
        value = self.get(key)
        if value is None:
            value = callback()
            self.put(key, value, ttl)
        return value

    def pull(self, key: str, default: Any = None) -> Any:
        """Retrieve and delete an item from the cache."""
        value = self.get(key, default)
        self.forget(key)
        return value


class ArrayCacheStore(CacheStore):
    """In-memory store living for the lifetime of the process."""

    def __init__(self) -> None:
        self.storage: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        item = self.storage.get(key)
        if item is None:
            return default
        if item['expires_at'] is not None and item['expires_at'] <= time.time():
            del self.storage[key]
            return default
        return item['value']

    def put(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        expires_at = None if ttl is None else time.time() + ttl
        self.storage[key] = {'value': value, 'expires_at': expires_at}
        return True

    def forget(self, key: str) -> bool:
        return self.storage.pop(key, None) is not None

    def flush(self) -> bool:
        self.storage.clear()
        return True


class FileCacheStore(CacheStore):
    """File-based cache store, one pickle per key."""

    def __init__(self, cache_path: str = "storage/framework/cache") -> None:
        self.cache_path = Path(cache_path)
        self.cache_path.mkdir(parents=True, exist_ok=True)

    def _get_file_path(self, key: str) -> Path:
        key_hash = hashlib.md5(key.encode()).hexdigest()
        return self.cache_path / f"{key_hash}.cache"

    def get(self, key: str, default: Any = None) -> Any:
        file_path = self._get_file_path(key)
        try:
            with open(file_path, 'rb') as f:
                data = pickle.load(f)
        except (FileNotFoundError, EOFError, pickle.PickleError):
            return default

        if data['expires_at'] is not None and data['expires_at'] <= time.time():
            file_path.unlink(missing_ok=True)
            return default
        return data['value']

    def put(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        expires_at = None if ttl is None else time.time() + ttl
        with open(self._get_file_path(key), 'wb') as f:
            pickle.dump({'value': value, 'expires_at': expires_at}, f)
        return True

    def forget(self, key: str) -> bool:
        file_path = self._get_file_path(key)
        if not file_path.exists():
            return False
        file_path.unlink()
        return True

    def flush(self) -> bool:
        for file_path in self.cache_path.glob("*.cache"):
            file_path.unlink(missing_ok=True)
        return True


class CacheManager:
    """Laravel-style cache manager resolving stores from ``config/cache.py``."""

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        if config is None:
            from config.cache import get_cache_config
            config = get_cache_config()
        self.config = config
        self.default_store: str = config.get('default', 'array')
        self.prefix: str = config.get('prefix', '')
        self.stores: Dict[str, CacheStore] = {}
        self._custom_creators: Dict[str, Callable[[Dict[str, Any]], CacheStore]] = {}

    def store(self, name: Optional[str] = None) -> CacheStore:
        """Get a cache store instance, building it on first use."""
        store_name = name or self.default_store
        if store_name not in self.stores:
            self.stores[store_name] = self._resolve(store_name)
        return self.stores[store_name]

    def _resolve(self, name: str) -> CacheStore:
        store_config = self.config.get('stores', {}).get(name)
        if store_config is None:
            raise ValueError(f"Cache store [{name}] is not defined.")

        driver = store_config.get('driver', name)
        if driver in self._custom_creators:
            return self._custom_creators[driver](store_config)
        if driver == 'array':
            return ArrayCacheStore()
        if driver == 'file':
            return FileCacheStore(store_config.get('path', 'storage/framework/cache'))
        raise ValueError(f"Cache driver [{driver}] is not supported.")

    def extend(self, driver: str, creator: Callable[[Dict[str, Any]], CacheStore]) -> None:
        """Register a custom cache driver."""
        self._custom_creators[driver] = creator

    def key(self, key: str) -> str:
        return f"{self.prefix}:{key}" if self.prefix else key

    # Proxy methods to default store

    def get(self, key: str, default: Any = None) -> Any:
        return self.store().get(self.key(key), default)

    def put(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        return self.store().put(self.key(key), value, ttl)

    def forget(self, key: str) -> bool:
        return self.store().forget(self.key(key))

    def flush(self) -> bool:
        return self.store().flush()

    def remember(self, key: str, ttl: Optional[int], callback: Callable[[], Any]) -> Any:
        return self.store().remember(self.key(key), ttl, callback)
