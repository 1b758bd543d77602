from .CacheStore import (
    CacheStore,
    ArrayCacheStore,
    FileCacheStore,
    CacheManager,
)

__all__ = [
    "CacheStore",
    "ArrayCacheStore",
    "FileCacheStore",
    "CacheManager",
]
