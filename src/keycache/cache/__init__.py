"""Cache layer for keycache.

Provides the batched cache backend contract and its implementations:
- CacheKeys: "<entity>:<key>" namespacing
- InMemoryCacheBackend: dict-backed, for tests and local runs
- RedisCacheBackend: MULTI/EXEC pipeline over redis.asyncio
"""

from keycache.cache.backend import CacheBackend, CacheCommand, CacheOp, InMemoryCacheBackend
from keycache.cache.keys import CacheKeys
from keycache.cache.redis import RedisCacheBackend, close_redis, get_redis

__all__ = [
    "CacheBackend",
    "CacheCommand",
    "CacheKeys",
    "CacheOp",
    "InMemoryCacheBackend",
    "RedisCacheBackend",
    "close_redis",
    "get_redis",
]
