"""keycache: batched cache-aside layer with secondary-key aliasing.

Reads resolve from the cache first, fall back to the backing store for the
remainder, and refill the cache under every key that addresses a record.
"""

from keycache.accessors import AccessorTable, CachedModel
from keycache.cache import CacheKeys, CacheOp, InMemoryCacheBackend, RedisCacheBackend
from keycache.engine import CacheAsideEngine
from keycache.errors import CachePayloadError, KeycacheError, UnknownLookupFieldError
from keycache.resolver import Resolver
from keycache.store import InMemoryRecordStore, RecordStore, SqlRecordStore

__version__ = "0.1.0"

__all__ = [
    "AccessorTable",
    "CacheAsideEngine",
    "CacheKeys",
    "CacheOp",
    "CachePayloadError",
    "CachedModel",
    "InMemoryCacheBackend",
    "InMemoryRecordStore",
    "KeycacheError",
    "RecordStore",
    "RedisCacheBackend",
    "Resolver",
    "SqlRecordStore",
    "UnknownLookupFieldError",
]
