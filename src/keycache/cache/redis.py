"""Redis cache backend for keycache.

Every batch is sent as a MULTI/EXEC pipeline, so a whole get/set/del batch
is a single network round trip and the writes inside it become visible
together. Uses the redis-py async client for connection pooling.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import redis.asyncio as redis

from keycache.cache.backend import CacheCommand, CacheOp
from keycache.config import settings

if TYPE_CHECKING:
    from redis.asyncio import Redis

# Module-level connection pool
_redis_client: Redis | None = None


async def get_redis() -> Redis:
    """Get or create the Redis client.

    Payloads are JSON text, so responses are decoded to str.
    """
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(  # type: ignore[no-untyped-call]
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis_client


async def close_redis() -> None:
    """Close Redis connections."""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


class RedisCacheBackend:
    """Batched cache backend over a Redis transaction pipeline."""

    def __init__(self, client: Redis):
        self.client = client

    async def execute(self, ops: Sequence[CacheOp]) -> list[Any]:
        """Queue every operation on one MULTI/EXEC pipeline and run it."""
        async with self.client.pipeline(transaction=True) as pipe:
            for op in ops:
                if op.command == CacheCommand.GET:
                    pipe.get(op.key)
                elif op.command == CacheCommand.SET:
                    pipe.set(op.key, op.value)
                elif op.command == CacheCommand.DEL:
                    pipe.delete(op.key)
                else:
                    raise ValueError(f"Unsupported cache command: {op.command}")
            results: list[Any] = await pipe.execute()
        return results

    async def health_check(self) -> bool:
        """Check Redis connectivity."""
        try:
            await self.client.ping()
            return True
        except redis.RedisError:
            return False
