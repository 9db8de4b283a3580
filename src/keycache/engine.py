"""Cache-aside engine.

Reads go to the cache first in one batched GET. Keys the cache cannot answer
are resolved from the backing store in one query, and every resolved record
is written back in one batched SET under its primary key and each of its
additional keys. Results always line up with the requested keys.

Writes (``set``) and invalidation (``clear``) talk to the cache directly.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from typing import Any

from keycache import serialization
from keycache.cache.backend import CacheBackend, CacheOp
from keycache.cache.keys import CacheKeys
from keycache.errors import CachePayloadError, UnknownLookupFieldError
from keycache.observability.logging import LogContext
from keycache.observability.metrics import (
    record_cache_batch,
    record_cache_hits,
    record_cache_miss,
)
from keycache.observers import MissObserver, notify
from keycache.resolver import ID_ALIAS, Resolver

logger = logging.getLogger(__name__)


class CacheAsideEngine:
    """Cache-aside reads, write-through sets and invalidation for one entity.

    The engine keeps no state between calls beyond its collaborators, so a
    single instance can serve concurrent requests. Concurrent misses on the
    same key are not coalesced; both fill the cache with the same payload.
    """

    def __init__(
        self,
        entity: str,
        cache: CacheBackend,
        resolver: Resolver,
        enable: bool = True,
        additional_cache_keys: Sequence[str] = (),
        on_cache_miss: MissObserver | None = None,
        heal_malformed: bool = False,
    ):
        self.entity = entity
        self.cache = cache
        self.resolver = resolver
        self.enable = enable
        self.additional_cache_keys = list(additional_cache_keys)
        self.on_cache_miss = on_cache_miss
        self.heal_malformed = heal_malformed

    @property
    def primary_key(self) -> str:
        return self.resolver.primary_key

    @property
    def on_data_miss(self) -> MissObserver | None:
        return self.resolver.on_data_miss

    def with_prefix(self, key: str) -> str:
        """Cache key for a raw primary or additional key value."""
        return CacheKeys.with_prefix(self.entity, key)

    def lookup_fields(self) -> list[str]:
        """Fields that uniquely identify a record of this entity."""
        return [self.primary_key, ID_ALIAS, *self.additional_cache_keys]

    def cache_slots(self, record: dict[str, Any]) -> list[str]:
        """Raw keys a record is cached under: primary key, then aliases.

        Aliases whose value is missing are skipped so nothing is cached
        under a "None" key.
        """
        slots: list[str] = []
        for name in [self.primary_key, *self.additional_cache_keys]:
            value = record.get(name)
            if value is not None and str(value) not in slots:
                slots.append(str(value))
        return slots

    async def _execute(self, operation: str, ops: list[CacheOp]) -> list[Any]:
        start = time.perf_counter()
        try:
            return await self.cache.execute(ops)
        finally:
            record_cache_batch(operation, self.entity, time.perf_counter() - start)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get_many_by(self, field: str, keys: Sequence[str]) -> list[dict[str, Any] | None]:
        """Resolve keys for ``field`` through the cache, falling back to the store.

        Returns one entry per key in input order; None where neither the cache
        nor the store has the record.
        """
        if field not in self.lookup_fields():
            raise UnknownLookupFieldError(self.entity, field, self.lookup_fields())

        with LogContext(entity=self.entity):
            return await self._get_many_by(field, list(keys))

    async def _get_many_by(self, field: str, keys: list[str]) -> list[dict[str, Any] | None]:
        if not self.enable:
            return await self.resolver.resolve_many(field, keys)

        if not keys:
            return []

        payloads = await self._execute("get", [CacheOp.get(self.with_prefix(k)) for k in keys])

        cached: dict[str, Any] = {}
        malformed: set[str] = set()
        for key, payload in zip(keys, payloads):
            if not payload:
                continue
            try:
                value = serialization.loads(payload, self.with_prefix(key))
            except CachePayloadError:
                if not self.heal_malformed:
                    raise
                logger.warning(
                    "Discarding malformed cache entry",
                    extra={"key": key},
                )
                malformed.add(key)
                continue
            if value is not None:
                cached[key] = value

        missed = [key for key in keys if key not in cached]
        record_cache_hits(self.entity, len(keys) - len(missed))
        if not missed:
            return [cached[key] for key in keys]

        for key in missed:
            logger.debug("Cache miss", extra={"key": key})
            record_cache_miss(self.entity)
            await notify(self.on_cache_miss, self.entity, key)

        resolved = await self.resolver.resolve_many(field, missed)

        # Resolver output lines up with `missed`, so pair by position
        stored: dict[str, dict[str, Any]] = {}
        staged: dict[str, str] = {}
        for key, record in zip(missed, resolved):
            if record is None:
                continue
            payload = serialization.dumps(record)
            stored[key] = record
            staged[key] = payload
            for slot in self.cache_slots(record):
                staged[slot] = payload

        ops = [CacheOp.set(self.with_prefix(slot), payload) for slot, payload in staged.items()]
        ops.extend(CacheOp.delete(self.with_prefix(key)) for key in malformed if key not in staged)
        if ops:
            await self._execute("set", ops)

        return [cached[key] if key in cached else stored.get(key) for key in keys]

    async def get_by(self, field: str, key: str) -> dict[str, Any] | None:
        [value] = await self.get_many_by(field, [key])
        return value

    async def get_many(self, keys: Sequence[str]) -> list[dict[str, Any] | None]:
        return await self.get_many_by(self.primary_key, keys)

    async def get(self, key: str) -> dict[str, Any] | None:
        return await self.get_by(self.primary_key, key)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def set_many(self, entries: Iterable[tuple[str, Any]]) -> None:
        """Write values under their raw keys in one batch.

        Entries with a None value are dropped, not tombstoned. Does nothing
        when caching is disabled or nothing is left to write.
        """
        if not self.enable:
            return

        ops = [
            CacheOp.set(self.with_prefix(key), serialization.dumps(value))
            for key, value in entries
            if value is not None
        ]
        if not ops:
            return

        await self._execute("set", ops)

    async def set(self, key: str, value: Any) -> None:
        await self.set_many([(key, value)])

    async def clear_many(self, keys: Iterable[str]) -> None:
        """Delete the cache slots for raw keys in one batch.

        Runs even when caching is disabled so that entries written before the
        cache was switched off cannot go stale.
        """
        ops = [CacheOp.delete(self.with_prefix(key)) for key in keys]
        if not ops:
            return

        await self._execute("del", ops)

    async def clear(self, key: str) -> None:
        await self.clear_many([key])
