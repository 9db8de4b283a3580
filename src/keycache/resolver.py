"""Batched record resolution against the backing store.

The resolver turns a list of keys for one lookup field into records, in the
caller's order, with one store query per call. Keys the store does not know
come back as None and are reported to the data-miss observer.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from keycache.observability.logging import LogContext
from keycache.observability.metrics import record_data_miss
from keycache.observers import MissObserver, notify
from keycache.store.base import RecordStore, field_value, project_record

logger = logging.getLogger(__name__)

# Lookup field accepted as a synonym for the primary key
ID_ALIAS = "id"


class Resolver:
    """Resolve keys for one entity type through a record store."""

    def __init__(
        self,
        entity: str,
        store: RecordStore,
        on_data_miss: MissObserver | None = None,
        primary_key: str = "_id",
    ):
        self.entity = entity
        self.store = store
        self.on_data_miss = on_data_miss
        self.primary_key = primary_key

    def lookup_field(self, field: str) -> str:
        """Store field queried for a lookup field name."""
        return self.primary_key if field == ID_ALIAS else field

    async def resolve_many(self, field: str, keys: Sequence[str]) -> list[dict[str, Any] | None]:
        """Resolve keys in one store query.

        The result has one entry per input key, in input order. Duplicate
        keys resolve independently, so an absent duplicate reports one data
        miss per occurrence.
        """
        if not keys:
            return []

        with LogContext(entity=self.entity):
            return await self._resolve(field, keys)

    async def _resolve(self, field: str, keys: Sequence[str]) -> list[dict[str, Any] | None]:
        lookup = self.lookup_field(field)
        records = await self.store.find(lookup, list(dict.fromkeys(keys)))

        by_key: dict[str, dict[str, Any]] = {}
        for record in records:
            if record is None:
                continue
            projected = project_record(record)
            value = projected[lookup] if lookup in projected else field_value(record, lookup)
            if value is None:
                continue
            by_key[str(value)] = projected

        resolved: list[dict[str, Any] | None] = []
        for key in keys:
            record = by_key.get(key)
            if record is None:
                logger.debug("Data miss", extra={"key": key})
                record_data_miss(self.entity)
                await notify(self.on_data_miss, self.entity, key)
            resolved.append(record)

        return resolved

    async def resolve_one(self, field: str, key: str) -> dict[str, Any] | None:
        """Resolve a single key."""
        [record] = await self.resolve_many(field, [key])
        return record
