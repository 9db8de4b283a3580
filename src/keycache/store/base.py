"""Backing record store interface.

A store answers one kind of question: which records have a value of
``field`` contained in ``keys``. Records come back as mappings or pydantic
models; ``project_record`` turns either into the plain dict that gets
serialized into the cache.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from pydantic import BaseModel

Record = Mapping[str, Any] | BaseModel


class RecordStore(Protocol):
    async def find(self, field: str, keys: Sequence[str]) -> Sequence[Record | None]:
        """Return all records whose ``field`` value is one of ``keys``.

        Order is unspecified and absent keys are simply not returned.
        Stores may include None placeholders, which callers skip.
        """
        ...


def project_record(record: Record) -> dict[str, Any]:
    """Plain-data projection of a record (no live handles)."""
    if isinstance(record, BaseModel):
        return record.model_dump(mode="json", by_alias=True)
    return dict(record)


def field_value(record: Record, field: str) -> Any:
    """Read a field from a mapping or a model.

    Models are read through their serialized (alias) names first, the names
    that end up in the cache, then by attribute name.
    """
    if isinstance(record, BaseModel):
        projected = project_record(record)
        if field in projected:
            return projected[field]
        return getattr(record, field, None)
    return record.get(field)


class InMemoryRecordStore:
    """List-backed store for tests and local development."""

    def __init__(self, records: Sequence[Record] = ()):
        self._records: list[Record] = list(records)
        self.queries: list[tuple[str, list[str]]] = []

    async def find(self, field: str, keys: Sequence[str]) -> Sequence[Record | None]:
        self.queries.append((field, list(keys)))
        wanted = set(keys)
        return [
            record
            for record in self._records
            if field_value(record, field) is not None and str(field_value(record, field)) in wanted
        ]

    def add(self, record: Record) -> None:
        self._records.append(record)

    def remove(self, field: str, key: str) -> None:
        self._records = [r for r in self._records if str(field_value(r, field)) != key]
