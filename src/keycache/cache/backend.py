"""Batched cache backend interface.

The engine talks to the cache through a single primitive: an ordered list
of get/set/del operations executed as one round trip, returning one result
per operation in request order.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any, NamedTuple, Protocol


class CacheCommand(str, Enum):
    """Command carried by a batched cache operation."""

    GET = "get"
    SET = "set"
    DEL = "del"


class CacheOp(NamedTuple):
    """Single operation inside a cache batch."""

    command: CacheCommand
    key: str
    value: str | None = None

    @classmethod
    def get(cls, key: str) -> "CacheOp":
        return cls(CacheCommand.GET, key)

    @classmethod
    def set(cls, key: str, value: str) -> "CacheOp":
        return cls(CacheCommand.SET, key, value)

    @classmethod
    def delete(cls, key: str) -> "CacheOp":
        return cls(CacheCommand.DEL, key)


class CacheBackend(Protocol):
    async def execute(self, ops: Sequence[CacheOp]) -> list[Any]:
        """Run all operations in one round trip.

        Results are in request order: the stored string (or None) for GET,
        backend-specific acknowledgements for SET and DEL.
        """
        ...


class InMemoryCacheBackend:
    """Dict-backed cache backend for tests and local development."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}
        self.round_trips = 0

    async def execute(self, ops: Sequence[CacheOp]) -> list[Any]:
        self.round_trips += 1
        results: list[Any] = []
        for op in ops:
            if op.command == CacheCommand.GET:
                results.append(self._store.get(op.key))
            elif op.command == CacheCommand.SET:
                self._store[op.key] = op.value if op.value is not None else ""
                results.append(True)
            elif op.command == CacheCommand.DEL:
                results.append(1 if self._store.pop(op.key, None) is not None else 0)
            else:
                raise ValueError(f"Unsupported cache command: {op.command}")
        return results

    def keys(self) -> list[str]:
        return list(self._store)

    def raw(self, key: str) -> str | None:
        return self._store.get(key)
