"""Shared fixtures for keycache tests."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from keycache.cache.backend import CacheOp, InMemoryCacheBackend
from keycache.engine import CacheAsideEngine
from keycache.resolver import Resolver
from keycache.store.base import InMemoryRecordStore

ENTRIES = [
    {"_id": "id1", "slug": "slug1", "title": "Breaking Bad"},
    {"_id": "id3", "slug": "slug3", "title": "Prison Break"},
]


class RecordingCacheBackend(InMemoryCacheBackend):
    """In-memory backend that remembers every batch it ran."""

    def __init__(self) -> None:
        super().__init__()
        self.batches: list[list[CacheOp]] = []

    async def execute(self, ops: Sequence[CacheOp]) -> list[Any]:
        self.batches.append(list(ops))
        return await super().execute(ops)


class MissRecorder:
    """Observer collecting (entity, key) pairs."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def __call__(self, entity: str, key: str) -> None:
        self.calls.append((entity, key))

    @property
    def keys(self) -> list[str]:
        return [key for _, key in self.calls]


@pytest.fixture
def entries() -> list[dict[str, Any]]:
    return [dict(entry) for entry in ENTRIES]


@pytest.fixture
def store(entries: list[dict[str, Any]]) -> InMemoryRecordStore:
    return InMemoryRecordStore(entries)


@pytest.fixture
def cache() -> RecordingCacheBackend:
    return RecordingCacheBackend()


@pytest.fixture
def cache_misses() -> MissRecorder:
    return MissRecorder()


@pytest.fixture
def data_misses() -> MissRecorder:
    return MissRecorder()


@pytest.fixture
def make_engine(
    store: InMemoryRecordStore,
    cache: RecordingCacheBackend,
    cache_misses: MissRecorder,
    data_misses: MissRecorder,
):
    """Factory for an Entry engine wired to the shared fixtures."""

    def factory(
        enable: bool = True,
        additional_cache_keys: Sequence[str] = ("slug",),
        heal_malformed: bool = False,
    ) -> CacheAsideEngine:
        resolver = Resolver("Entry", store, on_data_miss=data_misses)
        return CacheAsideEngine(
            "Entry",
            cache,
            resolver,
            enable=enable,
            additional_cache_keys=additional_cache_keys,
            on_cache_miss=cache_misses,
            heal_malformed=heal_malformed,
        )

    return factory
