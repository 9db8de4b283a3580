"""Per-field accessors over a cache-aside engine.

Each additional cache key gets a pair of accessors, built once when the
model is bound: ``get_by_<field>`` for one key or a list, and
``get_by_<fields>`` for a list. Both are thin wrappers over
``CacheAsideEngine.get_many_by``.

Usage:
    model = CachedModel.bind("Entry", store, cache, additional_cache_keys=["slug"])
    await model.get_by_slug("slug3")
    await model.get_by_slugs(["slug1", "slug3"])
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from keycache.cache.backend import CacheBackend
from keycache.config import Settings, settings
from keycache.engine import CacheAsideEngine
from keycache.observers import MissObserver
from keycache.resolver import Resolver
from keycache.store.base import RecordStore

Result = dict[str, Any] | None


def pluralize(word: str) -> str:
    """English plural for a field name (slug -> slugs, category -> categories)."""
    if word.endswith("y") and len(word) > 1 and word[-2] not in "aeiou":
        return word[:-1] + "ies"
    if word.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"


@dataclass(frozen=True)
class FieldAccessor:
    """Accessor pair for one lookup field."""

    field: str
    one: Callable[[str], Awaitable[Result]]
    many: Callable[[Sequence[str]], Awaitable[list[Result]]]

    async def __call__(self, key: str | Sequence[str]) -> Result | list[Result]:
        if isinstance(key, str):
            return await self.one(key)
        return await self.many(key)


class AccessorTable:
    """Registration table from accessor name to field accessor."""

    def __init__(self) -> None:
        self._by_field: dict[str, FieldAccessor] = {}
        self._by_name: dict[str, tuple[FieldAccessor, bool]] = {}

    @classmethod
    def build(cls, engine: CacheAsideEngine, fields: Iterable[str]) -> "AccessorTable":
        table = cls()
        for field in fields:
            table.register(engine, field)
        return table

    def register(self, engine: CacheAsideEngine, field: str) -> FieldAccessor:
        async def one(key: str) -> Result:
            return await engine.get_by(field, key)

        async def many(keys: Sequence[str]) -> list[Result]:
            return await engine.get_many_by(field, keys)

        accessor = FieldAccessor(field=field, one=one, many=many)
        self._by_field[field] = accessor
        self._by_name[f"get_by_{field}"] = (accessor, False)
        self._by_name[f"get_by_{pluralize(field)}"] = (accessor, True)
        return accessor

    def __getitem__(self, field: str) -> FieldAccessor:
        return self._by_field[field]

    def __contains__(self, field: object) -> bool:
        return field in self._by_field

    def lookup(self, name: str) -> tuple[FieldAccessor, bool] | None:
        """Find an accessor by method name; the flag marks the plural form."""
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return sorted(self._by_name)


class CachedModel:
    """Cache-aware facade for one entity type."""

    def __init__(self, engine: CacheAsideEngine):
        self.engine = engine
        self.accessors = AccessorTable.build(engine, engine.additional_cache_keys)

    @classmethod
    def bind(
        cls,
        entity: str,
        store: RecordStore,
        cache: CacheBackend,
        *,
        config: Settings | None = None,
        enable: bool | None = None,
        additional_cache_keys: Sequence[str] | None = None,
        on_cache_miss: MissObserver | None = None,
        on_data_miss: MissObserver | None = None,
    ) -> "CachedModel":
        """Build the resolver, engine and accessors for an entity.

        Unset options fall back to ``config`` (the global settings by default).
        """
        config = config or settings
        resolver = Resolver(
            entity,
            store,
            on_data_miss=on_data_miss,
            primary_key=config.primary_key,
        )
        engine = CacheAsideEngine(
            entity,
            cache,
            resolver,
            enable=config.enable_cache if enable is None else enable,
            additional_cache_keys=(
                config.additional_cache_keys
                if additional_cache_keys is None
                else additional_cache_keys
            ),
            on_cache_miss=on_cache_miss,
            heal_malformed=config.heal_malformed,
        )
        return cls(engine)

    @property
    def entity(self) -> str:
        return self.engine.entity

    async def get(self, key: str | Sequence[str]) -> Result | list[Result]:
        if isinstance(key, str):
            return await self.engine.get(key)
        return await self.engine.get_many(key)

    async def get_by(self, field: str, key: str | Sequence[str]) -> Result | list[Result]:
        if isinstance(key, str):
            return await self.engine.get_by(field, key)
        return await self.engine.get_many_by(field, key)

    async def get_many(self, keys: Sequence[str]) -> list[Result]:
        return await self.engine.get_many(keys)

    async def get_many_by(self, field: str, keys: Sequence[str]) -> list[Result]:
        return await self.engine.get_many_by(field, keys)

    async def set(self, key: str, value: Any) -> None:
        await self.engine.set(key, value)

    async def set_many(self, entries: Iterable[tuple[str, Any]]) -> None:
        await self.engine.set_many(entries)

    async def clear(self, key: str) -> None:
        await self.engine.clear(key)

    async def clear_many(self, keys: Iterable[str]) -> None:
        await self.engine.clear_many(keys)

    def __getattr__(self, name: str) -> Callable[..., Awaitable[Any]]:
        # Only reached for names not defined on the class
        if name.startswith("_") or "accessors" not in self.__dict__:
            raise AttributeError(name)
        found = self.accessors.lookup(name)
        if found is None:
            raise AttributeError(f"{type(self).__name__!r} has no accessor {name!r}")
        accessor, plural = found
        return accessor.many if plural else accessor
