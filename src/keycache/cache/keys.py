"""Cache key schema for keycache.

Key format: {entity}:{raw_key}

Where:
- entity: lowercased entity type name ("entry", "user", ...)
- raw_key: the primary key or additional key value, unmodified

Primary key slots and alias slots share this format, so a record reachable
by id and by slug occupies "entry:<id>" and "entry:<slug>".
"""

from __future__ import annotations


class CacheKeys:
    """Cache key generator following consistent naming convention."""

    SEPARATOR = ":"

    @classmethod
    def with_prefix(cls, entity: str, raw_key: str) -> str:
        """Key for a record slot of the given entity."""
        return f"{entity.lower()}{cls.SEPARATOR}{raw_key}"

