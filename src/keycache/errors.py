"""Exception types raised by keycache.

Transport failures from Redis or the database are not wrapped; they reach
the caller as the driver raised them. Only conditions that keycache itself
detects get a dedicated type.
"""

from __future__ import annotations


class KeycacheError(Exception):
    """Base class for keycache errors."""


class CachePayloadError(KeycacheError, ValueError):
    """A cache entry could not be decoded as a JSON payload."""

    def __init__(self, cache_key: str, payload: str | bytes, cause: Exception | None = None):
        self.cache_key = cache_key
        self.payload = payload
        preview = payload[:64] if payload else payload
        super().__init__(f"Malformed cache payload at {cache_key!r}: {preview!r}")
        if cause is not None:
            self.__cause__ = cause


class UnknownLookupFieldError(KeycacheError, KeyError):
    """Lookup on a field that does not uniquely identify a record."""

    def __init__(self, entity: str, field: str, allowed: list[str]):
        self.entity = entity
        self.field = field
        self.allowed = allowed
        super().__init__(f"{entity} cannot be looked up by {field!r}; allowed fields: {allowed}")

    def __str__(self) -> str:
        return str(self.args[0])
