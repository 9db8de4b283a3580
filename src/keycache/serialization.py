"""Compact JSON encoding for cache payloads.

Payloads are the plain-data projection of a record, encoded with orjson
and stored as text. Key order follows the projection's insertion order so
that every slot written for one record is byte-identical.
"""

from __future__ import annotations

from typing import Any

import orjson

from keycache.errors import CachePayloadError


def dumps(value: Any) -> str:
    """Encode a plain-data value as compact JSON text."""
    return orjson.dumps(value).decode("utf-8")


def loads(payload: str | bytes, cache_key: str = "") -> Any:
    """Decode a cache payload.

    Raises:
        CachePayloadError: If the payload is not valid JSON.
    """
    try:
        return orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        raise CachePayloadError(cache_key, payload, e) from e
