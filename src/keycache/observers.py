"""Miss observers.

Observers are best-effort telemetry: an observer that raises is logged and
ignored, and the read that triggered it carries on. Both plain functions and
coroutine functions are accepted.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

# (entity_name, raw_key) -> None | awaitable
MissObserver = Callable[[str, str], Awaitable[None] | None]


async def notify(observer: MissObserver | None, entity: str, key: str) -> None:
    """Invoke an observer once for a missed key, isolating its failures."""
    if observer is None:
        return

    try:
        result = observer(entity, key)
        if inspect.isawaitable(result):
            await result
    except Exception:
        observer_name = getattr(observer, "__name__", observer.__class__.__name__)
        logger.exception(
            "Miss observer %s failed",
            observer_name,
            extra={"entity": entity, "key": key},
        )
