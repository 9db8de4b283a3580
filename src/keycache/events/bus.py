"""In-process delivery of record lifecycle events.

Events are dispatched from a single asyncio task, so every handler sees
the changes to a record in the order they were published. Handlers can
subscribe to a subset of entities; a failing handler is logged and the
remaining handlers still run.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from keycache.events.schemas import RecordEvent
from keycache.observability.logging import LogContext

logger = logging.getLogger(__name__)


EventHandler = Callable[[RecordEvent], Awaitable[None]]


class RecordEventBus:
    """asyncio.Queue backed bus for RecordEvent."""

    def __init__(self, max_size: int = 10000):
        self._queue: asyncio.Queue[RecordEvent] = asyncio.Queue(maxsize=max_size)
        # (handler, entities it wants; None means all)
        self._handlers: list[tuple[EventHandler, frozenset[str] | None]] = []
        self._task: asyncio.Task[None] | None = None

    async def publish(self, event: RecordEvent) -> None:
        """Queue an event; waits while the queue is full."""
        await self._queue.put(event)

    async def subscribe(self, handler: EventHandler, entities: Iterable[str] | None = None) -> None:
        """Register a handler, optionally only for some entity names."""
        self._handlers.append((handler, frozenset(entities) if entities is not None else None))

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._dispatch_loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _dispatch_loop(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self.dispatch(event)
            finally:
                self._queue.task_done()

    async def dispatch(self, event: RecordEvent) -> None:
        """Hand one event to every handler subscribed to its entity."""
        with LogContext(entity=event.entity):
            for handler, entities in self._handlers:
                if entities is not None and event.entity not in entities:
                    continue
                try:
                    await handler(event)
                except Exception:
                    logger.exception(
                        "Error handling %s event",
                        event.event_type.value,
                        extra={"event_id": event.event_id},
                    )

    @property
    def pending_count(self) -> int:
        """Number of events waiting to be dispatched."""
        return self._queue.qsize()

    async def drain(self) -> None:
        """Wait until every published event has been dispatched."""
        await self._queue.join()
