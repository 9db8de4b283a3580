"""Cache synchronization on record lifecycle events.

Creates and updates write the record under its primary key and every
additional key in one batch. Deletes clear the same slots in one batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from keycache.events.schemas import EventType, RecordEvent

if TYPE_CHECKING:
    from keycache.engine import CacheAsideEngine
    from keycache.events.bus import RecordEventBus


logger = logging.getLogger(__name__)


class CacheSyncWriter:
    """Applies record events to the cache of the matching entity."""

    def __init__(self, bus: RecordEventBus, engines: Iterable[CacheAsideEngine]):
        self.bus = bus
        self.engines = {engine.entity: engine for engine in engines}
        self._running = False

    async def start(self) -> None:
        """Subscribe to the bus and start it."""
        if self._running:
            return

        self._running = True
        await self.bus.subscribe(self.handle_event, entities=sorted(self.engines))
        await self.bus.start()

        logger.info("CacheSyncWriter started", extra={"entities": sorted(self.engines)})

    async def stop(self) -> None:
        """Stop the bus."""
        self._running = False
        await self.bus.stop()
        logger.info("CacheSyncWriter stopped")

    async def handle_event(self, event: RecordEvent) -> None:
        """Apply one event to the cache."""
        engine = self.engines.get(event.entity)
        if engine is None:
            logger.warning(f"No cache engine for entity: {event.entity}")
            return

        if not engine.enable or event.record is None:
            return

        slots = engine.cache_slots(event.record)

        if event.event_type in (EventType.CREATED, EventType.UPDATED):
            await engine.set_many([(slot, event.record) for slot in slots])
            logger.debug(f"{event.entity} {event.event_type.value}: {slots}")

        elif event.event_type == EventType.DELETED:
            await engine.clear_many(slots)
            logger.debug(f"{event.entity} deleted: {slots}")
