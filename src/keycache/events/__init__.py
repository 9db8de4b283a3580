"""Record lifecycle events and cache synchronization."""

from keycache.events.bus import EventHandler, RecordEventBus
from keycache.events.schemas import EventType, RecordEvent
from keycache.events.writer import CacheSyncWriter

__all__ = [
    "CacheSyncWriter",
    "EventHandler",
    "EventType",
    "RecordEvent",
    "RecordEventBus",
]
