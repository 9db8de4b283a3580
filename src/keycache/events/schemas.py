"""Record lifecycle events.

Emitted by the host application after a record is created, updated or
deleted in the backing store, and consumed by CacheSyncWriter to keep the
cache in step.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4


class EventType(str, Enum):
    """Type of record change event."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class RecordEvent:
    """Event for a record change.

    ``record`` is the plain-data projection after the change; for deletes it
    is the last known state, or None when the host no longer has it.
    """

    event_type: EventType
    entity: str
    record: dict[str, Any] | None = None
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
