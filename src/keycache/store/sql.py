"""SQLAlchemy record store.

Records live in a single table keyed by entity name, with the document in a
JSON column. A batched lookup is one SELECT filtering the JSON field with
IN, so resolving N keys costs one query regardless of N.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Index, String, func, select
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from keycache.config import settings
from keycache.store.db import get_session_factory


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class RecordTable(Base):
    """Document table shared by all cached entities.

    JSONB on PostgreSQL, plain JSON elsewhere.
    """

    __tablename__ = settings.records_table

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    # Entity type name ("Entry", "User", ...)
    entity: Mapped[str] = mapped_column(String(255), nullable=False)

    doc: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (Index(f"ix_{settings.records_table}_entity", "entity"),)


class SqlRecordStore:
    """Record store for one entity backed by ``RecordTable``.

    Without an explicit session factory the shared one from
    ``keycache.store.db`` is used, built from ``settings.database_url``.
    """

    def __init__(self, entity: str, session_factory: Callable[[], AsyncSession] | None = None):
        self.entity = entity
        self.session_factory = session_factory

    def _find_statement(self, field: str, keys: Sequence[str]) -> Any:
        return select(RecordTable.doc).where(
            RecordTable.entity == self.entity,
            RecordTable.doc[field].as_string().in_(list(keys)),
        )

    async def find(self, field: str, keys: Sequence[str]) -> Sequence[dict[str, Any]]:
        """Fetch all documents whose ``field`` is in ``keys`` in one query."""
        if not keys:
            return []

        factory = self.session_factory or get_session_factory()
        async with factory() as session:
            result = await session.execute(self._find_statement(field, keys))
            return list(result.scalars().all())
