"""Backing store adapters."""

from keycache.store.base import (
    InMemoryRecordStore,
    Record,
    RecordStore,
    field_value,
    project_record,
)
from keycache.store.db import close_db, get_engine, get_session_factory
from keycache.store.sql import RecordTable, SqlRecordStore

__all__ = [
    "InMemoryRecordStore",
    "Record",
    "RecordStore",
    "RecordTable",
    "SqlRecordStore",
    "close_db",
    "get_engine",
    "get_session_factory",
    "field_value",
    "project_record",
]
