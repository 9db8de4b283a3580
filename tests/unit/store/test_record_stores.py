"""Tests for record store adapters."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from keycache.store.base import InMemoryRecordStore, field_value, project_record
from keycache.store import db as db_module
from keycache.store import sql as sql_module
from keycache.store.sql import RecordTable, SqlRecordStore


class TestInMemoryRecordStore:
    """Test list-backed store."""

    @pytest.mark.asyncio
    async def test_find_by_field(self, store: InMemoryRecordStore) -> None:
        found = await store.find("slug", ["slug3", "nope"])
        assert found == [{"_id": "id3", "slug": "slug3", "title": "Prison Break"}]

    @pytest.mark.asyncio
    async def test_remove(self, store: InMemoryRecordStore) -> None:
        store.remove("_id", "id1")
        assert await store.find("_id", ["id1"]) == []

    def test_projection_is_a_copy(self) -> None:
        record = {"_id": "id1"}
        projected = project_record(record)
        projected["x"] = 1
        assert record == {"_id": "id1"}
        assert field_value(record, "missing") is None


class TestSqlRecordStore:
    """Test SQL store with a mocked session."""

    def _session_factory(self, docs: list[dict]) -> tuple[MagicMock, AsyncMock]:
        result = MagicMock()
        result.scalars.return_value.all.return_value = docs
        session = AsyncMock()
        session.execute.return_value = result
        session.__aenter__.return_value = session
        session.__aexit__.return_value = None
        return MagicMock(return_value=session), session

    def test_table_definition(self) -> None:
        assert RecordTable.__tablename__ == "records"
        assert {"id", "entity", "doc"} <= set(RecordTable.__table__.columns.keys())

    def test_find_statement_filters_entity_and_field(self) -> None:
        store = SqlRecordStore("Entry", MagicMock())

        stmt = store._find_statement("slug", ["slug1", "slug3"])
        sql = str(stmt.compile(dialect=postgresql.dialect()))

        assert "records.entity" in sql
        assert "IN" in sql
        assert "->>" in sql

    @pytest.mark.asyncio
    async def test_find_runs_one_query(self) -> None:
        docs = [{"_id": "id1", "slug": "slug1"}]
        factory, session = self._session_factory(docs)
        store = SqlRecordStore("Entry", factory)

        assert await store.find("_id", ["id1", "id2"]) == docs
        session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_find_without_keys_skips_query(self) -> None:
        factory, session = self._session_factory([])
        store = SqlRecordStore("Entry", factory)

        assert await store.find("_id", []) == []
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_default_session_factory(self, monkeypatch) -> None:
        factory, session = self._session_factory([{"_id": "id1"}])
        monkeypatch.setattr(sql_module, "get_session_factory", lambda: factory)
        store = SqlRecordStore("Entry")

        assert await store.find("_id", ["id1"]) == [{"_id": "id1"}]
        factory.assert_called_once_with()


class TestSessionFactory:
    """Test engine and session factory wiring."""

    @pytest.fixture(autouse=True)
    def _fresh_engine(self, monkeypatch) -> MagicMock:
        monkeypatch.setattr(db_module, "_engine", None)
        monkeypatch.setattr(db_module, "_session_factory", None)
        create = MagicMock()
        monkeypatch.setattr(db_module, "create_async_engine", create)
        return create

    def test_engine_uses_database_url(self, _fresh_engine: MagicMock, monkeypatch) -> None:
        monkeypatch.setattr(
            db_module.settings, "database_url", "postgresql+asyncpg://u:p@db:5432/records"
        )

        engine = db_module.get_engine()

        assert engine is db_module.get_engine()
        _fresh_engine.assert_called_once()
        assert _fresh_engine.call_args.args == ("postgresql+asyncpg://u:p@db:5432/records",)

    @pytest.mark.asyncio
    async def test_close_db_disposes_engine(self, _fresh_engine: MagicMock) -> None:
        _fresh_engine.return_value.dispose = AsyncMock()
        db_module.get_engine()

        await db_module.close_db()

        _fresh_engine.return_value.dispose.assert_awaited_once()
        assert db_module._engine is None
