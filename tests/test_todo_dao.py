"""
Tests for the TodoDAO statement helpers.

The mocked-session tests pin down that every operation is one statement;
the SQLite-backed tests check the store semantics themselves.
"""
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from tasktrack.dao import TodoDAO
from tasktrack.models import Priority, TodoFields


def _values(**overrides):
    fields = TodoFields.model_validate(
        {"title": "Buy milk", "priority": "Low", "project": "Errands", "due_date": "2024-06-01", **overrides}
    )
    return fields.to_values()


class TestTodoDAOStatements:
    """Each DAO call issues exactly one statement and never commits."""

    @pytest.mark.asyncio
    async def test_update_issues_single_execute(self):
        dao = TodoDAO()
        session = AsyncMock()
        result = MagicMock()
        result.rowcount = 1
        session.execute = AsyncMock(return_value=result)

        matched = await dao.set_completion(session, 7, True)

        assert matched == 1
        assert session.execute.await_count == 1
        session.commit.assert_not_called()
        sql = str(session.execute.call_args.args[0])
        assert "UPDATE todo SET is_completed" in sql
        assert "title" not in sql

    @pytest.mark.asyncio
    async def test_replace_never_touches_completion(self):
        dao = TodoDAO()
        session = AsyncMock()
        result = MagicMock()
        result.rowcount = 0
        session.execute = AsyncMock(return_value=result)

        matched = await dao.replace_fields(session, 7, _values())

        assert matched == 0
        sql = str(session.execute.call_args.args[0])
        assert "is_completed" not in sql
        for col in ("title", "description", "priority", "project", "due_date"):
            assert col in sql

    @pytest.mark.asyncio
    async def test_delete_issues_single_execute(self):
        dao = TodoDAO()
        session = AsyncMock()
        result = MagicMock()
        result.rowcount = 0
        session.execute = AsyncMock(return_value=result)

        assert await dao.delete(session, 99) == 0
        assert "DELETE FROM todo" in str(session.execute.call_args.args[0])


class TestTodoDAOStore:
    @pytest.mark.asyncio
    async def test_insert_returns_assigned_id_and_defaults(self, db_session):
        dao = TodoDAO()
        row = await dao.insert(db_session, _values())
        await db_session.commit()

        assert row.id == 1
        assert row.title == "Buy milk"
        assert row.priority is Priority.LOW
        assert row.due_date == date(2024, 6, 1)
        assert row.is_completed is False

    @pytest.mark.asyncio
    async def test_list_all_newest_first(self, db_session):
        dao = TodoDAO()
        for title in ("one", "two", "three"):
            await dao.insert(db_session, _values(title=title))
        await db_session.commit()

        rows = await dao.list_all(db_session)
        assert [r.title for r in rows] == ["three", "two", "one"]
        assert [r.id for r in rows] == [3, 2, 1]

    @pytest.mark.asyncio
    async def test_list_all_empty(self, db_session):
        assert await TodoDAO().list_all(db_session) == []

    @pytest.mark.asyncio
    async def test_ids_are_not_reused_after_delete(self, db_session):
        dao = TodoDAO()
        await dao.insert(db_session, _values(title="a"))
        second = await dao.insert(db_session, _values(title="b"))
        await db_session.commit()
        await dao.delete(db_session, second.id)
        await db_session.commit()

        third = await dao.insert(db_session, _values(title="c"))
        await db_session.commit()
        assert third.id == second.id + 1

    @pytest.mark.asyncio
    async def test_missing_title_rejected_by_store(self, db_session):
        with pytest.raises(IntegrityError):
            await TodoDAO().insert(db_session, _values(title=None))
        await db_session.rollback()

    @pytest.mark.asyncio
    async def test_empty_title_rejected_by_store(self, db_session):
        with pytest.raises(IntegrityError):
            await TodoDAO().insert(db_session, _values(title=""))
        await db_session.rollback()

    @pytest.mark.asyncio
    async def test_blank_title_rejected_by_store(self, db_session):
        with pytest.raises(IntegrityError):
            await TodoDAO().insert(db_session, _values(title="   "))
        await db_session.rollback()

    @pytest.mark.asyncio
    async def test_rowcounts_report_matches(self, db_session):
        dao = TodoDAO()
        row = await dao.insert(db_session, _values())
        await db_session.commit()

        assert await dao.set_completion(db_session, row.id, True) == 1
        assert await dao.set_completion(db_session, 404, True) == 0
        assert await dao.delete(db_session, row.id) == 1
        assert await dao.delete(db_session, row.id) == 0
