"""Unit tests for the connection lifecycle."""

import asyncio

import pytest
from sqlalchemy import DateTime
from timeleft.database import Database
from timeleft.errors import StoreConnectionError
from timeleft.models import Task, TaskGroup


@pytest.mark.asyncio
async def test_connect_is_idempotent(tmp_path):
    """Test that a second connect keeps the same engine."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'life.db'}")
    assert db.is_connected is False

    await db.connect()
    engine = db.engine
    await db.connect()

    assert db.is_connected is True
    assert db.engine is engine
    await db.disconnect()


@pytest.mark.asyncio
async def test_disconnect_then_reconnect(tmp_path):
    """Test that disconnect resets state and connect re-establishes it."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'life.db'}")
    await db.connect()
    first = db.engine

    await db.disconnect()
    assert db.is_connected is False
    with pytest.raises(StoreConnectionError):
        db.engine

    await db.connect()
    assert db.is_connected is True
    assert db.engine is not first
    await db.disconnect()


@pytest.mark.asyncio
async def test_disconnect_when_not_connected(tmp_path):
    """Test that disconnecting twice is harmless."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'life.db'}")
    await db.disconnect()
    assert db.is_connected is False


@pytest.mark.asyncio
async def test_unreachable_store(tmp_path):
    """Test that an unreachable store raises StoreConnectionError and stays disconnected."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'no' / 'such' / 'dir' / 'x.db'}")

    with pytest.raises(StoreConnectionError) as exc_info:
        await db.connect()

    assert isinstance(exc_info.value, ConnectionError)
    assert exc_info.value.__cause__ is not None
    assert db.is_connected is False


@pytest.mark.asyncio
async def test_repositories_connect_on_demand(tmp_path):
    """Test that repository calls establish the connection themselves."""
    from timeleft.crud import TaskRepository

    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'lazy.db'}")
    repo = TaskRepository(db)

    assert await repo.list() == []
    assert db.is_connected is True
    await db.disconnect()


def test_reconnect_under_a_new_event_loop(tmp_path):
    """Test concurrent connects work again after disconnect in a later asyncio.run."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'loops.db'}")

    async def cycle():
        await asyncio.gather(db.connect(), db.connect())
        assert db.is_connected is True
        await db.disconnect()

    asyncio.run(cycle())
    asyncio.run(cycle())
    assert db.is_connected is False


def test_timestamp_columns_store_naive_datetimes():
    """Test that timestamp columns use a plain DateTime type."""
    for table, names in (
        (Task.__table__, ("due_date", "reminder_date", "repeat_end_date", "created_at", "updated_at")),
        (TaskGroup.__table__, ("created_at", "updated_at")),
    ):
        for name in names:
            column_type = table.c[name].type
            assert type(column_type) is DateTime
            assert column_type.timezone is False
