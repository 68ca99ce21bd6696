"""Shared fixtures: a fresh SQLite database per test."""

import random

import pytest
import pytest_asyncio

from timeleft.crud import TaskGroupRepository, TaskRepository
from timeleft.database import Database


@pytest_asyncio.fixture
async def db(tmp_path):
    """Create a connected database backed by a temporary file."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}")
    await database.connect()
    yield database
    await database.disconnect()


@pytest.fixture
def tasks(db):
    return TaskRepository(db)


@pytest.fixture
def groups(db):
    return TaskGroupRepository(db, rng=random.Random(7))
