"""Database session management for timeleft."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlmodel.ext.asyncio.session import AsyncSession

from ..database import Database


@asynccontextmanager
async def get_session(db: Database) -> AsyncIterator[AsyncSession]:
    """Connect if needed and yield a session on the shared engine.

    Objects stay usable after commit; callers read them back without a
    second round trip.

    Usage:
        async with get_session(db) as session:
            session.add(task)
            await session.commit()
    """
    await db.connect()
    async with AsyncSession(db.engine, expire_on_commit=False) as session:
        yield session
