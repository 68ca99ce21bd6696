"""Database connection lifecycle for timeleft.

One async engine per process. Repositories call connect() before every
operation; it is a no-op once the engine is up. Use db.session.get_session()
for database sessions.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel

from .config import get_settings
from .errors import StoreConnectionError

# Import models so they're registered with SQLModel.metadata
from .models import Task, TaskGroup  # noqa: F401

logger = logging.getLogger(__name__)


class Database:
    """Owns the async engine and its connected/disconnected state.

    Attributes:
        url: SQLAlchemy async database URL
        echo: Whether the engine echoes SQL
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._lock: Optional[asyncio.Lock] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StoreConnectionError("Database is not connected")
        return self._engine

    async def connect(self) -> None:
        """Create the engine, check the store answers and create missing tables.

        Raises:
            StoreConnectionError: If the store cannot be reached
        """
        if self._engine is not None:
            return
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            if self._engine is not None:
                return
            engine = create_async_engine(self.url, echo=self.echo)
            try:
                async with engine.begin() as conn:
                    await conn.run_sync(SQLModel.metadata.create_all)
            except Exception as e:
                await engine.dispose()
                logger.error(f"Error connecting to database {self.url}: {e}")
                raise StoreConnectionError(f"Could not connect to {self.url}") from e
            self._engine = engine
            logger.info(f"Database connected: {self.url}")

    async def disconnect(self) -> None:
        if self._engine is None:
            return
        engine, self._engine = self._engine, None
        # Locks bind to the event loop that first waits on them.
        self._lock = None
        await engine.dispose()
        logger.info("Database disconnected")


_settings = get_settings()
database = Database(_settings.database_url, echo=_settings.sql_echo)


async def connect_db() -> None:
    """Connect the process-wide database."""
    await database.connect()


async def disconnect_db() -> None:
    """Disconnect the process-wide database."""
    await database.disconnect()
