"""timeleft: task and task group storage for the Time Left desktop widget."""

from .crud import UNSPECIFIED, TaskGroupRepository, TaskRepository
from .database import Database, connect_db, database, disconnect_db
from .errors import (
    InvalidReferenceError,
    NotFoundError,
    StoreConnectionError,
    TimeLeftError,
    ValidationError,
    Violation,
)

__all__ = [
    "UNSPECIFIED",
    "TaskRepository",
    "TaskGroupRepository",
    "Database",
    "database",
    "connect_db",
    "disconnect_db",
    "TimeLeftError",
    "ValidationError",
    "InvalidReferenceError",
    "NotFoundError",
    "StoreConnectionError",
    "Violation",
]
