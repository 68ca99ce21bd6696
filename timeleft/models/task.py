from datetime import datetime
from typing import Optional
from enum import Enum
from uuid import uuid4
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def new_id() -> str:
    return uuid4().hex


class TaskPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class RepeatType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Task(SQLModel, table=True):
    """A single actionable item as stored.

    group_id is a weak reference: it is checked when written, and cleared
    (not cascaded) when its group is deleted. Derived due-date flags are
    never stored; see validation.due_flags.
    """
    __tablename__ = "tasks"

    id: str = Field(default_factory=new_id, primary_key=True)
    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    completed: bool = Field(default=False, index=True)
    # Timestamps are naive local time.
    due_date: Optional[datetime] = Field(default=None, sa_type=DateTime, index=True)
    priority: TaskPriority = Field(default=TaskPriority.NORMAL, index=True)
    list_name: Optional[str] = Field(default=None, max_length=100)
    group_id: Optional[str] = Field(default=None, foreign_key="task_groups.id", index=True)
    reminder_enabled: bool = Field(default=False)
    reminder_date: Optional[datetime] = Field(default=None, sa_type=DateTime, index=True)
    repeat_enabled: bool = Field(default=False)
    repeat_type: Optional[RepeatType] = Field(default=None)
    repeat_interval: Optional[int] = Field(default=None)
    repeat_end_date: Optional[datetime] = Field(default=None, sa_type=DateTime)
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime, index=True)
    updated_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
