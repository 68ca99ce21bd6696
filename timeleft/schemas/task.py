from datetime import date, datetime, time
from typing import Any, Optional
from pydantic import ConfigDict, Field, field_validator
from ..models import TaskPriority, RepeatType
from .group import CamelModel, TaskGroupRef

# Largest value an SQLite INTEGER column holds.
MAX_REPEAT_INTERVAL = 2**63 - 1

DATE_FIELDS = ("due_date", "reminder_date", "repeat_end_date")

_DATE_LABELS = {
    "due_date": "due date",
    "reminder_date": "reminder date",
    "repeat_end_date": "repeat end date",
}


def coerce_datetime(value: Any, label: str = "date") -> Any:
    """Normalize ISO-8601 strings, dates and datetimes to naive local datetimes.

    Aware values are converted to local wall-clock time first so calendar-day
    comparisons happen in the user's own day. Anything else is returned as-is
    for pydantic to judge.
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid {label}")
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time())
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


class TaskCreate(CamelModel):
    """Every writable task field; also used to check merged records on update."""
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    completed: bool = False
    due_date: Optional[datetime] = None
    priority: TaskPriority = TaskPriority.NORMAL
    list_name: Optional[str] = Field(None, max_length=100)
    group_id: Optional[str] = None
    reminder_enabled: bool = False
    reminder_date: Optional[datetime] = None
    repeat_enabled: bool = False
    repeat_type: Optional[RepeatType] = None
    repeat_interval: Optional[int] = Field(None, ge=1, le=MAX_REPEAT_INTERVAL)
    repeat_end_date: Optional[datetime] = None

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def parse_dates(cls, v, info):
        return coerce_datetime(v, _DATE_LABELS[info.field_name])

    @field_validator(*DATE_FIELDS)
    @classmethod
    def local_dates(cls, v):
        # pydantic itself yields aware values for epoch numbers
        if v is not None and v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, v):
        if v is None or v == "":
            return TaskPriority.NORMAL
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("reminder_enabled", "repeat_enabled", mode="before")
    @classmethod
    def default_flags(cls, v):
        return False if v is None else v


class TaskUpdate(CamelModel):
    """Typed partial update; only fields that were set are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
    due_date: Optional[datetime] = None
    priority: Optional[TaskPriority] = None
    list_name: Optional[str] = None
    group_id: Optional[str] = None
    reminder_enabled: Optional[bool] = None
    reminder_date: Optional[datetime] = None
    repeat_enabled: Optional[bool] = None
    repeat_type: Optional[RepeatType] = None
    repeat_interval: Optional[int] = None
    repeat_end_date: Optional[datetime] = None

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def parse_dates(cls, v, info):
        return coerce_datetime(v, _DATE_LABELS[info.field_name])


class TaskRead(CamelModel):
    """A task as returned to callers, with its group inlined and due flags derived."""
    id: str
    title: str
    description: Optional[str] = None
    completed: bool
    due_date: Optional[datetime] = None
    priority: TaskPriority
    list_name: Optional[str] = None
    group_id: Optional[str] = None
    group: Optional[TaskGroupRef] = None
    reminder_enabled: bool
    reminder_date: Optional[datetime] = None
    repeat_enabled: bool
    repeat_type: Optional[RepeatType] = None
    repeat_interval: Optional[int] = None
    repeat_end_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    is_overdue: bool = False
    is_due_today: bool = False
    is_due_tomorrow: bool = False
