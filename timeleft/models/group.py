from datetime import datetime
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from .task import new_id

# Colours handed out to groups created without one.
GROUP_COLORS = (
    "#6366f1", "#8b5cf6", "#ec4899", "#f43f5e", "#ef4444",
    "#f97316", "#f59e0b", "#eab308", "#84cc16", "#22c55e",
    "#10b981", "#14b8a6", "#06b6d4", "#0ea5e9", "#3b82f6",
)


class TaskGroup(SQLModel, table=True):
    """A named, coloured category tasks may belong to.

    The task count is not a column; repositories compute it with a join.
    """
    __tablename__ = "task_groups"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(max_length=100, unique=True, index=True)
    color: Optional[str] = Field(default=None, max_length=7)
    description: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime, index=True)
    updated_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
