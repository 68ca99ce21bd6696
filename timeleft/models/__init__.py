"""Models package."""
from .task import Task, TaskPriority, RepeatType, new_id
from .group import TaskGroup, GROUP_COLORS

__all__ = ["Task", "TaskPriority", "RepeatType", "TaskGroup", "GROUP_COLORS", "new_id"]
