"""Repositories for persisting tasks and task groups."""

import logging
import random
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from .database import Database, database
from .db.session import get_session
from .errors import InvalidReferenceError, NotFoundError, ValidationError, Violation
from .models import Task, TaskGroup, TaskPriority
from .schemas.group import TaskGroupCreate, TaskGroupRead, TaskGroupRef
from .schemas.task import TaskCreate, TaskRead
from .validation import (
    clean_group,
    clean_task,
    due_flags,
    normalize_group_id,
    pick_group_color,
    to_field_names,
)

logger = logging.getLogger(__name__)

Payload = Union[Mapping[str, Any], BaseModel]


class _Unspecified:
    def __repr__(self) -> str:
        return "UNSPECIFIED"


# Marks an omitted group filter, as opposed to None ("only ungrouped tasks").
UNSPECIFIED: Any = _Unspecified()

_TASK_FIELDS = set(TaskCreate.model_fields)
_GROUP_FIELDS = set(TaskGroupCreate.model_fields)


def _payload(data: Payload) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return dict(data)


def _task_order(statement):
    # Dated tasks first by due date, undated last; newest first on ties.
    return statement.order_by(
        col(Task.due_date).is_(None),
        col(Task.due_date).asc(),
        col(Task.created_at).desc(),
    )


def to_task_read(task: Task, group: Optional[TaskGroup], today: Optional[date] = None) -> TaskRead:
    """Project a stored task into its read record.

    Args:
        task: The stored task
        group: The task's group, already looked up (None if ungrouped)
        today: Reference day for the derived due flags

    Returns:
        TaskRead with the group inlined and due flags set
    """
    return TaskRead.model_validate({
        **task.model_dump(),
        "group": TaskGroupRef.model_validate(group) if group is not None else None,
        **due_flags(task.due_date, task.completed, today),
    })


class TaskRepository:
    """CRUD and queries over tasks.

    Attributes:
        db: Database the repository connects through
    """

    def __init__(self, db: Database = database):
        self.db = db

    # ---- helpers ----

    @staticmethod
    async def _resolve_group(session: AsyncSession, group_id: Optional[str]) -> Optional[TaskGroup]:
        if group_id is None:
            return None
        group = await session.get(TaskGroup, group_id)
        if group is None:
            raise InvalidReferenceError(group_id)
        return group

    @staticmethod
    async def _groups_for(session: AsyncSession, tasks: Iterable[Task]) -> Dict[str, TaskGroup]:
        """Look up the groups referenced by the given tasks in one query."""
        ids = {task.group_id for task in tasks if task.group_id}
        if not ids:
            return {}
        result = await session.exec(select(TaskGroup).where(col(TaskGroup.id).in_(ids)))
        return {group.id: group for group in result.all()}

    async def _read_many(self, session: AsyncSession, statement) -> List[TaskRead]:
        tasks = (await session.exec(_task_order(statement))).all()
        groups = await self._groups_for(session, tasks)
        today = date.today()
        return [to_task_read(task, groups.get(task.group_id), today) for task in tasks]

    async def _get_row(self, session: AsyncSession, task_id: str) -> Task:
        task = await session.get(Task, task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    # ---- public API ----

    async def create(self, data: Payload) -> TaskRead:
        """Create a task.

        Args:
            data: Task fields (camelCase or snake_case keys, or a TaskCreate)

        Returns:
            The created task with its group inlined

        Raises:
            ValidationError: If a field breaks its constraint
            InvalidReferenceError: If groupId names no existing group
        """
        fields = to_field_names(TaskCreate, _payload(data))
        fields["group_id"] = normalize_group_id(fields.get("group_id"))
        cleaned = clean_task(fields)

        async with get_session(self.db) as session:
            group = await self._resolve_group(session, cleaned.group_id)
            task = Task(**cleaned.model_dump())
            session.add(task)
            await session.commit()

        logger.info(f"Created task {task.id} (group={task.group_id})")
        return to_task_read(task, group)

    async def get(self, task_id: str) -> TaskRead:
        async with get_session(self.db) as session:
            task = await self._get_row(session, task_id)
            group = await session.get(TaskGroup, task.group_id) if task.group_id else None
        return to_task_read(task, group)

    async def list(self, include_completed: bool = False, group_id: Any = UNSPECIFIED) -> List[TaskRead]:
        """List tasks ordered by due date (undated last), newest first on ties.

        Args:
            include_completed: Also return completed tasks
            group_id: UNSPECIFIED for every task, None or "" for ungrouped
                tasks only, or a group id for that group's tasks

        Returns:
            List of TaskRead records
        """
        statement = select(Task)
        if not include_completed:
            statement = statement.where(col(Task.completed).is_(False))
        if group_id is not UNSPECIFIED:
            wanted = normalize_group_id(group_id)
            if wanted is None:
                statement = statement.where(col(Task.group_id).is_(None))
            else:
                statement = statement.where(col(Task.group_id) == wanted)

        async with get_session(self.db) as session:
            return await self._read_many(session, statement)

    async def update(self, task_id: str, data: Payload) -> TaskRead:
        """Apply a partial update to a task.

        Only the supplied fields change, except groupId: like on create, an
        empty or missing groupId is written as None.

        Raises:
            NotFoundError: If no task has this id
            ValidationError: If the merged record breaks a constraint
            InvalidReferenceError: If groupId names no existing group
        """
        changes = to_field_names(TaskCreate, _payload(data))
        changes["group_id"] = normalize_group_id(changes.get("group_id"))

        async with get_session(self.db) as session:
            task = await self._get_row(session, task_id)
            merged = {**task.model_dump(include=_TASK_FIELDS), **changes}
            cleaned = clean_task(merged)
            group = await self._resolve_group(session, cleaned.group_id)
            for name in changes:
                setattr(task, name, getattr(cleaned, name))
            task.updated_at = datetime.now()
            session.add(task)
            await session.commit()

        logger.info(f"Updated task {task_id}: {sorted(changes)}")
        return to_task_read(task, group)

    async def delete(self, task_id: str) -> bool:
        """Delete a task.

        Returns:
            True if the task was deleted, False if it did not exist
        """
        async with get_session(self.db) as session:
            task = await session.get(Task, task_id)
            if task is None:
                logger.info(f"Delete skipped, task {task_id} not found")
                return False
            await session.delete(task)
            await session.commit()
        logger.info(f"Deleted task {task_id}")
        return True

    async def _set_completed(self, task_id: str, completed: Optional[bool]) -> TaskRead:
        async with get_session(self.db) as session:
            task = await self._get_row(session, task_id)
            task.completed = (not task.completed) if completed is None else completed
            task.updated_at = datetime.now()
            session.add(task)
            await session.commit()
            group = await session.get(TaskGroup, task.group_id) if task.group_id else None
        logger.debug(f"Task {task_id} completed={task.completed}")
        return to_task_read(task, group)

    async def toggle_complete(self, task_id: str) -> TaskRead:
        """Flip a task's completion status.

        Raises:
            NotFoundError: If no task has this id
        """
        return await self._set_completed(task_id, None)

    async def mark_complete(self, task_id: str) -> TaskRead:
        return await self._set_completed(task_id, True)

    async def mark_incomplete(self, task_id: str) -> TaskRead:
        return await self._set_completed(task_id, False)

    async def list_overdue(self) -> List[TaskRead]:
        """Incomplete tasks due before today."""
        start_of_today = datetime.combine(date.today(), time())
        statement = select(Task).where(
            col(Task.completed).is_(False),
            col(Task.due_date) < start_of_today,
        )
        async with get_session(self.db) as session:
            return await self._read_many(session, statement)

    async def list_due_today(self) -> List[TaskRead]:
        """Incomplete tasks due at any time today."""
        start_of_today = datetime.combine(date.today(), time())
        statement = select(Task).where(
            col(Task.completed).is_(False),
            col(Task.due_date) >= start_of_today,
            col(Task.due_date) < start_of_today + timedelta(days=1),
        )
        async with get_session(self.db) as session:
            return await self._read_many(session, statement)

    async def list_by_priority(self, priority: Union[str, TaskPriority]) -> List[TaskRead]:
        """Incomplete tasks with the given priority."""
        try:
            wanted = TaskPriority(str(getattr(priority, "value", priority)).lower())
        except ValueError:
            raise ValidationError([
                Violation("priority", "enum", "Priority must be low, normal, or high")
            ]) from None
        statement = select(Task).where(
            col(Task.completed).is_(False),
            col(Task.priority) == wanted,
        )
        async with get_session(self.db) as session:
            return await self._read_many(session, statement)


class TaskGroupRepository:
    """CRUD over task groups, each read annotated with its task count.

    Attributes:
        db: Database the repository connects through
        rng: Random source used to pick a colour for groups created without one
    """

    def __init__(self, db: Database = database, rng: Any = random):
        self.db = db
        self.rng = rng

    # ---- helpers ----

    @staticmethod
    async def _with_counts(session: AsyncSession, *where) -> List[TaskGroupRead]:
        """Read groups joined with a live count of the tasks referencing them."""
        statement = (
            select(TaskGroup, func.count(col(Task.id)))
            .outerjoin(Task, col(Task.group_id) == col(TaskGroup.id))
            .where(*where)
            .group_by(col(TaskGroup.id))
            .order_by(col(TaskGroup.name))
        )
        rows = (await session.exec(statement)).all()
        return [
            TaskGroupRead.model_validate({**group.model_dump(), "task_count": count})
            for group, count in rows
        ]

    @staticmethod
    async def _ensure_unique(session: AsyncSession, name: str, exclude_id: Optional[str] = None) -> None:
        statement = select(TaskGroup).where(col(TaskGroup.name) == name)
        if exclude_id is not None:
            statement = statement.where(col(TaskGroup.id) != exclude_id)
        if (await session.exec(statement)).first() is not None:
            raise ValidationError([
                Violation("name", "unique", f"A group named '{name}' already exists")
            ])

    @staticmethod
    async def _commit(session: AsyncSession, name: str) -> None:
        try:
            await session.commit()
        except IntegrityError:
            # Lost a race with a concurrent write of the same name.
            await session.rollback()
            raise ValidationError([
                Violation("name", "unique", f"A group named '{name}' already exists")
            ]) from None

    # ---- public API ----

    async def create(self, data: Payload) -> TaskGroupRead:
        """Create a group, picking a palette colour when none is given.

        Raises:
            ValidationError: On a bad field, bad colour or duplicate name
        """
        fields = to_field_names(TaskGroupCreate, _payload(data))
        if not fields.get("color"):
            fields["color"] = pick_group_color(self.rng)
        cleaned = clean_group(fields)

        async with get_session(self.db) as session:
            await self._ensure_unique(session, cleaned.name)
            group = TaskGroup(**cleaned.model_dump())
            session.add(group)
            await self._commit(session, cleaned.name)

        logger.info(f"Created group {group.id} '{group.name}'")
        return TaskGroupRead.model_validate({**group.model_dump(), "task_count": 0})

    async def get(self, group_id: str) -> TaskGroupRead:
        async with get_session(self.db) as session:
            found = await self._with_counts(session, col(TaskGroup.id) == group_id)
        if not found:
            raise NotFoundError("TaskGroup", group_id)
        return found[0]

    async def find_by_name(self, name: str) -> Optional[TaskGroupRead]:
        """Case-insensitive lookup of a group by its exact name."""
        # SQLite's lower() only folds ASCII, so names are compared here.
        wanted = (name or "").strip().casefold()
        async with get_session(self.db) as session:
            found = await self._with_counts(session)
        return next((group for group in found if group.name.casefold() == wanted), None)

    async def list(self) -> List[TaskGroupRead]:
        """All groups ordered by name, each with its current task count."""
        async with get_session(self.db) as session:
            return await self._with_counts(session)

    async def list_tasks(self, group_id: str, include_completed: bool = True) -> List[TaskRead]:
        """Tasks belonging to a group.

        Raises:
            NotFoundError: If no group has this id
        """
        async with get_session(self.db) as session:
            if await session.get(TaskGroup, group_id) is None:
                raise NotFoundError("TaskGroup", group_id)
        return await TaskRepository(self.db).list(include_completed, group_id)

    async def update(self, group_id: str, data: Payload) -> TaskGroupRead:
        """Apply a partial update to a group.

        An empty colour is replaced by a fresh palette colour.

        Raises:
            NotFoundError: If no group has this id
            ValidationError: On a bad field, bad colour or duplicate name
        """
        changes = to_field_names(TaskGroupCreate, _payload(data))

        async with get_session(self.db) as session:
            group = await session.get(TaskGroup, group_id)
            if group is None:
                raise NotFoundError("TaskGroup", group_id)
            merged = {**group.model_dump(include=_GROUP_FIELDS), **changes}
            if not merged.get("color"):
                merged["color"] = pick_group_color(self.rng)
            cleaned = clean_group(merged)
            if "name" in changes:
                await self._ensure_unique(session, cleaned.name, exclude_id=group_id)
            for name in _GROUP_FIELDS:
                setattr(group, name, getattr(cleaned, name))
            group.updated_at = datetime.now()
            session.add(group)
            await self._commit(session, cleaned.name)
            updated = await self._with_counts(session, col(TaskGroup.id) == group_id)

        logger.info(f"Updated group {group_id}: {sorted(changes)}")
        return updated[0]

    async def delete(self, group_id: str) -> bool:
        """Delete a group, detaching its tasks first.

        Tasks are never deleted: their groupId is set to None, then the group
        row is removed, all in one transaction.

        Returns:
            True if the group was deleted, False if it did not exist
        """
        async with get_session(self.db) as session:
            group = await session.get(TaskGroup, group_id)
            if group is None:
                logger.info(f"Delete skipped, group {group_id} not found")
                return False

            tasks = (await session.exec(select(Task).where(col(Task.group_id) == group_id))).all()
            now = datetime.now()
            for task in tasks:
                task.group_id = None
                task.updated_at = now
                session.add(task)
            await session.flush()

            await session.delete(group)
            await session.commit()

        logger.info(f"Deleted group {group_id}, detached {len(tasks)} task(s)")
        return True
