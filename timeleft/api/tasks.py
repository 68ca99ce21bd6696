"""Request/response handlers for task operations.

Each handler takes plain values, returns JSON-ready dicts (camelCase keys,
string ids, ISO dates) and re-raises repository errors after logging them.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..crud import UNSPECIFIED, TaskRepository
from ..schemas.task import TaskRead

logger = logging.getLogger(__name__)

_repo = TaskRepository()


def dump_task(task: TaskRead) -> Dict[str, Any]:
    return task.model_dump(mode="json", by_alias=True)


async def list_tasks(
    include_completed: bool = False,
    group_id: Any = UNSPECIFIED,
    repo: Optional[TaskRepository] = None,
) -> List[Dict[str, Any]]:
    repo = repo or _repo
    try:
        tasks = await repo.list(include_completed, group_id)
    except Exception as e:
        logger.error(f"Error fetching tasks: {e}")
        raise
    return [dump_task(task) for task in tasks]


async def create_task(data: Mapping[str, Any], repo: Optional[TaskRepository] = None) -> Dict[str, Any]:
    repo = repo or _repo
    try:
        task = await repo.create(data)
    except Exception as e:
        logger.error(f"Error creating task: {e}")
        raise
    return dump_task(task)


async def update_task(
    task_id: str,
    data: Mapping[str, Any],
    repo: Optional[TaskRepository] = None,
) -> Dict[str, Any]:
    repo = repo or _repo
    try:
        task = await repo.update(task_id, data)
    except Exception as e:
        logger.error(f"Error updating task {task_id}: {e}")
        raise
    return dump_task(task)


async def delete_task(task_id: str, repo: Optional[TaskRepository] = None) -> None:
    repo = repo or _repo
    try:
        await repo.delete(task_id)
    except Exception as e:
        logger.error(f"Error deleting task {task_id}: {e}")
        raise


async def toggle_task(task_id: str, repo: Optional[TaskRepository] = None) -> Dict[str, Any]:
    repo = repo or _repo
    try:
        task = await repo.toggle_complete(task_id)
    except Exception as e:
        logger.error(f"Error toggling task {task_id}: {e}")
        raise
    return dump_task(task)
