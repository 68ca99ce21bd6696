"""Request/response handlers for task group operations."""

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..crud import TaskGroupRepository
from ..schemas.group import TaskGroupRead

logger = logging.getLogger(__name__)

_repo = TaskGroupRepository()


def dump_group(group: TaskGroupRead) -> Dict[str, Any]:
    return group.model_dump(mode="json", by_alias=True)


async def list_groups(repo: Optional[TaskGroupRepository] = None) -> List[Dict[str, Any]]:
    repo = repo or _repo
    try:
        groups = await repo.list()
    except Exception as e:
        logger.error(f"Error fetching task groups: {e}")
        raise
    return [dump_group(group) for group in groups]


async def create_group(data: Mapping[str, Any], repo: Optional[TaskGroupRepository] = None) -> Dict[str, Any]:
    repo = repo or _repo
    try:
        group = await repo.create(data)
    except Exception as e:
        logger.error(f"Error creating task group: {e}")
        raise
    return dump_group(group)


async def update_group(
    group_id: str,
    data: Mapping[str, Any],
    repo: Optional[TaskGroupRepository] = None,
) -> Dict[str, Any]:
    repo = repo or _repo
    try:
        group = await repo.update(group_id, data)
    except Exception as e:
        logger.error(f"Error updating task group {group_id}: {e}")
        raise
    return dump_group(group)


async def delete_group(group_id: str, repo: Optional[TaskGroupRepository] = None) -> None:
    repo = repo or _repo
    try:
        await repo.delete(group_id)
    except Exception as e:
        logger.error(f"Error deleting task group {group_id}: {e}")
        raise
