"""Seed the task store with a welcome task.

Usage:
    python -m timeleft.seed
"""

import asyncio
import logging
from datetime import datetime, timedelta

from .config import get_settings
from .crud import TaskRepository
from .database import connect_db, disconnect_db
from .schemas.task import TaskRead

logger = logging.getLogger(__name__)


async def add_welcome_task(repo: TaskRepository) -> TaskRead:
    return await repo.create({
        "title": "Sample Task - Welcome to Time Left!",
        "description": "This is a dummy task to get you started. You can edit or delete it.",
        "dueDate": datetime.now() + timedelta(days=7),
        "priority": "normal",
        "listName": "General",
    })


async def run() -> None:
    await connect_db()
    try:
        task = await add_welcome_task(TaskRepository())
        logger.info(f"Dummy task created: id={task.id} title={task.title!r} due={task.due_date}")
    finally:
        await disconnect_db()


def main() -> None:
    logging.basicConfig(level=get_settings().log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(run())


if __name__ == "__main__":
    main()
