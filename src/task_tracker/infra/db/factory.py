from __future__ import annotations

import logging

from task_tracker.config import STORE_FILE, Settings
from task_tracker.domain.store import TaskStore
from task_tracker.infra.db.engine import make_database_url, make_engine, make_sessionmaker
from task_tracker.infra.db.task_repo_file import FileTaskStore
from task_tracker.infra.db.task_repo_memory import InMemoryTaskStore
from task_tracker.infra.db.task_repo_sql import SQLTaskStore

logger = logging.getLogger("task_tracker.system")


async def open_store(settings: Settings) -> TaskStore:
    """
    Pick and initialise the backend. Called once at startup.

    DATABASE_URL wins when set; otherwise TASK_STORE chooses between the
    file-backed and the plain in-memory store.
    """
    if settings.database_url:
        url = make_database_url(settings.database_url)
        engine = make_engine(url)
        store = SQLTaskStore(engine, make_sessionmaker(engine))
        await store.create_schema()
        logger.info(
            "store.ready",
            extra={"category": "system", "event": "store.ready", "backend": "sql", "dialect": engine.dialect.name},
        )
        return store

    if settings.task_store == STORE_FILE:
        store = FileTaskStore(settings.tasks_file)
        await store.load()
        logger.info(
            "store.ready",
            extra={"category": "system", "event": "store.ready", "backend": "file", "path": str(store.path)},
        )
        return store

    logger.info("store.ready", extra={"category": "system", "event": "store.ready", "backend": "memory"})
    return InMemoryTaskStore()
