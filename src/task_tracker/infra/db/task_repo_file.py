from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from task_tracker.domain.task_models import Task, TaskCreate, TaskUpdate
from task_tracker.infra.db.task_repo_memory import InMemoryTaskStore

logger = logging.getLogger("task_tracker.store")


def default_tasks_path() -> Path:
    return Path.cwd() / "tasks.json"


class FileTaskStore(InMemoryTaskStore):
    """
    In-memory store that mirrors its tasks into a JSON file.

    Every successful create/update/delete rewrites the whole file. A failed
    write is logged and otherwise ignored: the caller still gets its result.
    Saves run one at a time and each replaces the file in a single rename,
    so the file always holds a complete snapshot. Users stay in memory only.
    """

    def __init__(self, path: Optional[Path] = None):
        super().__init__()
        self.path = Path(path) if path is not None else default_tasks_path()
        self._save_lock = asyncio.Lock()

    async def load(self) -> None:
        """Replace the task collection with the file contents. Never raises."""
        self._tasks.clear()
        try:
            raw = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
            items = json.loads(raw)
        except (OSError, ValueError) as e:
            logger.info(
                "store.file.empty",
                extra={"category": "store", "event": "store.file.empty", "path": str(self.path), "reason": str(e)},
            )
            return

        if not isinstance(items, list):
            logger.warning(
                "store.file.invalid",
                extra={"category": "store", "event": "store.file.invalid", "path": str(self.path)},
            )
            return

        for item in items:
            try:
                task = Task.model_validate(item)
            except ValidationError:
                logger.warning(
                    "store.file.skip",
                    extra={"category": "store", "event": "store.file.skip", "path": str(self.path)},
                )
                continue
            self._tasks[task.id] = task

        logger.info(
            "store.file.loaded",
            extra={"category": "store", "event": "store.file.loaded", "path": str(self.path), "count": len(self._tasks)},
        )

    async def save(self) -> None:
        async with self._save_lock:
            # taken under the lock, so the last save writes the latest state
            payload = json.dumps(
                [t.model_dump(mode="json", by_alias=True) for t in self._tasks.values()],
                indent=2,
            )
            try:
                await asyncio.to_thread(_replace_file, self.path, payload)
            except OSError:
                logger.exception(
                    "store.file.save_failed",
                    extra={"category": "store", "event": "store.file.save_failed", "path": str(self.path)},
                )

    async def create_task(self, data: TaskCreate) -> Task:
        task = await super().create_task(data)
        await self.save()
        return task

    async def update_task(self, task_id: str, patch: TaskUpdate) -> Optional[Task]:
        task = await super().update_task(task_id, patch)
        if task is not None:
            await self.save()
        return task

    async def delete_task(self, task_id: str) -> bool:
        deleted = await super().delete_task(task_id)
        if deleted:
            await self.save()
        return deleted


def _replace_file(path: Path, payload: str) -> None:
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise
