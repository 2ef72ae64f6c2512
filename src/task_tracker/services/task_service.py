import logging
from typing import List, Optional
from task_tracker.domain.store import TaskStore
from task_tracker.domain.task_models import Task, TaskCreate, TaskUpdate

logger = logging.getLogger("task_tracker.tasks")

class TaskService:
    def __init__(self, store: TaskStore):
        self.store = store

    async def create_task(self, data: TaskCreate) -> Task:
        task = await self.store.create_task(data)
        logger.info("task.create", extra={"category": "tasks", "event": "task.create", "task_id": task.id, "title": task.title})
        return task

    async def get_task(self, task_id: str) -> Optional[Task]:
        return await self.store.get_task(task_id)

    async def list_tasks(self) -> List[Task]:
        return await self.store.list_tasks()

    async def update_task(self, task_id: str, patch: TaskUpdate) -> Optional[Task]:
        task = await self.store.update_task(task_id, patch)
        logger.info(
            "task.update",
            extra={
                "category": "tasks",
                "event": "task.update",
                "task_id": task_id,
                "fields": sorted(patch.changes()),
                "found": task is not None,
            },
        )
        return task

    async def delete_task(self, task_id: str) -> bool:
        deleted = await self.store.delete_task(task_id)
        logger.info("task.delete", extra={"category": "tasks", "event": "task.delete", "task_id": task_id, "found": deleted})
        return deleted
