from __future__ import annotations
from typing import Dict, List, Optional

from task_tracker.domain.store import UsernameTakenError
from task_tracker.domain.task_models import (
    Task, TaskCreate, TaskUpdate, new_task_id, next_updated_at, utcnow,
)
from task_tracker.domain.user_models import User, UserCreate, new_user_id

class InMemoryTaskStore:
    """
    Process-local store. Nothing survives a restart.
    Each method finishes without awaiting, so interleaved requests never
    see a half-applied change.
    """
    def __init__(self):
        self._users: Dict[str, User] = {}
        self._tasks: Dict[str, Task] = {}

    async def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.username == username), None)

    async def create_user(self, data: UserCreate) -> User:
        if await self.get_user_by_username(data.username) is not None:
            raise UsernameTakenError(data.username)
        user = User(id=new_user_id(), username=data.username, password=data.password)
        self._users[user.id] = user
        return user

    async def list_tasks(self) -> List[Task]:
        # newest first; among equal timestamps the later insert wins (stable sort)
        return sorted(
            reversed(list(self._tasks.values())),
            key=lambda t: t.created_at,
            reverse=True,
        )

    async def get_task(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    async def create_task(self, data: TaskCreate) -> Task:
        now = utcnow()
        task = Task(
            id=new_task_id(),
            title=data.title,
            status=data.status,
            priority=data.priority,
            due_date=data.due_date,
            created_at=now,
            updated_at=now,
        )
        self._tasks[task.id] = task
        return task

    async def update_task(self, task_id: str, patch: TaskUpdate) -> Optional[Task]:
        existing = self._tasks.get(task_id)
        if existing is None:
            return None
        updated = existing.model_copy(
            update={**patch.changes(), "updated_at": next_updated_at(existing.updated_at)}
        )
        self._tasks[task_id] = updated
        return updated

    async def delete_task(self, task_id: str) -> bool:
        return self._tasks.pop(task_id, None) is not None

    async def close(self) -> None:
        return None
