"""
Persistence contract shared by the memory, file and SQL backends.

Lookups return None for unknown ids instead of raising; delete reports
whether a record was actually removed.
"""
from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from task_tracker.domain.task_models import Task, TaskCreate, TaskUpdate
from task_tracker.domain.user_models import User, UserCreate


class UsernameTakenError(ValueError):
    status_code = 409

    def __init__(self, username: str):
        super().__init__(f"Username already exists: {username}")
        self.username = username


@runtime_checkable
class TaskStore(Protocol):
    async def get_user(self, user_id: str) -> Optional[User]: ...

    async def get_user_by_username(self, username: str) -> Optional[User]: ...

    async def create_user(self, data: UserCreate) -> User: ...

    async def list_tasks(self) -> List[Task]:
        """All tasks, newest `created_at` first."""
        ...

    async def get_task(self, task_id: str) -> Optional[Task]: ...

    async def create_task(self, data: TaskCreate) -> Task: ...

    async def update_task(self, task_id: str, patch: TaskUpdate) -> Optional[Task]: ...

    async def delete_task(self, task_id: str) -> bool: ...

    async def close(self) -> None: ...
