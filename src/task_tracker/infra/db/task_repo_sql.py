from __future__ import annotations
from datetime import datetime
from typing import Optional, List

from sqlalchemy import Integer, String, DateTime, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from task_tracker.domain.store import UsernameTakenError
from task_tracker.domain.task_models import (
    Task, TaskCreate, TaskUpdate, TaskStatus, TaskPriority,
    as_utc, new_task_id, next_updated_at, utcnow,
)
from task_tracker.domain.user_models import User, UserCreate, new_user_id


class Base(DeclarativeBase):
    pass


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    def to_domain(self) -> User:
        return User(id=self.id, username=self.username, password=self.password)


class TaskRow(Base):
    __tablename__ = "tasks"

    # insertion sequence, used to break created_at ties
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False)
    priority: Mapped[str] = mapped_column(String(10), nullable=False)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_domain(self) -> Task:
        return Task(
            id=self.id,
            title=self.title,
            status=TaskStatus(self.status),
            priority=TaskPriority(self.priority),
            due_date=as_utc(self.due_date) if self.due_date else None,
            created_at=as_utc(self.created_at),
            updated_at=as_utc(self.updated_at),
        )


class SQLTaskStore:
    """
    Store backed by the `users` and `tasks` tables.
    Database errors are not caught here; they reach the HTTP layer as 500s.
    """
    def __init__(self, engine, sessionmaker):
        self.engine = engine
        self.sessionmaker = sessionmaker

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def get_user(self, user_id: str) -> Optional[User]:
        async with self.sessionmaker() as session:
            row = await session.get(UserRow, user_id)
            return row.to_domain() if row else None

    async def get_user_by_username(self, username: str) -> Optional[User]:
        async with self.sessionmaker() as session:
            res = await session.execute(select(UserRow).where(UserRow.username == username))
            row = res.scalar_one_or_none()
            return row.to_domain() if row else None

    async def create_user(self, data: UserCreate) -> User:
        row = UserRow(id=new_user_id(), username=data.username, password=data.password)
        async with self.sessionmaker() as session:
            session.add(row)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise UsernameTakenError(data.username) from e
            return row.to_domain()

    async def list_tasks(self) -> List[Task]:
        async with self.sessionmaker() as session:
            res = await session.execute(
                select(TaskRow).order_by(TaskRow.created_at.desc(), TaskRow.seq.desc())
            )
            rows = res.scalars().all()
            return [r.to_domain() for r in rows]

    async def get_task(self, task_id: str) -> Optional[Task]:
        async with self.sessionmaker() as session:
            row = await self._find(session, task_id)
            return row.to_domain() if row else None

    async def create_task(self, data: TaskCreate) -> Task:
        now = utcnow()
        row = TaskRow(
            id=new_task_id(),
            title=data.title,
            status=data.status.value,
            priority=data.priority.value,
            due_date=data.due_date,
            created_at=now,
            updated_at=now,
        )
        async with self.sessionmaker() as session:
            session.add(row)
            await session.commit()
            return row.to_domain()

    async def update_task(self, task_id: str, patch: TaskUpdate) -> Optional[Task]:
        async with self.sessionmaker() as session:
            row = await self._find(session, task_id)
            if row is None:
                return None
            for field, value in patch.changes().items():
                if isinstance(value, (TaskStatus, TaskPriority)):
                    value = value.value
                setattr(row, field, value)
            # server clock, never the client's
            row.updated_at = next_updated_at(row.updated_at)
            await session.commit()
            return row.to_domain()

    async def delete_task(self, task_id: str) -> bool:
        async with self.sessionmaker() as session:
            res = await session.execute(delete(TaskRow).where(TaskRow.id == task_id))
            await session.commit()
            return res.rowcount > 0

    async def close(self) -> None:
        await self.engine.dispose()

    @staticmethod
    async def _find(session, task_id: str) -> Optional[TaskRow]:
        res = await session.execute(select(TaskRow).where(TaskRow.id == task_id))
        return res.scalar_one_or_none()
