from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from enum import Enum
from datetime import datetime, timedelta, timezone
from typing import Optional
import uuid

class TaskStatus(str, Enum):
    pending = "pending"
    done = "done"

class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"

class _Model(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

class TaskCreate(_Model):
    title: str = Field(min_length=1, max_length=200)
    status: TaskStatus = TaskStatus.pending
    priority: TaskPriority = TaskPriority.medium
    due_date: Optional[datetime] = None

    @field_validator("due_date")
    @classmethod
    def _due_utc(cls, v):
        return as_utc(v) if v is not None else None

class TaskUpdate(_Model):
    """Partial update. Only fields present in the payload are merged."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None

    @field_validator("title", "status", "priority")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_validator("due_date")
    @classmethod
    def _due_utc(cls, v):
        return as_utc(v) if v is not None else None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)

class Task(_Model):
    id: str
    title: str
    status: TaskStatus = TaskStatus.pending
    priority: TaskPriority = TaskPriority.medium
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def _utc(cls, v):
        # offset-less values (old files, SQLite) are taken as UTC
        return as_utc(v) if v is not None else None

def new_task_id() -> str:
    return str(uuid.uuid4())

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def as_utc(value: datetime) -> datetime:
    """Same instant, expressed in UTC. Naive values are assumed to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

def next_updated_at(previous: datetime) -> datetime:
    """Current time, bumped past `previous` when the clock has not moved."""
    now = utcnow()
    previous = as_utc(previous)
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now
