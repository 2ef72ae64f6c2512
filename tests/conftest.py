# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio

from task_tracker.config import Settings
from task_tracker.infra.db.engine import make_database_url, make_engine, make_sessionmaker
from task_tracker.infra.db.task_repo_file import FileTaskStore
from task_tracker.infra.db.task_repo_memory import InMemoryTaskStore
from task_tracker.infra.db.task_repo_sql import SQLTaskStore


async def make_sql_store(db_path: Path) -> SQLTaskStore:
    engine = make_engine(make_database_url(f"sqlite:///{db_path}"))
    store = SQLTaskStore(engine, make_sessionmaker(engine))
    await store.create_schema()
    return store


@pytest_asyncio.fixture(params=["memory", "file", "sql"])
async def store(request, tmp_path: Path):
    """Every backend, so contract tests run three times."""
    if request.param == "memory":
        s = InMemoryTaskStore()
    elif request.param == "file":
        s = FileTaskStore(tmp_path / "tasks.json")
        await s.load()
    else:
        s = await make_sql_store(tmp_path / "tasks.db")
    yield s
    await s.close()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Memory-backed settings with logs kept inside the test's tmp dir."""
    return Settings(log_dir=tmp_path / "logs")
