from __future__ import annotations
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from pathlib import Path

def make_database_url(database_url: str) -> str:
    # "sqlite:///./data/tasks.db" -> async driver, parent dir created
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return database_url
    if url.drivername == "sqlite":
        url = url.set(drivername="sqlite+aiosqlite")
    if url.database and url.database != ":memory:":
        p = Path(url.database).resolve()
        p.parent.mkdir(parents=True, exist_ok=True)
        url = url.set(database=p.as_posix())
    return url.render_as_string(hide_password=False)

def make_engine(database_url: str):
    return create_async_engine(database_url)

def make_sessionmaker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)
