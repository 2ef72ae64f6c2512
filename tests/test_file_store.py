# tests/test_file_store.py

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from task_tracker.domain.task_models import TaskCreate, TaskUpdate
from task_tracker.domain.user_models import UserCreate
from task_tracker.infra.db import task_repo_file
from task_tracker.infra.db.task_repo_file import FileTaskStore


def _read(path: Path) -> list:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.mark.asyncio
async def test_missing_file_starts_empty(tmp_path: Path) -> None:
    store = FileTaskStore(tmp_path / "tasks.json")
    await store.load()
    assert await store.list_tasks() == []


@pytest.mark.asyncio
async def test_invalid_json_starts_empty(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text("{not json", encoding="utf-8")
    store = FileTaskStore(path)
    await store.load()
    assert await store.list_tasks() == []


@pytest.mark.asyncio
async def test_non_list_document_starts_empty(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text('{"id": "x"}', encoding="utf-8")
    store = FileTaskStore(path)
    await store.load()
    assert await store.list_tasks() == []


@pytest.mark.asyncio
async def test_every_mutation_rewrites_file(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = FileTaskStore(path)
    await store.load()

    a = await store.create_task(TaskCreate(title="a"))
    b = await store.create_task(TaskCreate(title="b"))
    items = _read(path)
    assert len(items) == len(await store.list_tasks()) == 2
    assert set(items[0]) >= {"id", "title", "status", "createdAt", "updatedAt"}

    await store.update_task(a.id, TaskUpdate(status="done"))
    assert {i["id"]: i["status"] for i in _read(path)}[a.id] == "done"

    await store.delete_task(b.id)
    assert [i["id"] for i in _read(path)] == [a.id]


@pytest.mark.asyncio
async def test_file_is_pretty_printed(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = FileTaskStore(path)
    await store.create_task(TaskCreate(title="a"))
    assert "\n  " in path.read_text(encoding="utf-8")


@pytest.mark.asyncio
async def test_round_trip_into_fresh_store(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    first = FileTaskStore(path)
    await first.load()
    for title in ("a", "b", "c"):
        await first.create_task(TaskCreate(title=title))
    await first.update_task((await first.list_tasks())[0].id, TaskUpdate(status="done"))

    second = FileTaskStore(path)
    await second.load()
    assert await second.list_tasks() == await first.list_tasks()


@pytest.mark.asyncio
async def test_load_orders_by_created_at_and_skips_bad_entries(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(
        json.dumps([
            {"id": "old", "title": "old", "status": "pending",
             "createdAt": "2024-01-01T00:00:00Z", "updatedAt": "2024-01-01T00:00:00Z"},
            {"id": "bad", "title": "bad", "status": "archived",
             "createdAt": "2024-01-02T00:00:00Z", "updatedAt": "2024-01-02T00:00:00Z"},
            {"id": "new", "title": "new", "status": "done",
             "createdAt": "2024-03-01T00:00:00Z", "updatedAt": "2024-03-01T00:00:00Z"},
        ]),
        encoding="utf-8",
    )
    store = FileTaskStore(path)
    await store.load()

    tasks = await store.list_tasks()
    assert [t.id for t in tasks] == ["new", "old"]
    # older files carry no priority
    assert tasks[0].priority.value == "medium"


@pytest.mark.asyncio
async def test_write_failure_does_not_fail_mutation(tmp_path: Path) -> None:
    # parent directory does not exist, so every save fails
    store = FileTaskStore(tmp_path / "missing-dir" / "tasks.json")
    task = await store.create_task(TaskCreate(title="still works"))
    assert (await store.get_task(task.id)).title == "still works"
    assert await store.delete_task(task.id) is True


@pytest.mark.asyncio
async def test_users_are_not_written(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = FileTaskStore(path)
    await store.create_user(UserCreate(username="alice", password="pw"))
    await store.create_task(TaskCreate(title="a"))
    assert "alice" not in path.read_text(encoding="utf-8")


def test_default_path_is_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert FileTaskStore().path == tmp_path / "tasks.json"


@pytest.mark.asyncio
async def test_offsetless_timestamps_load_as_utc(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(
        json.dumps([
            {"id": "legacy", "title": "legacy", "status": "pending",
             "createdAt": "2024-01-01T00:00:00", "updatedAt": "2024-01-01T00:00:00",
             "dueDate": "2024-02-01T08:00:00"},
        ]),
        encoding="utf-8",
    )
    store = FileTaskStore(path)
    await store.load()

    legacy = await store.get_task("legacy")
    assert legacy.created_at.utcoffset() == timedelta(0)
    assert legacy.due_date == datetime(2024, 2, 1, 8, 0, tzinfo=timezone.utc)

    fresh = await store.create_task(TaskCreate(title="fresh"))
    assert [t.id for t in await store.list_tasks()] == [fresh.id, "legacy"]


@pytest.mark.asyncio
async def test_overlapping_saves_leave_latest_complete_file(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = FileTaskStore(path)
    await store.load()

    await asyncio.gather(*(store.create_task(TaskCreate(title=f"t{i}")) for i in range(25)))

    items = _read(path)
    assert len(items) == 25
    assert {i["id"] for i in items} == {t.id for t in await store.list_tasks()}
    assert [p.name for p in tmp_path.iterdir()] == ["tasks.json"]


@pytest.mark.asyncio
async def test_failed_replace_keeps_previous_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "tasks.json"
    store = FileTaskStore(path)
    first = await store.create_task(TaskCreate(title="first"))
    before = path.read_text(encoding="utf-8")

    def _fail(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(task_repo_file.os, "replace", _fail)
    second = await store.create_task(TaskCreate(title="second"))

    assert path.read_text(encoding="utf-8") == before
    assert [i["id"] for i in _read(path)] == [first.id]
    assert (await store.get_task(second.id)).title == "second"
    assert [p.name for p in tmp_path.iterdir()] == ["tasks.json"]
