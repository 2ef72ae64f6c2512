"""Settings read once from the environment (+ optional .env)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

STORE_MEMORY = "memory"
STORE_FILE = "file"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str) -> Optional[Path]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str] = None
    task_store: str = STORE_MEMORY
    tasks_file: Optional[Path] = None
    log_level: str = "INFO"
    log_dir: Path = Path("./logs")
    static_dir: Optional[Path] = None
    host: str = "0.0.0.0"
    port: int = 5000

    @staticmethod
    def from_env(dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(override=False)

        database_url = _env("DATABASE_URL").strip() or None
        task_store = _env("TASK_STORE", STORE_MEMORY).strip().lower()
        if task_store not in (STORE_MEMORY, STORE_FILE):
            raise ValueError(f"TASK_STORE must be '{STORE_MEMORY}' or '{STORE_FILE}', got {task_store!r}")

        return Settings(
            database_url=database_url,
            task_store=task_store,
            tasks_file=_env_path("TASKS_FILE"),
            log_level=_env("LOG_LEVEL", "INFO").upper(),
            log_dir=_env_path("LOG_DIR") or Path("./logs"),
            static_dir=_env_path("STATIC_DIR"),
            host=_env("HOST", "0.0.0.0"),
            port=_env_int("PORT", 5000),
        )
