from contextlib import asynccontextmanager
from typing import Optional
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from task_tracker.app.errors import install_error_handlers
from task_tracker.app.middleware.access_log import AccessLogMiddleware
from task_tracker.app.routes import tasks
from task_tracker.config import Settings
from task_tracker.infra.db.factory import open_store
from task_tracker.observability.logging import setup_logging
from task_tracker.services.task_service import TaskService

logger = logging.getLogger("task_tracker.system")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, settings.log_dir)
    logger.info("system.start", extra={"category": "system", "event": "system.start"})

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = await open_store(settings)
        app.state.task_service = TaskService(store)
        try:
            yield
        finally:
            await store.close()
            logger.info("system.stop", extra={"category": "system", "event": "system.stop"})

    app = FastAPI(title="Task Tracker", lifespan=lifespan)
    app.add_middleware(AccessLogMiddleware)
    install_error_handlers(app)

    app.include_router(tasks.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # Built client, if any. Mounted last so /api and /health take precedence.
    if settings.static_dir and settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(settings.static_dir), html=True), name="static")

    return app


def run() -> None:
    settings = Settings.from_env()
    uvicorn.run(
        "task_tracker.app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
