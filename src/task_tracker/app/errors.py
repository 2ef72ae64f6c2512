"""Maps every failure to a `{"message": ...}` JSON body."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_tracker.domain.store import UsernameTakenError

logger = logging.getLogger("task_tracker.errors")


def _describe(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "Invalid value")
    return f"{loc}: {msg}" if loc else msg


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": _describe(exc)})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def username_taken_handler(request: Request, exc: UsernameTakenError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc)})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status = getattr(exc, "status_code", None) or getattr(exc, "status", None)
    if not isinstance(status, int) or not 400 <= status <= 599:
        status = 500
    logger.error(
        "request.unhandled",
        exc_info=exc,
        extra={
            "category": "http",
            "event": "request.unhandled",
            "path": request.url.path,
            "status_code": status,
        },
    )
    return JSONResponse(status_code=status, content={"message": "Internal Server Error"})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(UsernameTakenError, username_taken_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
