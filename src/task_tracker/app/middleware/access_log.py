import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("task_tracker.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Logs /api requests with timing. Static asset requests are not logged."""

    def __init__(self, app, prefix: str = "/api"):
        super().__init__(app)
        self.prefix = prefix

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        path = request.url.path
        traced = path.startswith(self.prefix)
        base = {"category": "http", "request_id": request_id, "method": request.method, "path": path}
        start = time.perf_counter()

        if traced:
            logger.info("request.start", extra={**base, "event": "request.start"})

        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={**base, "event": "request.error", "duration_ms": _elapsed_ms(start)},
            )
            raise

        response.headers["X-Request-ID"] = request_id
        if traced:
            logger.info(
                "request.end",
                extra={
                    **base,
                    "event": "request.end",
                    "status_code": response.status_code,
                    "duration_ms": _elapsed_ms(start),
                },
            )
        return response


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
