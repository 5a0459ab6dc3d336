"""
Request logging middleware.

Binds the request id, and the store when the path or query names one, into
structlog's context so use case and storage logs for the same request can be
grouped per store.
"""

import re
import time
import uuid
from collections.abc import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from recipe_inventory.config import get_logger

logger = get_logger(__name__)

_STORE_PATH = re.compile(r"^/api/stores/([^/]+)")
_QUIET_PREFIXES = ("/health", "/api/health")


def store_for(request: Request) -> str | None:
    """Store id from ``/api/stores/{store_id}/...`` or a ``store_id`` query parameter."""
    match = _STORE_PATH.match(request.url.path)
    if match:
        return match.group(1)
    return request.query_params.get("store_id")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log each request's completion with its timing; health polls log at debug."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        context = {"request_id": request_id}
        store_id = store_for(request)
        if store_id:
            context["store_id"] = store_id
        structlog.contextvars.bind_contextvars(**context)

        log = logger.debug if request.url.path.startswith(_QUIET_PREFIXES) else logger.info
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        log(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=duration_ms,
        )
        response.headers["X-Request-ID"] = request_id
        response.headers["Server-Timing"] = f"app;dur={duration_ms}"
        return response
