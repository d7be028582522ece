"""HTTP middleware: request correlation, access log and response headers"""

import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from billmate.core.logging import get_logger

logger = get_logger(__name__)

# Probe endpoints, not written to the access log
_UNLOGGED_PATHS = frozenset({"/health", "/"})


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an id and write one access log line for it.

    A client-supplied ``X-Request-ID`` is reused.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed_ms}ms"

        if request.url.path not in _UNLOGGED_PATHS:
            logger.info(
                "%s %s -> %d",
                request.method,
                request.url.path,
                response.status_code,
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                    "correlation_id": request_id,
                },
            )
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Hardening headers. API responses are marked uncacheable."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store"
        return response
