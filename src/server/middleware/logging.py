"""Request logging middleware."""
import logging
import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger("turnkeeper.server")
SENSITIVE_FIELDS = frozenset({"x-admin-secret", "authorization", "x-api-key"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs incoming commands with the acting user and channel."""

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:
        start_time = time.perf_counter()
        user_id = request.headers.get("X-User-ID", "unknown")
        channel_id = request.headers.get("X-Channel-ID", "-")
        logger.info("Request: %s %s user=%s channel=%s", request.method, request.url.path, user_id, channel_id)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Headers: %s", sanitize_headers(dict(request.headers)))

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info("Response: %s %s status=%d duration=%.2fms", request.method, request.url.path, response.status_code, duration_ms)
        return response


def sanitize_headers(headers: dict) -> dict:
    """Redact sensitive headers for logging."""
    return {
        key: "[REDACTED]" if key.lower() in SENSITIVE_FIELDS else value
        for key, value in headers.items()
    }
