"""Per-command, per-user cooldown middleware."""
import math
import time
from typing import Callable
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
from src.server.errors import CooldownError

USER_HEADER = "X-User-ID"
GUARDED_METHODS = frozenset({"POST", "PUT", "DELETE"})


class CooldownMiddleware(BaseHTTPMiddleware):
    """Rejects a command repeated by the same user within ``seconds``.

    A command only starts its cooldown when it succeeds, so a rejected
    request can be corrected and retried immediately.
    """

    def __init__(self, app: ASGIApp, seconds: float = 3.0, clock: Callable[[], float] = time.monotonic) -> None:
        super().__init__(app)
        self._seconds = seconds
        self._clock = clock
        self._last_used: dict[tuple[str, str], float] = {}

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:
        user_id = request.headers.get(USER_HEADER)
        if self._seconds <= 0 or request.method not in GUARDED_METHODS or not user_id:
            return await call_next(request)

        key = (user_id, request.url.path)
        now = self._clock()
        last = self._last_used.get(key)
        if last is not None and now - last < self._seconds:
            exc = CooldownError(retry_after=round(self._seconds - (now - last), 2))
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": {
                        "code": exc.error_code,
                        "message": exc.message,
                        "details": exc.details,
                    }
                },
                headers={"Retry-After": str(max(1, math.ceil(exc.retry_after)))},
            )

        response = await call_next(request)
        if response.status_code < 400:
            self._last_used[key] = self._clock()
            self._prune(now)
        return response

    def _prune(self, now: float) -> None:
        if len(self._last_used) < 1024:
            return
        cutoff = now - self._seconds
        self._last_used = {k: t for k, t in self._last_used.items() if t > cutoff}
