"""Fixed-window inbound rate limiting, keyed by client address."""

import logging
import threading
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

from user_service.core.errors import TooManyRequestsError
from user_service.schemas.response import error_body

logger = logging.getLogger(__name__)

TimeFn = Callable[[], float]


class FixedWindowRateLimiter:
    """Allow at most max_requests per key in each window_seconds window."""

    def __init__(self, max_requests: int, window_seconds: int, now: TimeFn | None = None) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._now = now or time.monotonic
        self._windows: dict[str, tuple[float, int]] = {}
        self._last_sweep = self._now()
        self._lock = threading.Lock()

    def allow(self, key: str) -> bool:
        now = self._now()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0
            if count >= self.max_requests:
                self._windows[key] = (started, count)
                return False
            self._windows[key] = (started, count + 1)
            return True

    def _sweep(self, now: float) -> None:
        """Drop keys whose window has closed. Caller holds the lock."""
        expired = [k for k, (started, _) in self._windows.items() if now - started >= self.window_seconds]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects requests over the limit with a 429 envelope before routing."""

    def __init__(self, app, limiter: FixedWindowRateLimiter) -> None:
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        client = request.client.host if request.client else "unknown"
        if not self.limiter.allow(client):
            error = TooManyRequestsError()
            logger.warning("Rate limit exceeded", extra={"client": client, "path": request.url.path})
            return JSONResponse(
                status_code=error.status_code,
                content=error_body(error.message),
                headers={"Retry-After": str(self.limiter.window_seconds)},
            )
        return await call_next(request)
