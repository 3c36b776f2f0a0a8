"""Custom middleware for request handling."""

import logging
import time
import uuid
from typing import Awaitable, Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from amc.config import get_settings

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add unique request ID to each request."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        logger.debug(
            "%s %s -> %s in %.1fms [%s]",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
            request_id,
        )
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Simple in-memory rate limiting per client address."""

    def __init__(self, app):
        super().__init__(app)
        self.requests = {}
        self.settings = get_settings()
        self.last_sweep = time.time()

    def _sweep(self, window_start: float) -> None:
        """Forget clients with no requests inside the current window."""
        stale = [
            key
            for key, timestamps in self.requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for key in stale:
            del self.requests[key]

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        # Skip rate limiting for health checks
        if request.url.path == "/health":
            return await call_next(request)

        client_key = request.client.host if request.client else "anonymous"

        current_time = time.time()
        window_start = current_time - self.settings.rate_limit_window

        if current_time - self.last_sweep >= self.settings.rate_limit_window:
            self._sweep(window_start)
            self.last_sweep = current_time

        # Clean old entries
        timestamps = [
            ts for ts in self.requests.get(client_key, []) if ts > window_start
        ]

        # Check rate limit
        if len(timestamps) >= self.settings.rate_limit_requests:
            self.requests[client_key] = timestamps
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "error": {
                        "code": "RATE_LIMITED",
                        "message": "Too many requests",
                        "details": {"retry_after": self.settings.rate_limit_window},
                    }
                },
            )

        # Record request
        timestamps.append(current_time)
        self.requests[client_key] = timestamps

        return await call_next(request)
