"""Rate limiting middleware using sliding window algorithm."""

import logging
import re
import time
from collections import defaultdict
from threading import Lock
from typing import Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERATE_PATH_REGEX = re.compile(r"^/api/sessions/[^/]+/tokens/?$")


class RateLimiter:
    """Sliding window rate limiter."""

    def __init__(self, max_requests: int, window_seconds: int):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.requests: dict[str, list[float]] = defaultdict(list)
        self.lock = Lock()
        self.last_sweep = time.time()

    def is_allowed(self, key: str) -> Tuple[bool, int]:
        """Check if request is allowed for given key.

        Returns:
            Tuple of (allowed, retry_after_seconds)
        """
        now = time.time()
        window_start = now - self.window_seconds

        with self.lock:
            if now - self.last_sweep >= self.window_seconds:
                self._sweep(window_start)
                self.last_sweep = now

            # Remove old requests outside window
            self.requests[key] = [t for t in self.requests[key] if t > window_start]

            if len(self.requests[key]) >= self.max_requests:
                oldest = self.requests[key][0]
                retry_after = int(oldest - window_start) + 1
                return False, max(retry_after, 1)

            self.requests[key].append(now)
            return True, 0

    def _sweep(self, window_start: float) -> None:
        """Drop keys with no requests inside the window. Caller holds the lock."""
        stale = [k for k, times in self.requests.items() if not times or times[-1] <= window_start]
        for k in stale:
            del self.requests[k]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware that applies a strict limit to key generation and a general one to the API."""

    def __init__(
        self,
        app,
        generate_limiter: RateLimiter,
        api_limiter: RateLimiter,
        trust_proxy_headers: bool = False,
    ):
        super().__init__(app)
        self.trust_proxy_headers = trust_proxy_headers
        self.generate_limiter = generate_limiter
        self.api_limiter = api_limiter

    def _get_client_ip(self, request: Request) -> str:
        """Extract the client IP.

        Forwarding headers are client-controlled, so they are only read when the
        app runs behind a trusted proxy that sets them.
        """
        if not self.trust_proxy_headers:
            return request.client.host if request.client else "unknown"
        # X-Forwarded-For may contain multiple IPs: client, proxy1, proxy2
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        # Set by nginx
        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip
        return request.client.host if request.client else "unknown"

    async def dispatch(self, request: Request, call_next):
        client_ip = self._get_client_ip(request)
        path = request.url.path

        if GENERATE_PATH_REGEX.match(path) and request.method == "POST":
            allowed, retry_after = self.generate_limiter.is_allowed(client_ip)
            if not allowed:
                logger.warning("Key generation rate limit hit for %s", client_ip)
                return JSONResponse(
                    status_code=429,
                    content={"detail": "Too many keys requested. Please try again later."},
                    headers={"Retry-After": str(retry_after)},
                )

        elif path.startswith("/api/"):
            allowed, retry_after = self.api_limiter.is_allowed(client_ip)
            if not allowed:
                logger.warning("API rate limit hit for %s", client_ip)
                return JSONResponse(
                    status_code=429,
                    content={"detail": "Too many requests. Please try again later."},
                    headers={"Retry-After": str(retry_after)},
                )

        return await call_next(request)
