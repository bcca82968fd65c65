"""Rate limiting middleware."""

import logging
from datetime import datetime, timezone

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from backend.app.ratelimit import RateLimiter, client_ip, make_rate_limit_key
from backend.app.utils.metrics import http_metrics

logger = logging.getLogger(__name__)

DEFAULT_EXEMPT_PATHS = ("/health", "/healthz", "/metrics")


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware for rate limiting HTTP requests per client address."""

    def __init__(
        self,
        app: ASGIApp,
        limiter: RateLimiter,
        exempt_paths: tuple[str, ...] = DEFAULT_EXEMPT_PATHS,
    ) -> None:
        """Initialize rate limit middleware.

        Args:
            app: Downstream ASGI app
            limiter: Rate limiter implementation
            exempt_paths: Paths that are never counted (probes, scraping)
        """
        super().__init__(app)
        self._limiter = limiter
        self._exempt_paths = exempt_paths

    async def check_rate_limit(
        self, ip: str, now: datetime | None = None
    ) -> tuple[bool, int]:
        """Check if a request from ``ip`` is allowed under the rate limit.

        Args:
            ip: Client address
            now: Current time (for testing)

        Returns:
            Tuple of (allowed, retry_after_seconds)
        """
        if now is None:
            now = datetime.now(timezone.utc)

        retry_after = await self._limiter.check_quota(make_rate_limit_key(ip), now)
        if retry_after is None:
            return (True, 0)

        return (False, retry_after.seconds)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self._exempt_paths:
            return await call_next(request)

        ip = client_ip(request)
        allowed, retry_after = await self.check_rate_limit(ip)
        if not allowed:
            # Client address stays in logs only, never in the response
            logger.warning("Rate limit exceeded for %s", ip)
            http_metrics.inc_rate_limited()
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests. Please try again later."},
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)
