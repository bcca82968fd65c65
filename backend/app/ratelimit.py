"""Rate limiting utilities."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

import redis.asyncio as aioredis
from starlette.requests import Request


@dataclass
class RetryAfter:
    """Seconds until the caller's window resets."""

    seconds: int


class RateLimiter(Protocol):
    """Fixed-window request counter."""

    async def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Count one request for ``key``.

        Returns:
            RetryAfter if over quota, None if allowed
        """
        ...

    async def aclose(self) -> None:
        """Release backend connections."""
        ...


def client_ip(request: Request) -> str:
    """Best-effort client address, honoring proxy headers.

    Args:
        request: Incoming request

    Returns:
        First X-Forwarded-For hop, X-Real-IP, the socket peer, or "unknown"
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


def make_rate_limit_key(ip: str, bucket: str = "global") -> str:
    """Create rate limit key from client address and bucket."""
    return f"{bucket}:{ip}"


class InMemoryRateLimiter:
    """In-memory implementation of RateLimiter using fixed window."""

    def __init__(
        self, max_requests: int, window_seconds: int = 60, max_tracked_keys: int = 10000
    ) -> None:
        """Initialize rate limiter.

        Args:
            max_requests: Maximum requests per window
            window_seconds: Window size in seconds (default 60)
            max_tracked_keys: Purge expired windows once more keys than this are tracked
        """
        self._max_requests = max_requests
        self._window = timedelta(seconds=window_seconds)
        self._max_tracked_keys = max_tracked_keys
        self._windows: dict[str, tuple[datetime, int]] = {}

    @property
    def tracked_keys(self) -> int:
        return len(self._windows)

    async def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available."""
        if len(self._windows) > self._max_tracked_keys:
            self.purge_expired(now)

        if key not in self._windows:
            self._windows[key] = (now, 1)
            return None

        window_start, count = self._windows[key]

        if now >= window_start + self._window:
            self._windows[key] = (now, 1)
            return None

        if count >= self._max_requests:
            seconds_remaining = int((window_start + self._window - now).total_seconds())
            return RetryAfter(seconds=max(1, seconds_remaining))

        self._windows[key] = (window_start, count + 1)
        return None

    async def aclose(self) -> None:
        self._windows.clear()

    def purge_expired(self, now: datetime) -> int:
        """Drop windows that have ended; returns how many were removed."""
        expired = [
            key for key, (start, _) in self._windows.items() if now >= start + self._window
        ]
        for key in expired:
            del self._windows[key]
        return len(expired)


class RedisRateLimiter:
    """Redis-based rate limiter using INCR + EXPIRE pattern."""

    def __init__(
        self, redis_client: aioredis.Redis, max_requests: int, window_seconds: int = 60
    ) -> None:
        """Initialize rate limiter.

        Args:
            redis_client: Async Redis client
            max_requests: Maximum requests per window
            window_seconds: Window size in seconds (default 60)
        """
        self._redis = redis_client
        self._max_requests = max_requests
        self._window_seconds = window_seconds

    async def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available.

        Uses Redis INCR + EXPIRE for atomic counting across workers.
        """
        window_start = int(now.timestamp() / self._window_seconds) * self._window_seconds
        redis_key = f"ratelimit:{key}:{window_start}"

        count = await self._redis.incr(redis_key)

        # Set expiry on first request
        if count == 1:
            await self._redis.expire(redis_key, self._window_seconds)

        if count > self._max_requests:
            ttl = await self._redis.ttl(redis_key)
            return RetryAfter(seconds=max(1, ttl))

        return None

    async def aclose(self) -> None:
        """Close the Redis connection pool."""
        await self._redis.aclose()
