"""
Rate limiting, in two layers.

1. slowapi `limiter`: a coarse app-wide ceiling (200/minute per client IP),
   enforced by SlowAPIMiddleware in main.py.

2. Per-route profiles (auth, api, sensitive, contact) backed by an in-memory
   fixed-window counter. Attach them with the `rate_limit()` dependency:

       @router.post("/login", dependencies=[Depends(rate_limit("auth"))])
       def login(...):
           ...

   Every route sharing a profile shares one bucket per client, so five failed
   logins plus one forgot-password request exhausts the "auth" budget.

The store is per-process: running several workers multiplies the effective
limit. RATE_LIMIT_ENABLED=false switches both layers off.
"""
import logging
import math
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import Request, Response
from slowapi import Limiter

from app.config import settings
from app.core.exceptions import RateLimitExceededException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitProfile:
    window_seconds: int
    max_requests: int
    message: str


@dataclass(frozen=True)
class RateLimitResult:
    success: bool
    limit: int
    remaining: int
    reset_at: float  # UNIX seconds


RATE_LIMIT_PROFILES: dict[str, RateLimitProfile] = {
    # login / register / password reset
    "auth": RateLimitProfile(
        window_seconds=15 * 60,
        max_requests=5,
        message="Too many authentication attempts, please try again later",
    ),
    "api": RateLimitProfile(
        window_seconds=60,
        max_requests=60,
        message="Too many requests, please try again later",
    ),
    # password change, uploads
    "sensitive": RateLimitProfile(
        window_seconds=60 * 60,
        max_requests=10,
        message="Too many requests for this operation, please try again later",
    ),
    # contact form, inquiries, newsletter signup
    "contact": RateLimitProfile(
        window_seconds=60 * 60,
        max_requests=5,
        message="Too many submissions, please try again later",
    ),
}


@dataclass
class _WindowEntry:
    count: int
    reset_at: float


class FixedWindowRateLimiter:
    """
    Counts requests per identifier inside a fixed window.

    The window starts with the first request for an identifier (it is not
    aligned to the wall clock) and lasts `window_seconds`. Requests made
    after the limit is reached are still counted.
    """

    def __init__(self, clock: Callable[[], float] = time.time, cleanup_interval: float = 60):
        self._clock = clock
        self._cleanup_interval = cleanup_interval
        self._lock = threading.Lock()
        self._entries: dict[str, _WindowEntry] = {}
        self._last_cleanup = clock()

    def hit(self, identifier: str, profile: RateLimitProfile) -> RateLimitResult:
        now = self._clock()

        with self._lock:
            if now - self._last_cleanup >= self._cleanup_interval:
                self._purge_locked(now)
                self._last_cleanup = now

            entry = self._entries.get(identifier)

            if entry is None or now > entry.reset_at:
                entry = _WindowEntry(count=1, reset_at=now + profile.window_seconds)
                self._entries[identifier] = entry
                return RateLimitResult(
                    success=True,
                    limit=profile.max_requests,
                    remaining=profile.max_requests - 1,
                    reset_at=entry.reset_at,
                )

            entry.count += 1
            count, reset_at = entry.count, entry.reset_at

        if count > profile.max_requests:
            logger.warning(
                "Rate limit exceeded",
                extra={"event": "security", "identifier": identifier, "count": count},
            )
            return RateLimitResult(
                success=False,
                limit=profile.max_requests,
                remaining=0,
                reset_at=reset_at,
            )

        return RateLimitResult(
            success=True,
            limit=profile.max_requests,
            remaining=profile.max_requests - count,
            reset_at=reset_at,
        )

    def purge_expired(self) -> int:
        """Drops entries whose window has ended. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            removed = self._purge_locked(now)
            self._last_cleanup = now
        return removed

    def _purge_locked(self, now: float) -> int:
        expired = [key for key, entry in self._entries.items() if entry.reset_at < now]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def get_client_ip(request: Request) -> str:
    """
    Best-effort client address.
    Proxies append to X-Forwarded-For, so the first entry is the original client.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


# Process-wide store shared by every rate_limit() dependency
rate_limit_store = FixedWindowRateLimiter()


def _iso(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


def rate_limit(profile_name: str, identifier: Optional[str] = None):
    """
    Builds a FastAPI dependency enforcing the named profile.
    Raises KeyError immediately for an unknown profile name.
    """
    profile = RATE_LIMIT_PROFILES[profile_name]

    async def dependency(request: Request, response: Response) -> None:
        if not settings.rate_limit_enabled:
            return

        key = identifier or f"{profile_name}:{get_client_ip(request)}"
        result = rate_limit_store.hit(key, profile)

        if not result.success:
            retry_after = max(0, math.ceil(result.reset_at - time.time()))
            raise RateLimitExceededException(
                detail=profile.message,
                retry_after=retry_after,
                reset_iso=_iso(result.reset_at),
            )

        response.headers["X-RateLimit-Limit"] = str(result.limit)
        response.headers["X-RateLimit-Remaining"] = str(result.remaining)
        response.headers["X-RateLimit-Reset"] = _iso(result.reset_at)

    return dependency


# ── slowapi global ceiling ────────────────────────────────────────────────────
limiter = Limiter(
    key_func=get_client_ip,
    default_limits=["200/minute"],
    enabled=settings.rate_limit_enabled,
)
