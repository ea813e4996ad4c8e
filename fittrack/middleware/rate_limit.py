"""
Rate limiting for abuse-prone routes.

Routes depend on a RateLimiter capability: `check(key)` records a hit and
reports whether the caller is still under its limit. The default
implementation keeps a moving window per key in process memory.
"""

import logging
import time
from typing import Collection, Optional, Protocol

from fastapi import Request
from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

from common.utils.exceptions import RateLimitException

logger = logging.getLogger(__name__)


class RateLimiter(Protocol):
    """Capability consulted before handling a rate-limited request."""

    def check(self, key: str) -> bool:
        """Record a hit for key; False when the limit is exhausted."""
        ...


class MemoryRateLimiter:
    """
    Moving-window limiter backed by in-process storage.

    Counters are per process and reset on restart.
    """

    def __init__(self, max_requests: int, window_seconds: int):
        """
        Args:
            max_requests: Hits allowed per window
            window_seconds: Window length
        """
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._item = RateLimitItemPerSecond(max_requests, window_seconds)
        self._limiter = MovingWindowRateLimiter(MemoryStorage())

    def check(self, key: str) -> bool:
        return self._limiter.hit(self._item, key)

    def retry_after(self, key: str) -> int:
        """Seconds until the oldest hit in the window expires."""
        stats = self._limiter.get_window_stats(self._item, key)
        return max(1, int(stats.reset_time - time.time()))


class DisabledRateLimiter:
    """Always allows; used when rate limiting is switched off."""

    def check(self, key: str) -> bool:
        return True


def get_client_ip(request: Request, trusted_proxies: Collection[str] = ()) -> str:
    """
    Address the rate limit is keyed on.

    The socket peer is used unless it is one of `trusted_proxies`; only then
    is the left-most `X-Forwarded-For` entry honoured.
    """
    peer = request.client.host if request.client else "unknown"
    if peer not in trusted_proxies:
        return peer

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip() or peer
    return peer


def enforce_rate_limit(
    limiter: RateLimiter,
    request: Request,
    scope: str = "auth",
    trusted_proxies: Collection[str] = (),
) -> None:
    """
    Consult the limiter for this client and scope.

    Raises:
        RateLimitException: limit exhausted
    """
    key = f"{scope}:{get_client_ip(request, trusted_proxies)}"
    if limiter.check(key):
        return

    retry_after: Optional[int] = None
    if isinstance(limiter, MemoryRateLimiter):
        retry_after = limiter.retry_after(key)

    logger.warning(f"Rate limit exceeded for {key}")
    raise RateLimitException(
        message="Too many authentication attempts, please try again later",
        retry_after=retry_after,
    )
