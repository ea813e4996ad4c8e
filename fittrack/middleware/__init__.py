"""
FitTrack Middleware.
"""

from fittrack.middleware.auth import AuthMiddleware
from fittrack.middleware.rate_limit import MemoryRateLimiter, RateLimiter

__all__ = ["AuthMiddleware", "MemoryRateLimiter", "RateLimiter"]
