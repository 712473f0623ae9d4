"""Rate limiting adapters.

This package keeps the chat pipeline independent from how client windows are
stored. The shipped backend is a single-process, in-memory limiter.
"""

from finchat.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision
from finchat.adapters.rate_limit.in_memory import InMemoryRollingWindowRateLimiter
from finchat.adapters.rate_limit.reclaimer import RateLimitReclaimer

__all__ = [
    "AbstractRateLimiter",
    "InMemoryRollingWindowRateLimiter",
    "RateLimitDecision",
    "RateLimitReclaimer",
]
