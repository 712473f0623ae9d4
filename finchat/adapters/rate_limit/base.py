"""Rate limiter interfaces.

The API depends on this abstraction (not the concrete implementation) so the
chat pipeline does not care how windows are stored.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of an admission check.

    Hitting the limit is a routine event, so a denial is returned as a value
    rather than raised.

    Attributes:
        allowed: Whether the request may proceed.
        limit: Max admitted requests per window.
        remaining: Admissions left in the current window (0 when denied).
        reset_at: UNIX epoch seconds when the client's window ends.
        retry_after_seconds: Whole seconds until ``reset_at`` when denied.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after_seconds: int | None = None


class AbstractRateLimiter(ABC):
    """Interface for per-client request limiters."""

    @abstractmethod
    def check_limit(self, client_id: str) -> RateLimitDecision:
        """Decide whether one more request from ``client_id`` is admitted.

        Args:
            client_id: Opaque client identifier (e.g., source IP address).

        Returns:
            RateLimitDecision describing the admission outcome.
        """
        raise NotImplementedError

    @abstractmethod
    def purge_expired(self, now: float | None = None) -> int:
        """Drop state whose window has already ended.

        Args:
            now: Reference time; defaults to the limiter's clock.

        Returns:
            Number of entries removed.
        """
        raise NotImplementedError
