"""In-memory rolling-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: one lock guards the window map; it is only held for dict
  operations, never across I/O or awaits.
- Each client's window starts at its first admitted request, not on a shared
  wall-clock boundary.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from finchat.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision

# Deletions performed per lock acquisition during a purge
PURGE_BATCH_SIZE = 256


@dataclass
class _ClientWindow:
    count: int
    reset_at: float


class InMemoryRollingWindowRateLimiter(AbstractRateLimiter):
    """Admit up to ``limit`` requests per client within a rolling window.

    Expired windows are replaced lazily by ``check_limit``; ``purge_expired``
    only bounds memory for clients that never come back.
    """

    def __init__(
        self,
        *,
        limit: int = 20,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum admitted requests per window.
            window_seconds: Window length in seconds.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, _ClientWindow] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def check_limit(self, client_id: str) -> RateLimitDecision:
        """Check and consume one admission for ``client_id``.

        The expiry check, the count check and the increment (or reset) run as
        one unit under the lock, so concurrent callers for the same client
        can never both take the last slot.

        Args:
            client_id: Client identifier; any string is accepted.

        Returns:
            RateLimitDecision; denied decisions carry the window's reset time.
        """
        now = self._clock()

        with self._lock:
            window = self._windows.get(client_id)

            if window is None or window.reset_at <= now:
                window = _ClientWindow(count=1, reset_at=now + self._window_seconds)
                self._windows[client_id] = window
                return self._allowed(window)

            if window.count < self._limit:
                window.count += 1
                return self._allowed(window)

            reset_at = window.reset_at

        return RateLimitDecision(
            allowed=False,
            limit=self._limit,
            remaining=0,
            reset_at=reset_at,
            retry_after_seconds=max(0, math.ceil(reset_at - now)),
        )

    def purge_expired(self, now: float | None = None) -> int:
        """Remove windows whose reset time is at or before ``now``.

        The map is snapshotted under the lock, filtered without it, and the
        deletions are applied in batches so a large sweep never holds the
        lock for its whole duration. Each deletion re-checks that the entry
        is still the same expired window, since a request may have replaced
        it in between.
        """
        if now is None:
            now = self._clock()

        with self._lock:
            snapshot = list(self._windows.items())

        expired = [(key, window) for key, window in snapshot if window.reset_at <= now]

        removed = 0
        for start in range(0, len(expired), PURGE_BATCH_SIZE):
            batch = expired[start:start + PURGE_BATCH_SIZE]
            with self._lock:
                for key, window in batch:
                    current = self._windows.get(key)
                    if current is window and current.reset_at <= now:
                        del self._windows[key]
                        removed += 1

        return removed

    def _allowed(self, window: _ClientWindow) -> RateLimitDecision:
        return RateLimitDecision(
            allowed=True,
            limit=self._limit,
            remaining=max(0, self._limit - window.count),
            reset_at=window.reset_at,
        )
