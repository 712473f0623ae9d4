"""Background task that periodically purges expired rate limit windows."""

from __future__ import annotations

import asyncio
import logging

from finchat.adapters.rate_limit.base import AbstractRateLimiter

logger = logging.getLogger(__name__)


class RateLimitReclaimer:
    """Run ``limiter.purge_expired()`` on a fixed interval.

    Admission decisions never depend on this task; it only keeps one-off
    clients from accumulating in memory.
    """

    def __init__(self, limiter: AbstractRateLimiter, *, interval_seconds: float = 60.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")

        self._limiter = limiter
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run_loop())
        logger.info("rate_limit.reclaimer_started", extra={"interval_s": self._interval})

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("rate_limit.reclaimer_stopped")

    def sweep(self) -> int:
        """Purge once and log the outcome."""
        removed = self._limiter.purge_expired()
        if removed:
            logger.debug("rate_limit.reclaimed", extra={"removed": removed})
        return removed

    async def _run_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                # Worker thread: check_limit callers on the loop interleave with the batches
                await asyncio.to_thread(self.sweep)
            except Exception as exc:
                logger.error(
                    "rate_limit.reclaim_failed",
                    extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
                )
