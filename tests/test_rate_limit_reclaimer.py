"""Tests for the periodic rate limit reclamation task."""

import asyncio
import logging
import threading
from unittest.mock import Mock

import pytest

from finchat.adapters.rate_limit.base import AbstractRateLimiter
from finchat.adapters.rate_limit.in_memory import InMemoryRollingWindowRateLimiter
from finchat.adapters.rate_limit.reclaimer import RateLimitReclaimer


@pytest.mark.asyncio
async def test_reclaimer_purges_expired_windows_periodically() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryRollingWindowRateLimiter(limit=1, window_seconds=10, clock=clock)
    limiter.check_limit("one-off")
    clock.return_value = 1011.0

    reclaimer = RateLimitReclaimer(limiter, interval_seconds=0.01)
    await reclaimer.start()
    await asyncio.sleep(0.05)
    await reclaimer.stop()

    assert len(limiter) == 0


@pytest.mark.asyncio
async def test_reclaimer_keeps_active_windows() -> None:
    limiter = InMemoryRollingWindowRateLimiter(limit=1, window_seconds=60, clock=lambda: 1000.0)
    limiter.check_limit("active")

    reclaimer = RateLimitReclaimer(limiter, interval_seconds=0.01)
    await reclaimer.start()
    await asyncio.sleep(0.05)
    await reclaimer.stop()

    assert len(limiter) == 1
    assert limiter.check_limit("active").allowed is False


@pytest.mark.asyncio
async def test_reclaimer_survives_failing_sweep(caplog: pytest.LogCaptureFixture) -> None:
    limiter = Mock(spec=AbstractRateLimiter)
    limiter.purge_expired.side_effect = [RuntimeError("boom")] + [0] * 1000

    reclaimer = RateLimitReclaimer(limiter, interval_seconds=0.01)
    with caplog.at_level(logging.ERROR):
        await reclaimer.start()
        await asyncio.sleep(0.08)
        await reclaimer.stop()

    assert limiter.purge_expired.call_count >= 2
    assert any(r.getMessage() == "rate_limit.reclaim_failed" for r in caplog.records)


@pytest.mark.asyncio
async def test_start_is_idempotent_and_stop_cancels() -> None:
    limiter = Mock(spec=AbstractRateLimiter)
    limiter.purge_expired.return_value = 0
    reclaimer = RateLimitReclaimer(limiter, interval_seconds=60)

    await reclaimer.start()
    first_task = reclaimer._task
    await reclaimer.start()
    assert reclaimer._task is first_task
    assert reclaimer.running is True

    await reclaimer.stop()
    assert reclaimer.running is False
    limiter.purge_expired.assert_not_called()


@pytest.mark.asyncio
async def test_stop_without_start_is_a_noop() -> None:
    reclaimer = RateLimitReclaimer(Mock(spec=AbstractRateLimiter), interval_seconds=1)

    await reclaimer.stop()

    assert reclaimer.running is False


def test_sweep_returns_removed_count() -> None:
    limiter = Mock(spec=AbstractRateLimiter)
    limiter.purge_expired.return_value = 3

    assert RateLimitReclaimer(limiter).sweep() == 3


@pytest.mark.parametrize("interval", [0, -1])
def test_invalid_interval(interval: float) -> None:
    with pytest.raises(ValueError):
        RateLimitReclaimer(Mock(spec=AbstractRateLimiter), interval_seconds=interval)


class _SlowPurgeLimiter(InMemoryRollingWindowRateLimiter):
    """Limiter whose purge blocks until the test releases it."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.purge_started = threading.Event()
        self.release = threading.Event()
        self.purging = False

    def purge_expired(self, now: float | None = None) -> int:
        self.purging = True
        self.purge_started.set()
        try:
            self.release.wait(timeout=2)
            return super().purge_expired(now)
        finally:
            self.purging = False


@pytest.mark.asyncio
async def test_checks_proceed_while_a_sweep_is_running() -> None:
    limiter = _SlowPurgeLimiter(limit=5, window_seconds=60, clock=lambda: 1000.0)
    reclaimer = RateLimitReclaimer(limiter, interval_seconds=0.01)

    await reclaimer.start()
    try:
        assert await asyncio.to_thread(limiter.purge_started.wait, 2)

        decision = limiter.check_limit("live")

        assert decision.allowed is True
        assert limiter.purging is True
    finally:
        limiter.release.set()
        await reclaimer.stop()
