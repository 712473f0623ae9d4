"""Reporting periods for the analytics dashboard."""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone

from finchat.adapters.analytics.base import AbstractAnalyticsStore
from finchat.schemas.analytics import AnalyticsResponse

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _one_month_before(moment: datetime) -> datetime:
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def resolve_period(period: str | None, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Map a period name to a ``(start, end)`` range ending at ``now``.

    Unknown or missing names fall back to ``today`` (since UTC midnight).
    """
    end = now or datetime.now(timezone.utc)

    if period == "week":
        start = end - timedelta(days=7)
    elif period == "month":
        start = _one_month_before(end)
    elif period == "all":
        start = EPOCH
    else:
        start = end.replace(hour=0, minute=0, second=0, microsecond=0)

    return start, end


class AnalyticsService:
    def __init__(self, store: AbstractAnalyticsStore) -> None:
        self.store = store

    async def report(self, period: str | None, now: datetime | None = None) -> AnalyticsResponse:
        start, end = resolve_period(period, now)
        records = await self.store.list_records(start, end)
        summary = await self.store.summarize(start, end)
        return AnalyticsResponse(summary=summary, records=records)
