"""Analytics store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from finchat.schemas.analytics import AnalyticsRecord, AnalyticsSummary


class AbstractAnalyticsStore(ABC):
    """Append-only storage for usage records."""

    @abstractmethod
    async def add(self, record: AnalyticsRecord) -> AnalyticsRecord:
        """Persist one record and return it."""
        raise NotImplementedError

    @abstractmethod
    async def list_records(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[AnalyticsRecord]:
        """Return records whose timestamp lies within ``[start, end]``.

        Either bound may be omitted.
        """
        raise NotImplementedError

    async def summarize(self, start: datetime, end: datetime) -> AnalyticsSummary:
        """Aggregate the records of a period."""
        records = await self.list_records(start, end)
        return build_summary(records, start, end)


def build_summary(records: list[AnalyticsRecord], start: datetime, end: datetime) -> AnalyticsSummary:
    """Compute totals, per-type costs, average duration and distinct clients."""

    chat = [r for r in records if r.type == "chat"]
    tts = [r for r in records if r.type == "tts"]

    total_duration = sum(r.duration for r in records)

    return AnalyticsSummary(
        total_requests=len(records),
        chat_requests=len(chat),
        tts_requests=len(tts),
        total_cost=sum(r.cost for r in records),
        chat_cost=sum(r.cost for r in chat),
        tts_cost=sum(r.cost for r in tts),
        total_tokens=sum((r.input_tokens or 0) + (r.output_tokens or 0) for r in records),
        total_characters=sum(r.characters or 0 for r in records),
        average_response_time=total_duration / len(records) if records else 0.0,
        unique_users=len({r.ip_address for r in records}),
        period=f"{start.isoformat()} to {end.isoformat()}",
        start_date=start,
        end_date=end,
    )
