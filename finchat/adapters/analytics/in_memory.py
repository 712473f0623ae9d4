"""In-memory analytics store.

Thread-safe and bounded: once ``max_records`` is reached the oldest records
are dropped. Contents are lost on restart.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from datetime import datetime

from finchat.adapters.analytics.base import AbstractAnalyticsStore
from finchat.schemas.analytics import AnalyticsRecord

logger = logging.getLogger(__name__)


class InMemoryAnalyticsStore(AbstractAnalyticsStore):
    """Keep usage records in a bounded deque."""

    def __init__(self, max_records: int | None = 100_000) -> None:
        self._records: deque[AnalyticsRecord] = deque(maxlen=max_records)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    async def add(self, record: AnalyticsRecord) -> AnalyticsRecord:
        with self._lock:
            self._records.append(record)
            size = len(self._records)

        logger.debug(
            "analytics.record_added",
            extra={"record_type": record.type, "model": record.model, "size": size},
        )
        return record

    async def list_records(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[AnalyticsRecord]:
        with self._lock:
            snapshot = list(self._records)

        return [
            r
            for r in snapshot
            if (start is None or r.timestamp >= start) and (end is None or r.timestamp <= end)
        ]
