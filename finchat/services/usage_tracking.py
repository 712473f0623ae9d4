"""Usage tracking: cost estimation and analytics records.

Tracking runs after the response has been sent (FastAPI background task), so
every failure is logged here and never propagates.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Callable

from finchat.adapters.analytics.base import AbstractAnalyticsStore
from finchat.core.logging import hash_identifier
from finchat.schemas.analytics import AnalyticsRecord

logger = logging.getLogger(__name__)

# USD per token (chat) or per character (tts)
PRICING = {
    "groq_llama_3_3_70b": {"input": 0.00000059, "output": 0.00000079},
    "openai_gpt_4o": {"input": 0.000005, "output": 0.000015},
    "openai_tts_1": {"per_character": 0.000015},
}


def estimate_token_count(text: str) -> int:
    """Rough token estimate: one token per four characters."""
    return math.ceil(len(text) / 4)


def calculate_chat_cost(input_tokens: int, output_tokens: int, model: str) -> float:
    name = model.lower()
    if "llama" in name or "groq" in name:
        prices = PRICING["groq_llama_3_3_70b"]
    else:
        prices = PRICING["openai_gpt_4o"]
    return input_tokens * prices["input"] + output_tokens * prices["output"]


def calculate_tts_cost(characters: int) -> float:
    return characters * PRICING["openai_tts_1"]["per_character"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UsageTracker:
    """Record provider usage for billing and the analytics dashboard."""

    def __init__(
        self,
        store: AbstractAnalyticsStore,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self._clock = clock

    async def track_chat(
        self,
        client_id: str,
        input_tokens: int,
        output_tokens: int,
        model: str,
        duration_ms: int,
    ) -> AnalyticsRecord | None:
        record = AnalyticsRecord(
            timestamp=self._clock(),
            type="chat",
            ip_address=client_id,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model=model,
            cost=calculate_chat_cost(input_tokens, output_tokens, model),
            duration=duration_ms,
        )
        return await self._save(record)

    async def track_tts(
        self,
        client_id: str,
        characters: int,
        model: str,
        duration_ms: int,
    ) -> AnalyticsRecord | None:
        record = AnalyticsRecord(
            timestamp=self._clock(),
            type="tts",
            ip_address=client_id,
            characters=characters,
            model=model,
            cost=calculate_tts_cost(characters),
            duration=duration_ms,
        )
        return await self._save(record)

    async def _save(self, record: AnalyticsRecord) -> AnalyticsRecord | None:
        try:
            saved = await self.store.add(record)
        except Exception as exc:
            logger.error(
                "usage.tracking_failed",
                extra={
                    "record_type": record.type,
                    "client_hash": hash_identifier(record.ip_address),
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            return None

        logger.info(
            "usage.tracked",
            extra={
                "record_type": record.type,
                "model": record.model,
                "cost_usd": record.cost,
                "duration_ms": record.duration,
            },
        )
        return saved
