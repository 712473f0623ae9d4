"""Pydantic schemas for usage records and analytics summaries."""

from datetime import datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RequestType = Literal["chat", "tts"]


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys for the dashboard."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalyticsRecord(CamelModel):
    """One billable provider call."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime
    type: RequestType
    ip_address: str = Field(..., description="Client identifier the request was attributed to.")
    input_tokens: int | None = None
    output_tokens: int | None = None
    characters: int | None = None
    model: str
    cost: float = Field(..., ge=0, description="Estimated cost in USD.")
    duration: int = Field(..., ge=0, description="End-to-end handling time in milliseconds.")


class AnalyticsSummary(CamelModel):
    """Aggregates over the records of one reporting period."""

    total_requests: int
    chat_requests: int
    tts_requests: int
    total_cost: float
    chat_cost: float
    tts_cost: float
    total_tokens: int
    total_characters: int
    average_response_time: float
    unique_users: int
    period: str
    start_date: datetime
    end_date: datetime


class AnalyticsResponse(CamelModel):
    summary: AnalyticsSummary
    records: list[AnalyticsRecord]
    success: bool = True
