"""Dependency injection for API routes.

Services are built once by the app factory and stored on ``app.state``;
these accessors hand them to route handlers.
"""

from typing import Annotated

from fastapi import Depends, Request

from finchat.services.analytics_service import AnalyticsService
from finchat.services.chat_service import ChatService
from finchat.services.speech_service import SpeechService
from finchat.services.usage_tracking import UsageTracker


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def get_speech_service(request: Request) -> SpeechService:
    return request.app.state.speech_service


def get_usage_tracker(request: Request) -> UsageTracker:
    return request.app.state.usage_tracker


def get_analytics_service(request: Request) -> AnalyticsService:
    return request.app.state.analytics_service


ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
SpeechServiceDep = Annotated[SpeechService, Depends(get_speech_service)]
UsageTrackerDep = Annotated[UsageTracker, Depends(get_usage_tracker)]
AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
