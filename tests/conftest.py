"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any ``finchat`` import so the global
settings object is built from test values rather than a developer's .env.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("ADMIN_PASSWORD", "test-admin-password")
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from finchat.adapters.analytics.in_memory import InMemoryAnalyticsStore
from finchat.adapters.llm.base import AbstractChatClient, AbstractSpeechClient, ChatTurn
from finchat.adapters.rate_limit.in_memory import InMemoryRollingWindowRateLimiter
from finchat.core.app_factory import create_app
from finchat.services.chat_service import ChatService
from finchat.services.speech_service import SpeechService


class FakeChatClient(AbstractChatClient):
    """Chat client double that records every conversation it receives."""

    def __init__(self, reply: str | None = "Your personal allowance is £12,570.", *, error: Exception | None = None) -> None:
        self.provider = "fake"
        self.model = "gpt-4o"
        self.reply = reply
        self.error = error
        self.calls: list[list[ChatTurn]] = []

    async def complete(self, messages: list[ChatTurn], *, max_tokens: int | None = None) -> str | None:
        self.calls.append(messages)
        if self.error:
            raise self.error
        return self.reply


class FakeSpeechClient(AbstractSpeechClient):
    def __init__(self, audio: bytes = b"ID3-fake-mp3", *, error: Exception | None = None) -> None:
        self.model = "tts-1"
        self.audio = audio
        self.error = error
        self.calls: list[dict] = []

    async def synthesize(self, text: str, *, voice: str, speed: float) -> bytes:
        self.calls.append({"text": text, "voice": voice, "speed": speed})
        if self.error:
            raise self.error
        return self.audio


@pytest.fixture
def clock() -> Mock:
    """Frozen wall clock for the rate limiter (advance via ``return_value``)."""
    return Mock(return_value=1000.0)


@pytest.fixture
def limiter(clock: Mock) -> InMemoryRollingWindowRateLimiter:
    return InMemoryRollingWindowRateLimiter(limit=3, window_seconds=60, clock=clock)


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def speech_client() -> FakeSpeechClient:
    return FakeSpeechClient()


@pytest.fixture
def analytics_store() -> InMemoryAnalyticsStore:
    return InMemoryAnalyticsStore()


@pytest.fixture
def app(
    limiter: InMemoryRollingWindowRateLimiter,
    chat_client: FakeChatClient,
    speech_client: FakeSpeechClient,
    analytics_store: InMemoryAnalyticsStore,
) -> FastAPI:
    """Independent app instance with fake providers and its own limiter."""
    return create_app(
        rate_limiter=limiter,
        analytics_store=analytics_store,
        chat_service=ChatService(chat_client),
        speech_service=SpeechService(speech_client),
        configure_logs=False,
    )


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Password": "test-admin-password"}
