"""Tests for the text-to-speech endpoint."""

import pytest
from fastapi.testclient import TestClient

from conftest import FakeSpeechClient
from finchat.adapters.analytics.in_memory import InMemoryAnalyticsStore


def test_tts_returns_mp3_bytes(client: TestClient, speech_client: FakeSpeechClient) -> None:
    response = client.post("/api/tts", json={"text": "Hello there", "voice": "onyx", "speed": 1.5})

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/mpeg"
    assert response.content == b"ID3-fake-mp3"
    assert speech_client.calls == [{"text": "Hello there", "voice": "onyx", "speed": 1.5}]


def test_tts_defaults(client: TestClient, speech_client: FakeSpeechClient) -> None:
    client.post("/api/tts", json={"text": "Hi"})

    assert speech_client.calls[0]["voice"] == "nova"
    assert speech_client.calls[0]["speed"] == 1.0


def test_tts_usage_is_tracked_by_characters(client: TestClient, analytics_store: InMemoryAnalyticsStore) -> None:
    client.post("/api/tts", json={"text": "x" * 1000})

    record = analytics_store._records[0]
    assert record.type == "tts"
    assert record.characters == 1000
    assert record.model == "tts-1"
    assert record.cost == pytest.approx(0.015)


@pytest.mark.parametrize(
    "body",
    [
        {"text": ""},
        {"text": "x" * 4097},
        {"text": "hi", "voice": "robot"},
        {"text": "hi", "speed": 0.1},
        {"text": "hi", "speed": 4.5},
    ],
)
def test_tts_invalid_body_returns_400(client: TestClient, body: dict) -> None:
    response = client.post("/api/tts", json=body)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid_request_format"


def test_tts_provider_failure_returns_500(app, speech_client: FakeSpeechClient, analytics_store) -> None:
    speech_client.error = RuntimeError("quota")

    response = TestClient(app).post("/api/tts", json={"text": "Hello"})

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "tts_generation_failed"
    assert len(analytics_store) == 0
