"""Tests for admin verification and the analytics dashboard endpoint."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from finchat.core import admin as admin_module
from finchat.schemas.analytics import AnalyticsRecord


class TestAdminVerify:
    def test_correct_password_is_verified(self, client: TestClient) -> None:
        response = client.post("/api/admin/verify", json={"password": "test-admin-password"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "verified": True}

    def test_wrong_password_is_not_an_error(self, client: TestClient) -> None:
        response = client.post("/api/admin/verify", json={"password": "guess"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "verified": False}

    def test_empty_password_is_rejected(self, client: TestClient) -> None:
        response = client.post("/api/admin/verify", json={"password": ""})

        assert response.status_code == 400

    def test_unconfigured_password_never_verifies(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(admin_module.settings.admin, "password", None)

        response = client.post("/api/admin/verify", json={"password": "anything"})

        assert response.json()["verified"] is False


class TestAnalyticsEndpoint:
    def test_requires_admin_password(self, client: TestClient) -> None:
        assert client.get("/api/analytics").status_code == 403
        assert client.get("/api/analytics", headers={"X-Admin-Password": "nope"}).status_code == 403

    def test_reports_chat_and_tts_usage(self, client: TestClient, admin_headers: dict[str, str]) -> None:
        client.post("/api/chat", json={"message": "How does VAT work?"})
        client.post("/api/tts", json={"text": "VAT is a consumption tax."})

        response = client.get("/api/analytics", params={"period": "all"}, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        summary = data["summary"]
        assert summary["totalRequests"] == 2
        assert summary["chatRequests"] == 1
        assert summary["ttsRequests"] == 1
        assert summary["uniqueUsers"] == 1
        assert summary["totalCharacters"] == len("VAT is a consumption tax.")
        assert summary["totalCost"] == pytest.approx(summary["chatCost"] + summary["ttsCost"])
        assert {r["type"] for r in data["records"]} == {"chat", "tts"}
        assert data["records"][0]["ipAddress"] == "testclient"

    def test_period_filters_old_records(
        self, client: TestClient, admin_headers: dict[str, str], analytics_store
    ) -> None:
        analytics_store._records.append(
            AnalyticsRecord(
                timestamp=datetime(2020, 1, 1, tzinfo=timezone.utc),
                type="chat",
                ip_address="old",
                input_tokens=1,
                output_tokens=1,
                model="gpt-4o",
                cost=0.1,
                duration=100,
            )
        )

        today = client.get("/api/analytics", headers=admin_headers).json()
        everything = client.get("/api/analytics", params={"period": "all"}, headers=admin_headers).json()

        assert today["summary"]["totalRequests"] == 0
        assert everything["summary"]["totalRequests"] == 1
