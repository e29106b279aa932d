"""Tests for the HTTP interface."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from main import create_app
from token_refresher.core import TokenRefreshService
from token_refresher.errors import LoginError, TokenStoreError
from token_refresher.models import CredentialRecord
from token_refresher.security import FailureRegistry, SecurityService
from token_refresher.storage import JsonFileTokenStore

SECRET = "internal-fetch-secret"
NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def record() -> CredentialRecord:
    return CredentialRecord(token="abcXYZ", refreshed_at=NOW, expires_at=NOW + timedelta(hours=24))


@pytest.fixture
def service(store: JsonFileTokenStore, record: CredentialRecord) -> MagicMock:
    svc = MagicMock(spec=TokenRefreshService)
    svc.store = store
    svc.store_key = "gamehub_token"
    svc.refresh = AsyncMock(return_value=record)
    return svc


@pytest.fixture
def client(service: MagicMock) -> TestClient:
    security = SecurityService(SECRET, FailureRegistry(threshold=3, lock_seconds=60))
    return TestClient(create_app(service, security, scheduler_enabled=False))


class TestGetToken:
    def test_rejects_missing_header(self, client: TestClient) -> None:
        response = client.get("/token")
        assert response.status_code == 403
        assert response.headers["content-type"].startswith("text/plain")

    def test_rejects_wrong_header(self, client: TestClient) -> None:
        response = client.get("/token", headers={"X-Worker-Auth": "nope"})
        assert response.status_code == 403

    def test_404_when_no_record(self, client: TestClient) -> None:
        response = client.get("/token", headers={"X-Worker-Auth": SECRET})
        assert response.status_code == 404
        assert response.json() == {"error": "No token available"}

    def test_returns_stored_record(self, client: TestClient, store: JsonFileTokenStore, record: CredentialRecord) -> None:
        store.put("gamehub_token", record.model_dump(mode="json"))
        response = client.get("/token", headers={"X-Worker-Auth": SECRET})
        assert response.status_code == 200
        assert response.json() == {
            "token": "abcXYZ",
            "refreshed_at": "2025-01-01T00:00:00Z",
            "expires_at": "2025-01-02T00:00:00Z",
        }

    def test_locks_after_repeated_failures(self, client: TestClient) -> None:
        for _ in range(3):
            client.get("/token", headers={"X-Worker-Auth": "nope"})
        response = client.get("/token", headers={"X-Worker-Auth": SECRET})
        assert response.status_code == 403


class TestManualRefresh:
    def test_success_payload(self, client: TestClient, service: MagicMock) -> None:
        response = client.post("/refresh")
        assert response.status_code == 200
        assert response.json() == {"success": True, "token": "abcXYZ", "refreshed_at": "2025-01-01T00:00:00Z"}
        service.refresh.assert_awaited_once()

    def test_failure_returns_500_with_message(self, client: TestClient, service: MagicMock) -> None:
        service.refresh.side_effect = LoginError("Login failed: captcha error")
        response = client.post("/refresh")
        assert response.status_code == 500
        assert response.json() == {"error": "Login failed: captcha error"}

    def test_unexpected_error_returns_json_500(self, client: TestClient, service: MagicMock) -> None:
        service.refresh.side_effect = TokenStoreError("Token store file format error")
        response = client.post("/refresh")
        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"error": "Token store file format error"}

    def test_malformed_upstream_json_returns_json_500(self, client: TestClient, service: MagicMock) -> None:
        service.refresh.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        response = client.post("/refresh")
        assert response.status_code == 500
        assert response.json() == {"error": "Expecting value: line 1 column 1 (char 0)"}


class TestWeb:
    def test_root_lists_endpoints(self, client: TestClient) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert "GET /token" in response.text
        assert "POST /refresh" in response.text

    def test_status_requires_auth(self, client: TestClient) -> None:
        assert client.get("/status").status_code == 403

    def test_status_without_scheduler(self, client: TestClient) -> None:
        response = client.get("/status", headers={"X-Worker-Auth": SECRET})
        assert response.status_code == 200
        body = response.json()
        assert body["scheduler"] is None
        assert body["security"]["failed_worker_auth_attempts"] == 0


class TestUnconfiguredSecret:
    def test_every_request_rejected(self, service: MagicMock) -> None:
        client = TestClient(create_app(service, SecurityService(""), scheduler_enabled=False))
        assert client.get("/token", headers={"X-Worker-Auth": ""}).status_code == 403
