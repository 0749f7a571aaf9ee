"""
Tests for the web application routes.
"""

import re
from html import unescape
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

import settings
from conftest import TOKEN_PATH, USER_INFO_PATH, user_payload
from storage.models import Credential
from web import app


@pytest.fixture
def client(services) -> TestClient:
    return TestClient(app)


def _state(url: str) -> str:
    return parse_qs(urlparse(url).query)["state"][0]


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCallback:
    def test_without_parameters_starts_authorization(self, client: TestClient, services) -> None:
        response = client.get(settings.CALLBACK_PATH)

        assert response.status_code == 200
        match = re.search(r'href="(https://twitter\.com/i/oauth2/authorize[^"]+)"', response.text)
        assert match
        assert _state(unescape(match.group(1))) == services.oauth.sessions.load().state

    def test_success(self, client: TestClient, services, fake_x) -> None:
        fake_x.add("POST", TOKEN_PATH, 200, json={"access_token": "at", "refresh_token": "rt"})
        fake_x.add("GET", USER_INFO_PATH, 200, json=user_payload())
        state = _state(services.oauth.begin_authorization())

        response = client.get(settings.CALLBACK_PATH, params={"code": "abc", "state": state})

        assert response.status_code == 200
        assert "alice" in response.text
        assert services.credentials.get_credential("42").access_token == "at"

    def test_error_from_x(self, client: TestClient) -> None:
        response = client.get(settings.CALLBACK_PATH, params={
            "error": "access_denied",
            "error_description": "<b>User said no</b>",
        })
        assert response.status_code == 400
        assert "access_denied" in response.text
        assert "<b>User said no</b>" not in response.text

    def test_state_mismatch(self, client: TestClient, services, fake_x) -> None:
        services.oauth.begin_authorization()
        response = client.get(settings.CALLBACK_PATH, params={"code": "abc", "state": "forged"})
        assert response.status_code == 400
        assert fake_x.requests == []

    def test_non_ascii_state(self, client: TestClient, services, fake_x) -> None:
        services.oauth.begin_authorization()
        response = client.get(settings.CALLBACK_PATH, params={"code": "abc", "state": "état"})
        assert response.status_code == 400
        assert fake_x.requests == []

    def test_missing_verifier(self, client: TestClient) -> None:
        response = client.get(settings.CALLBACK_PATH, params={"code": "abc", "state": "anything"})
        assert response.status_code == 400

    def test_upstream_failure(self, client: TestClient, services, fake_x) -> None:
        fake_x.add("POST", TOKEN_PATH, 400, json={"error": "invalid_grant"})
        state = _state(services.oauth.begin_authorization())

        response = client.get(settings.CALLBACK_PATH, params={"code": "abc", "state": state})

        assert response.status_code == 502
        assert services.oauth.sessions.load() is None


class TestAuthStatus:
    def test_lists_users_with_masked_tokens(self, client: TestClient, alice, credentials) -> None:
        credentials.upsert_credentials(Credential("43", "bob", "bob-access-token", "bob-refresh-token"))

        body = client.get("/auth/status").json()

        assert [user["user_name"] for user in body["users"]] == ["alice", "bob"]
        assert body["users"][1]["access_token"] == "bob-...oken"
        assert "bob-access-token" not in str(body)
        assert body["error"] is None

    def test_missing_sheet(self, client: TestClient) -> None:
        body = client.get("/auth/status").json()
        assert body["users"] == []
        assert "credentials" in body["error"]
