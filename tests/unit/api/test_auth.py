"""Tests for bearer token authentication."""

import asyncio
import time
from collections.abc import Callable
from typing import Any
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jose import jwt

from leadbook.api.app import create_app
from leadbook.api.dependencies import get_buyer_store, get_settings, get_user_directory
from leadbook.buyers.stores.inmemory import InMemoryBuyerStore
from leadbook.config.models.auth import AuthConfig
from leadbook.config.settings import Settings
from leadbook.users.stores.inmemory import InMemoryUserDirectory

SECRET = "test-secret-with-enough-length"


def make_token(secret: str = SECRET, **claims: Any) -> str:
    payload = {
        "sub": str(uuid4()),
        "email": "agent@example.com",
        "aud": "authenticated",
        "exp": int(time.time()) + 3600,
        "user_metadata": {"full_name": "Field Agent"},
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEADBOOK_JWT_SECRET", SECRET)


@pytest.fixture
def directory() -> InMemoryUserDirectory:
    return InMemoryUserDirectory()


@pytest.fixture
def make_client(directory: InMemoryUserDirectory) -> Callable[[AuthConfig], TestClient]:
    def _make(auth: AuthConfig) -> TestClient:
        app: FastAPI = create_app()
        settings = Settings(auth=auth)
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_buyer_store] = InMemoryBuyerStore
        app.dependency_overrides[get_user_directory] = lambda: directory
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client: Callable[[AuthConfig], TestClient]) -> TestClient:
    return make_client(AuthConfig())


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestAuthentication:
    """Tests for get_user_context."""

    def test_missing_token(self, client: TestClient) -> None:
        response = client.get("/v1/buyers")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_valid_token(self, client: TestClient) -> None:
        response = client.get("/v1/buyers", headers=bearer(make_token()))
        assert response.status_code == 200

    def test_wrong_secret(self, client: TestClient) -> None:
        token = make_token(secret="another-secret-entirely")
        assert client.get("/v1/buyers", headers=bearer(token)).status_code == 401

    def test_expired_token(self, client: TestClient) -> None:
        token = make_token(exp=int(time.time()) - 60)
        assert client.get("/v1/buyers", headers=bearer(token)).status_code == 401

    def test_wrong_audience(self, client: TestClient) -> None:
        token = make_token(aud="someone-else")
        assert client.get("/v1/buyers", headers=bearer(token)).status_code == 401

    def test_audience_check_disabled(self, make_client: Callable[[AuthConfig], TestClient]) -> None:
        client = make_client(AuthConfig(audience=None))
        token = make_token(aud="someone-else")
        assert client.get("/v1/buyers", headers=bearer(token)).status_code == 200

    def test_subject_must_be_uuid(self, client: TestClient) -> None:
        token = make_token(sub="not-a-uuid")
        assert client.get("/v1/buyers", headers=bearer(token)).status_code == 401


class TestProvisioning:
    """Tests for first-sign-in user provisioning."""

    def test_user_added_on_first_request(
        self, client: TestClient, directory: InMemoryUserDirectory
    ) -> None:
        user_id = uuid4()
        client.get("/v1/buyers", headers=bearer(make_token(sub=str(user_id))))

        user = asyncio.run(directory.get_user(user_id))
        assert user is not None
        assert user.full_name == "Field Agent"
        assert not user.is_admin

    def test_provisioning_disabled(
        self,
        make_client: Callable[[AuthConfig], TestClient],
        directory: InMemoryUserDirectory,
    ) -> None:
        client = make_client(AuthConfig(provision_users=False))
        user_id = uuid4()
        client.get("/v1/buyers", headers=bearer(make_token(sub=str(user_id))))

        assert asyncio.run(directory.get_user(user_id)) is None
