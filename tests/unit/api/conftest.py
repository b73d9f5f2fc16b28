"""Fixtures for API tests: app with in-memory stores and a switchable user."""

from uuid import UUID, uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from leadbook.api.app import create_app
from leadbook.api.dependencies import (
    get_buyer_store,
    get_settings,
    get_user_directory,
    reset_dependencies,
)
from leadbook.api.middleware.auth import get_user_context
from leadbook.buyers.stores.inmemory import InMemoryBuyerStore
from leadbook.config.models.storage import StorageConfig
from leadbook.config.settings import Settings
from leadbook.users import User, UserRole
from leadbook.users.stores.inmemory import InMemoryUserDirectory
from tests.factories import CurrentUser


@pytest.fixture
def buyer_store() -> InMemoryBuyerStore:
    return InMemoryBuyerStore()


@pytest.fixture
def directory() -> InMemoryUserDirectory:
    return InMemoryUserDirectory()


@pytest.fixture
def owner_id(directory: InMemoryUserDirectory) -> UUID:
    user = User(id=uuid4(), email="owner@example.com")
    directory.add_user(user)
    return user.id


@pytest.fixture
def other_id(directory: InMemoryUserDirectory) -> UUID:
    user = User(id=uuid4(), email="other@example.com")
    directory.add_user(user)
    return user.id


@pytest.fixture
def admin_id(directory: InMemoryUserDirectory) -> UUID:
    user = User(id=uuid4(), email="admin@example.com", role=UserRole.ADMIN)
    directory.add_user(user)
    return user.id


@pytest.fixture
def current_user(owner_id: UUID) -> CurrentUser:
    return CurrentUser(owner_id)


@pytest.fixture
def settings() -> Settings:
    return Settings(storage=StorageConfig(backend="inmemory"))


@pytest.fixture
def app(
    buyer_store: InMemoryBuyerStore,
    directory: InMemoryUserDirectory,
    current_user: CurrentUser,
    settings: Settings,
) -> FastAPI:
    """Create a test FastAPI application."""
    reset_dependencies()
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_buyer_store] = lambda: buyer_store
    app.dependency_overrides[get_user_directory] = lambda: directory
    app.dependency_overrides[get_user_context] = lambda: current_user.context
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client."""
    return TestClient(app)
