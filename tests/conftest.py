"""
Shared fixtures for the API test suite.

The application is built with ``create_app`` and its repositories are
replaced with in-memory doubles, so no database is needed. ``TestClient`` is
used without a ``with`` block, which leaves the lifespan (pool creation and
schema bootstrap) unexecuted.
"""

from typing import Callable, Dict

import pytest
from fastapi.testclient import TestClient

from api.src.config import Settings
from api.src.dependencies import (
    get_address_repository,
    get_contact_repository,
    get_user_repository,
)
from api.src.main import create_app
from tests.fakes import (
    TEST_PASSWORD,
    FakeAddressRepository,
    FakeContactRepository,
    FakeUserRepository,
    InMemoryStore,
)


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings tuned for fast tests (cheap bcrypt, quiet logs)."""
    return Settings(
        environment="development",
        log_level="WARNING",
        log_format="text",
        password_bcrypt_rounds=4,
        cors_enabled=False,
        database_create_schema=False,
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def app(settings, store):
    application = create_app(settings)
    application.dependency_overrides[get_user_repository] = lambda: FakeUserRepository(store)
    application.dependency_overrides[get_contact_repository] = lambda: FakeContactRepository(store)
    application.dependency_overrides[get_address_repository] = lambda: FakeAddressRepository(store)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


# ============================================================================
# AUTHENTICATION FIXTURES
# ============================================================================


@pytest.fixture
def login_as(client) -> Callable[[str], Dict[str, str]]:
    """Register (if needed) and log in a user; returns auth headers."""

    def _login(username: str) -> Dict[str, str]:
        client.post(
            "/api/users",
            json={"username": username, "password": TEST_PASSWORD, "name": username.title()}
        )
        response = client.post(
            "/api/users/login",
            json={"username": username, "password": TEST_PASSWORD}
        )
        assert response.status_code == 200
        return {"X-API-TOKEN": response.json()["data"]["token"]}

    return _login


@pytest.fixture
def auth_headers(login_as) -> Dict[str, str]:
    return login_as("test")


@pytest.fixture
def other_headers(login_as) -> Dict[str, str]:
    return login_as("other")


@pytest.fixture
def contact(client, auth_headers) -> Dict:
    """A contact owned by the ``test`` user."""
    response = client.post(
        "/api/contacts",
        json={
            "first_name": "Edo",
            "last_name": "Sibua",
            "email": "edo@example.com",
            "phone": "0899999"
        },
        headers=auth_headers
    )
    assert response.status_code == 200
    return response.json()["data"]
