"""
Contract tests for the user endpoints.

Tests cover:
- Registration (validation, duplicate usernames, password hashing)
- Login and static API token issuing
- Current user profile retrieval and update
- Logout (token revocation)
"""

import pytest

from tests.fakes import TEST_PASSWORD


def register(client, username="test", password=TEST_PASSWORD, name="Test User"):
    return client.post(
        "/api/users",
        json={"username": username, "password": password, "name": name}
    )


def login(client, username="test", password=TEST_PASSWORD):
    return client.post("/api/users/login", json={"username": username, "password": password})


# ============================================================================
# REGISTER
# ============================================================================


class TestRegister:
    """Tests for POST /api/users."""

    def test_register_success(self, client):
        response = register(client)

        assert response.status_code == 200
        assert response.json() == {"data": {"username": "test", "name": "Test User"}}

    def test_register_stores_bcrypt_hash(self, client, store):
        register(client)

        stored = store.users["test"].password
        assert stored != TEST_PASSWORD
        assert stored.startswith("$2b$")

    def test_register_duplicate_username(self, client):
        register(client)

        response = register(client, name="Someone Else")

        assert response.status_code == 400
        assert response.json() == {"errors": "Username already exists"}

    @pytest.mark.parametrize("field", ["username", "password", "name"])
    def test_register_empty_field(self, client, field):
        payload = {"username": "test", "password": TEST_PASSWORD, "name": "Test User", field: ""}

        response = client.post("/api/users", json=payload)

        assert response.status_code == 400
        assert any(error["field"] == field for error in response.json()["errors"])

    def test_register_username_too_long(self, client):
        response = register(client, username="u" * 101)

        assert response.status_code == 400


# ============================================================================
# LOGIN
# ============================================================================


class TestLogin:
    """Tests for POST /api/users/login."""

    def test_login_success_returns_token(self, client):
        register(client)

        response = login(client)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["username"] == "test"
        assert data["name"] == "Test User"
        assert data["token"]

    def test_login_wrong_password(self, client):
        register(client)

        response = login(client, password="salah")

        assert response.status_code == 401
        assert response.json() == {"errors": "Username or password is wrong"}

    def test_login_unknown_user(self, client):
        response = login(client, username="nobody")

        assert response.status_code == 401
        assert response.json() == {"errors": "Username or password is wrong"}

    def test_login_again_replaces_token(self, client):
        """Test only the most recently issued token is accepted."""
        register(client)
        first = login(client).json()["data"]["token"]
        second = login(client).json()["data"]["token"]

        assert first != second
        assert client.get("/api/users/current", headers={"X-API-TOKEN": first}).status_code == 401
        assert client.get("/api/users/current", headers={"X-API-TOKEN": second}).status_code == 200


# ============================================================================
# CURRENT USER
# ============================================================================


class TestCurrentUser:
    """Tests for GET/PATCH/DELETE /api/users/current."""

    def test_get_current_user(self, client, auth_headers):
        response = client.get("/api/users/current", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"data": {"username": "test", "name": "Test"}}

    def test_get_current_user_without_token(self, client):
        response = client.get("/api/users/current")

        assert response.status_code == 401
        assert response.json() == {"errors": "Unauthorized"}

    def test_get_current_user_blank_token(self, client, auth_headers):
        response = client.get("/api/users/current", headers={"X-API-TOKEN": "   "})

        assert response.status_code == 401

    def test_update_name_only(self, client, auth_headers, store):
        old_hash = store.users["test"].password

        response = client.patch(
            "/api/users/current",
            json={"name": "Renamed"},
            headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json() == {"data": {"username": "test", "name": "Renamed"}}
        assert store.users["test"].password == old_hash

    def test_update_password(self, client, auth_headers):
        response = client.patch(
            "/api/users/current",
            json={"password": "baru123"},
            headers=auth_headers
        )

        assert response.status_code == 200
        assert login(client, password=TEST_PASSWORD).status_code == 401
        assert login(client, password="baru123").status_code == 200

    def test_update_invalid(self, client, auth_headers):
        response = client.patch("/api/users/current", json={"name": ""}, headers=auth_headers)

        assert response.status_code == 400
        assert any(error["field"] == "name" for error in response.json()["errors"])

    def test_logout_revokes_token(self, client, auth_headers):
        response = client.delete("/api/users/current", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"data": "OK"}

        after = client.get("/api/users/current", headers=auth_headers)
        assert after.status_code == 401
        assert after.json() == {"errors": "Unauthorized"}

    def test_logout_without_token(self, client):
        response = client.delete("/api/users/current")

        assert response.status_code == 401
