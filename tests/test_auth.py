"""
Tests for authentication endpoints (register, login, current user).

These tests verify:
  - Successful registration creates a user and returns a JWT
  - Duplicate username or email is rejected (409 Conflict), including
    a duplicate that only the unique constraint catches
  - Successful login returns a valid JWT
  - Wrong password and unknown user get the same 401 (anti-enumeration)
  - Invalid or missing fields are rejected (400)
  - Protected endpoints reject missing, malformed and expired tokens
"""

from datetime import timedelta

import pytest

from app.security import create_access_token
from app.services import auth_service


REGISTRATION = {
    "username": "janedoe",
    "email": "jane@example.com",
    "name": "Jane Doe",
    "password": "StrongPass99!",
}


# ---------------------------------------------------------------------------
# Registration Tests
# ---------------------------------------------------------------------------

class TestRegister:
    """Tests for POST /api/register."""

    async def test_register_success(self, client):
        """A valid registration should return 201 with the user and a token."""
        response = await client.post("/api/register", json=REGISTRATION)
        assert response.status_code == 201
        data = response.json()
        assert data["user"]["username"] == "janedoe"
        assert data["user"]["email"] == "jane@example.com"
        assert data["user"]["name"] == "Jane Doe"
        assert data["tokenType"] == "bearer"
        assert "token" in data
        assert "hashedPassword" not in data["user"]

    async def test_register_duplicate_username(self, client):
        """Registering an existing username should return 409."""
        assert (await client.post("/api/register", json=REGISTRATION)).status_code == 201

        response = await client.post(
            "/api/register",
            json={**REGISTRATION, "email": "other@example.com"},
        )
        assert response.status_code == 409
        assert "already registered" in response.json()["detail"]

    async def test_register_duplicate_email(self, client):
        """Registering an existing email should return 409."""
        assert (await client.post("/api/register", json=REGISTRATION)).status_code == 201

        response = await client.post(
            "/api/register",
            json={**REGISTRATION, "username": "someoneelse"},
        )
        assert response.status_code == 409
        assert response.json()["error_type"] == "duplicate_user"

    async def test_register_short_password(self, client):
        """Passwords shorter than 8 characters should be rejected."""
        response = await client.post(
            "/api/register",
            json={**REGISTRATION, "password": "short"},
        )
        assert response.status_code == 400
        assert response.json()["error_type"] == "validation_error"

    async def test_register_invalid_email(self, client):
        response = await client.post(
            "/api/register",
            json={**REGISTRATION, "email": "not-an-email"},
        )
        assert response.status_code == 400

    async def test_register_missing_fields(self, client):
        response = await client.post("/api/register", json={"username": "missing"})
        assert response.status_code == 400

    async def test_register_rejects_unknown_fields(self, client):
        """Unexpected keys are rejected rather than silently ignored."""
        response = await client.post(
            "/api/register",
            json={**REGISTRATION, "isAdmin": True},
        )
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "changes, detail",
        [
            ({"email": "other@example.com"}, "Username janedoe is already registered"),
            ({"username": "someoneelse"}, "Email jane@example.com is already registered"),
        ],
    )
    async def test_register_losing_a_race_returns_409(self, client, monkeypatch, changes, detail):
        """A duplicate that slips past the availability check hits the unique constraint."""
        assert (await client.post("/api/register", json=REGISTRATION)).status_code == 201

        async def _nothing_registered(db, username, email):
            return None

        monkeypatch.setattr(auth_service, "_check_available", _nothing_registered)
        response = await client.post("/api/register", json={**REGISTRATION, **changes})
        assert response.status_code == 409
        assert response.json() == {"detail": detail, "error_type": "duplicate_user"}


# ---------------------------------------------------------------------------
# Login Tests
# ---------------------------------------------------------------------------

class TestLogin:
    """Tests for POST /api/login."""

    async def test_login_success(self, client):
        await client.post("/api/register", json=REGISTRATION)

        response = await client.post(
            "/api/login",
            json={"username": "janedoe", "password": "StrongPass99!"},
        )
        assert response.status_code == 200
        data = response.json()
        assert "token" in data
        assert data["tokenType"] == "bearer"

    async def test_login_wrong_password(self, client):
        await client.post("/api/register", json=REGISTRATION)

        response = await client.post(
            "/api/login",
            json={"username": "janedoe", "password": "WrongPassword!"},
        )
        assert response.status_code == 401
        assert "Invalid username or password" in response.json()["detail"]

    async def test_login_unknown_user(self, client):
        """Unknown users get exactly the same error as a wrong password."""
        response = await client.post(
            "/api/login",
            json={"username": "nobody", "password": "SomePassword123!"},
        )
        assert response.status_code == 401
        assert "Invalid username or password" in response.json()["detail"]

    async def test_login_token_works_for_protected_endpoint(self, client):
        await client.post("/api/register", json=REGISTRATION)
        login_response = await client.post(
            "/api/login",
            json={"username": "janedoe", "password": "StrongPass99!"},
        )
        token = login_response.json()["token"]

        response = await client.get(
            "/api/user",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 200
        assert response.json()["username"] == "janedoe"


# ---------------------------------------------------------------------------
# Token Validation Tests
# ---------------------------------------------------------------------------

class TestTokenValidation:
    """Protected endpoints require a valid bearer token."""

    @pytest.mark.parametrize(
        "path",
        ["/api/accounts", "/api/transactions", "/api/goals", "/api/journal", "/api/ai/advice", "/api/user"],
    )
    async def test_missing_token_rejected(self, client, path):
        response = await client.get(path)
        assert response.status_code == 401

    async def test_malformed_token_rejected(self, client):
        response = await client.get(
            "/api/accounts",
            headers={"Authorization": "Bearer not.a.jwt"},
        )
        assert response.status_code == 401

    async def test_expired_token_rejected(self, client, settings):
        register = await client.post("/api/register", json=REGISTRATION)
        user_id = register.json()["user"]["id"]

        expired = create_access_token(
            {"sub": user_id},
            settings=settings,
            expires_delta=timedelta(minutes=-1),
        )
        response = await client.get(
            "/api/accounts",
            headers={"Authorization": f"Bearer {expired}"},
        )
        assert response.status_code == 401

    async def test_token_for_unknown_user_rejected(self, client, settings):
        token = create_access_token(
            {"sub": "00000000-0000-0000-0000-000000000000"},
            settings=settings,
        )
        response = await client.get(
            "/api/accounts",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 401
