"""
Integration tests for the user registration and login flow.

Tests the full flow through the API with a real database.
Requires PostgreSQL to be running (DATABASE_URL); skipped otherwise.
"""

import logging
from collections.abc import Generator

import psycopg
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from src.api.main import app
from src.config.settings import get_settings

pytestmark = pytest.mark.integration

VALID_USER = {"username": "username1", "password": "passw0rd", "email": "username@domain.com"}


@pytest.fixture
def client(database_url: str) -> Generator[TestClient, None, None]:
    """Test client with lifespan (pool + migrations) and an empty users table."""
    with TestClient(app) as client:
        with psycopg.connect(database_url) as conn:
            conn.execute("DELETE FROM users")
        yield client


def stored_username(database_url: str, username: str) -> str | None:
    """Read a username straight from the users table."""
    with psycopg.connect(database_url) as conn:
        row = conn.execute(
            "SELECT username FROM users WHERE username = %s", (username,)
        ).fetchone()
    return row[0] if row else None


class TestCreateUserFlow:
    """Integration tests for POST /users."""

    def test_empty_body_returns_400(self, client: TestClient) -> None:
        """Posting without a body is rejected."""
        response = client.post("/users")
        assert response.status_code == 400

    def test_invalid_body_returns_400_and_errors(self, client: TestClient) -> None:
        """All-empty fields produce three format errors."""
        response = client.post("/users", json={"username": "", "password": "", "email": ""})

        assert response.status_code == 400
        assert len(response.json()) == 3

    def test_valid_body_returns_201(self, client: TestClient) -> None:
        """A fresh valid user is created."""
        response = client.post("/users", json=VALID_USER)

        assert response.status_code == 201
        assert response.json() == {"message": "User created."}

    def test_valid_body_stores_user(self, client: TestClient, database_url: str) -> None:
        """The created user is retrievable by username afterwards."""
        client.post("/users", json=VALID_USER)

        assert stored_username(database_url, "username1") == "username1"

    def test_second_registration_reports_taken(self, client: TestClient) -> None:
        """Re-registering the same user lists both conflicts."""
        client.post("/users", json=VALID_USER)

        response = client.post("/users", json=VALID_USER)

        assert response.status_code == 400
        assert response.json() == [
            {"path": "username", "message": '"username" is taken'},
            {"path": "email", "message": '"email" is taken'},
        ]

    def test_rejection_is_logged(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Rejected registrations are logged with their error count."""
        with caplog.at_level(logging.INFO):
            client.post("/users", json={**VALID_USER, "username": "a"})

        assert "Registration rejected with 1 error(s)" in caplog.text


class TestAuthenticateFlow:
    """Integration tests for POST /users/authenticate."""

    def test_login_after_registration_returns_token(self, client: TestClient) -> None:
        """Registered credentials return a token for the username."""
        client.post("/users", json=VALID_USER)

        response = client.post(
            "/users/authenticate",
            json={"username": "username1", "password": "passw0rd"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Authenticated"
        settings = get_settings()
        claims = jwt.decode(
            body["token"], settings.token_secret, algorithms=[settings.token_algorithm]
        )
        assert claims["sub"] == "username1"

    def test_wrong_password_returns_errors(self, client: TestClient) -> None:
        """Wrong credentials return the invalid-credentials body."""
        client.post("/users", json=VALID_USER)

        response = client.post(
            "/users/authenticate",
            json={"username": "username1", "password": "wrong"},
        )

        assert response.status_code == get_settings().invalid_credentials_status
        assert response.json() == {
            "message": "Invalid credentials",
            "errors": [{"message": "Username or password is incorrect."}],
        }


class TestHealth:
    """Integration tests for GET /health."""

    def test_health_returns_healthy(self, client: TestClient) -> None:
        """Health check pings the database."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
