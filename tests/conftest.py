from __future__ import annotations

from typing import Any, Callable

import pytest
from flask import Flask
from flask.testing import FlaskClient

from taskvault.app import create_app

TEST_CONFIG = {
    "TESTING": True,
    "STORAGE_BACKEND": "memory",
    "JWT_SECRET_KEY": "test-jwt-secret-that-is-long-enough-for-hs256",
    "PASSWORD_HASH_METHOD": "pbkdf2:sha256:1000",
}


@pytest.fixture
def make_app() -> Callable[..., Flask]:
    def _make(**overrides: Any) -> Flask:
        return create_app({**TEST_CONFIG, **overrides})

    return _make


@pytest.fixture
def app(make_app: Callable[..., Flask]) -> Flask:
    return make_app()


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def login(client: FlaskClient) -> Callable[[str, str], str]:
    """Register (if needed) and log in, returning the bearer token."""

    def _login(email: str, password: str = "p1") -> str:
        client.post("/api/register", json={"email": email, "password": password})
        response = client.post("/api/login", json={"email": email, "password": password})
        assert response.status_code == 200
        return response.get_json()["token"]

    return _login
