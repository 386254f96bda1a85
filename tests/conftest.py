"""
tests/conftest.py -- Shared test fixtures for TaskList tests.

This module provides:
  - make_settings(): explicit Settings for an isolated in-memory database
  - api_client: TestClient over a freshly built app, one per test module
  - make_user: registers a new user through the API and returns its token

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process,
which also lets UserStore and TaskStore see the same database.

Settings are built directly (with _env_file=None) and passed to create_app(),
so no environment variables are needed and a developer's .env is never read.
bcrypt runs at 4 rounds here to keep the suite fast; the production default
of 10 is asserted separately in test_credential_service.py.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Generator
from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from auth.tokens import verify_token
from core.config import Settings

TEST_SECRET = "test-secret-key-0123456789abcdef-0123456789"


def make_settings(db_name: str | None = None, **overrides) -> Settings:
    """Build Settings pointing at a named shared-memory SQLite database."""
    db_name = db_name or f"tasklist_{uuid.uuid4().hex}"
    values = {
        "secret_key": TEST_SECRET,
        "database_url": f"sqlite:///file:{db_name}?mode=memory&cache=shared&uri=true",
        "bcrypt_rounds": 4,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@dataclass
class RegisteredUser:
    identifier: str
    password: str
    token: str
    user_id: int

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def secret_key() -> str:
    return TEST_SECRET


@pytest.fixture(scope="module")
def api_client() -> Generator[TestClient, None, None]:
    """Yield a TestClient for a fresh app with its own in-memory database.

    Module-scoped for speed: tests inside a module share the database, so
    every test registers its own users via make_user rather than relying on
    fixed identifiers.
    """
    app = create_app(make_settings())
    with TestClient(app, raise_server_exceptions=True) as client:
        yield client


@pytest.fixture
def make_user(api_client: TestClient) -> Callable[..., RegisteredUser]:
    """Return a factory that registers a unique user and returns its credentials."""

    def _make(password: str = "correct horse battery staple") -> RegisteredUser:
        identifier = f"user-{uuid.uuid4().hex[:12]}@example.com"
        resp = api_client.post("/auth/register", json={"identifier": identifier, "password": password})
        assert resp.status_code == 201, resp.text
        token = resp.json()["token"]
        return RegisteredUser(
            identifier=identifier,
            password=password,
            token=token,
            user_id=verify_token(token, TEST_SECRET).user_id,
        )

    return _make
