"""
tests/test_config.py -- Unit tests for core/config.py.

Covers:
  - SECRET_KEY and DATABASE_URL are both required; missing either fails loudly
  - Short secrets are rejected
  - JWT_SECRET is accepted as an alternative env var name
  - Defaults: 1-hour tokens, bcrypt cost 10, no route prefix
  - API_PREFIX normalization
"""

from __future__ import annotations

import pydantic
import pytest

from core.config import Settings, get_settings

GOOD_SECRET = "config-test-secret-0123456789abcdef-0123"
DB_URL = "sqlite:///:memory:"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SECRET_KEY", "JWT_SECRET", "DATABASE_URL", "API_PREFIX", "TOKEN_EXPIRE_SECONDS"):
        monkeypatch.delenv(name, raising=False)


def test_missing_secret_key_fails() -> None:
    with pytest.raises(pydantic.ValidationError, match="SECRET_KEY is required"):
        Settings(_env_file=None, database_url=DB_URL)


def test_short_secret_key_fails() -> None:
    with pytest.raises(pydantic.ValidationError, match="at least 32 characters"):
        Settings(_env_file=None, secret_key="short", database_url=DB_URL)


def test_missing_database_url_fails() -> None:
    with pytest.raises(pydantic.ValidationError, match="DATABASE_URL is required"):
        Settings(_env_file=None, secret_key=GOOD_SECRET)


def test_defaults() -> None:
    settings = Settings(_env_file=None, secret_key=GOOD_SECRET, database_url=DB_URL)
    assert settings.token_expire_seconds == 3600
    assert settings.bcrypt_rounds == 10
    assert settings.api_prefix == ""


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SECRET_KEY", GOOD_SECRET)
    monkeypatch.setenv("DATABASE_URL", DB_URL)
    monkeypatch.setenv("TOKEN_EXPIRE_SECONDS", "600")
    settings = Settings(_env_file=None)
    assert settings.secret_key == GOOD_SECRET
    assert settings.database_url == DB_URL
    assert settings.token_expire_seconds == 600


def test_jwt_secret_alias(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", GOOD_SECRET)
    monkeypatch.setenv("DATABASE_URL", DB_URL)
    assert Settings(_env_file=None).secret_key == GOOD_SECRET


@pytest.mark.parametrize("raw,expected", [("api", "/api"), ("/api/", "/api"), ("/", ""), ("", "")])
def test_api_prefix_normalized(raw: str, expected: str) -> None:
    settings = Settings(_env_file=None, secret_key=GOOD_SECRET, database_url=DB_URL, api_prefix=raw)
    assert settings.api_prefix == expected


def test_non_positive_token_lifetime_rejected() -> None:
    with pytest.raises(pydantic.ValidationError):
        Settings(_env_file=None, secret_key=GOOD_SECRET, database_url=DB_URL, token_expire_seconds=0)


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SECRET_KEY", GOOD_SECRET)
    monkeypatch.setenv("DATABASE_URL", DB_URL)
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
