"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for TaskList happen here. No module should
call os.getenv() or os.environ.get() directly -- build a Settings instance (or
call get_settings()) and pass it down explicitly.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. Only the
      process entry points (asgi.py, main.py) call it; everything below them
      receives Settings or individual values as constructor arguments.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. secret_key -> SECRET_KEY). Type coercion and validation are built in.

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment.

Security notes:
  SECRET_KEY and DATABASE_URL are both required. A missing value is a hard
  startup failure -- there is no fallback key and no default database. A
  service that silently generated a signing key would invalidate every token
  on restart; one that silently picked a database would scatter user data.

  SECRET_KEY shorter than 32 chars is rejected outright. HS256 signing relies
  on key entropy -- a short key makes offline brute-force of tokens feasible.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or tasks/.
"""

import logging
from functools import lru_cache

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("tasklist.config")

_MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Environment variable name mapping: field names are uppercased automatically.
    E.g. `database_url` reads from DATABASE_URL. The signing secret is also
    accepted as JWT_SECRET for deployments that already export that name.

    In tests, construct Settings directly with keyword arguments and
    _env_file=None so a developer's .env cannot leak into the run.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ------------------------------------------------------------------
    # Required
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured". The model_validator
    # below raises, so callers never see "".
    secret_key: str = Field(default="", validation_alias=AliasChoices("secret_key", "SECRET_KEY", "JWT_SECRET"))
    database_url: str = ""

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    token_expire_seconds: int = Field(default=3600, gt=0)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    api_prefix: str = ""
    cors_origins: list[str] = ["http://localhost:3000"]
    host: str = "127.0.0.1"
    port: int = 5000

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Refuse to start without a signing secret and a store address."""
        if not self.secret_key:
            raise ValueError("SECRET_KEY is required. Set SECRET_KEY in your environment or .env file.")
        if len(self.secret_key) < _MIN_SECRET_LENGTH:
            raise ValueError(f"SECRET_KEY must be at least {_MIN_SECRET_LENGTH} characters.")
        if not self.database_url:
            raise ValueError("DATABASE_URL is required. Set DATABASE_URL in your environment or .env file.")
        if self.api_prefix and not self.api_prefix.startswith("/"):
            self.api_prefix = "/" + self.api_prefix
        self.api_prefix = self.api_prefix.rstrip("/")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    Uses lru_cache so Settings() is instantiated exactly once -- at first call.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    settings = Settings()
    logger.info("Settings loaded (token_expire_seconds=%d)", settings.token_expire_seconds)
    return settings
