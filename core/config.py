"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for FormBot happen here. No module should call
os.getenv() or os.environ.get() directly -- import get_settings() instead.
Only the application lifespan (api/main.py) calls get_settings(); every other
component receives the values it needs as constructor arguments.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file. Field names map to env var names
      (e.g. jwt_secret -> JWT_SECRET).

  @model_validator(mode="after"): DEBUG-conditional defaults. Dev mode
      generates a signing secret and falls back to a local SQLite file; any
      other mode refuses to start without JWT_SECRET and DATABASE_URL.

Security notes:
  JWT_SECRET is a SecretStr so it never shows up in reprs, logs or tracebacks.
  Call .get_secret_value() only where the key is handed to TokenService.
  Secrets shorter than 32 chars are rejected -- HS256 relies on key entropy.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, or forms/.
"""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("formbot.config")

_DEV_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'formbot_dev.db'}"
_MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments (with DEBUG=true) without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    # Empty values are the "not configured" sentinel. The validator below
    # either fills them in (dev mode) or raises, so callers never see "".
    jwt_secret: SecretStr = SecretStr("")
    database_url: str = ""

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    token_expire_seconds: int = Field(default=3600, gt=0)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    # Upper bound on lock waits and pool checkouts. Exceeding it is a 503.
    store_timeout_seconds: float = Field(default=5.0, gt=0)

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def apply_startup_policy(self) -> "Settings":
        """Resolve JWT_SECRET and DATABASE_URL or refuse to start.

        Dev mode (DEBUG=true): a missing secret is generated with a warning
            (tokens will not survive a restart) and a missing DATABASE_URL
            falls back to a SQLite file next to the package.

        Any other mode: both values are required. Running without them would
            either invalidate every token on restart or write user data to an
            unexpected place.

        Both modes: reject secrets shorter than 32 characters.
        """
        if not self.jwt_secret.get_secret_value():
            if not self.debug:
                raise ValueError(
                    "JWT_SECRET is required in production mode. "
                    "Set JWT_SECRET in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
            self.jwt_secret = SecretStr(secrets.token_hex(32))
            logger.warning("Using auto-generated JWT_SECRET. Tokens will not persist across restarts.")
        if len(self.jwt_secret.get_secret_value()) < _MIN_SECRET_LENGTH:
            raise ValueError(f"JWT_SECRET must be at least {_MIN_SECRET_LENGTH} characters.")

        if not self.database_url:
            if not self.debug:
                raise ValueError(
                    "DATABASE_URL is required in production mode. "
                    "Set DATABASE_URL to a SQLAlchemy connection string."
                )
            self.database_url = _DEV_DB_URL
            logger.warning("DATABASE_URL not set -- using local SQLite file %s", _DEV_DB_URL)
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
