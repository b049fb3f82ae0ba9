"""
core/config.py -- Centralized configuration via pydantic-settings.

All environment variable reads happen here. No module should call os.getenv()
or os.environ.get() directly -- import get_settings() / get_auth_config().

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.
      get_auth_config() does the same for the derived AuthConfig, so every
      request shares one immutable object by reference.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file. Sections are nested pydantic models; the
      variable name is APP__<SECTION>__<FIELD>, e.g.
          APP__AUTH__JWT_SECRET=...
          APP__AUTH__JWT_ACCESS_EXPIRATION_TIME_IN_HOURS=1
          APP__APP__ENVIRONMENT=development

  AuthConfig (frozen dataclass): the only configuration shape the auth layer
      sees. Validated on construction, never mutated afterwards, so it needs
      no locking.

Startup failures:
  A missing auth section, a blank secret, a negative expiry or an expiry so
  large that "now + expiry" comes within a year of the end of the calendar
  all raise ConfigurationError. Expiry arithmetic therefore cannot overflow
  per request.

Layer rule: core/ is the kernel. This module may not import from auth/.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigurationError

logger = logging.getLogger("chatauth.config")

# Environment value that turns off the Secure cookie attribute.
DEVELOPMENT_ENVIRONMENT = "development"

# Below this length HS256 still works, but the key is guessable offline
# from any captured token.
_MIN_RECOMMENDED_SECRET_LENGTH = 32

# Latest expiry accepted at startup. The headroom keeps "now + lifetime"
# representable for as long as the process can plausibly run.
_LATEST_EXPIRY = datetime.max.replace(tzinfo=timezone.utc) - timedelta(days=366)


# ---------------------------------------------------------------------------
# AuthConfig -- immutable, process-wide
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AuthConfig:
    """Signing secret, token lifetimes and deployment flag for the auth layer."""

    secret: str
    access_expiry_hours: int
    refresh_expiry_hours: int
    otp_expiry_minutes: int
    environment: str = "production"

    def __post_init__(self) -> None:
        if not isinstance(self.secret, str) or not self.secret.strip():
            raise ConfigurationError("auth.jwt_secret cannot be empty")

        lifetimes = {
            "access_expiry_hours": timedelta(hours=1),
            "refresh_expiry_hours": timedelta(hours=1),
            "otp_expiry_minutes": timedelta(minutes=1),
        }
        now = datetime.now(timezone.utc)
        for name, unit in lifetimes.items():
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(f"auth.{name} must be a non-negative integer, got {value!r}")
            try:
                overflows = now + unit * value > _LATEST_EXPIRY
            except OverflowError:
                overflows = True
            if overflows:
                raise ConfigurationError(f"auth.{name}={value} overflows the token expiry timestamp")

    @property
    def is_development(self) -> bool:
        return self.environment == DEVELOPMENT_ENVIRONMENT

    @property
    def refresh_expiry_seconds(self) -> int:
        return self.refresh_expiry_hours * 3600


# ---------------------------------------------------------------------------
# Settings sections
# ---------------------------------------------------------------------------


class AppSection(BaseModel):
    name: str = "chat_auth_server"
    environment: str = "production"


class AuthSection(BaseModel):
    # Empty string is the sentinel for "not configured"; AuthConfig rejects it.
    jwt_secret: str = ""
    jwt_access_expiration_time_in_hours: int = Field(default=1, ge=0)
    jwt_refresh_expiration_time_in_hours: int = Field(default=24, ge=0)
    jwt_one_time_password_lifetime_in_minutes: int = Field(default=5, ge=0)


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Every section has defaults except auth: the model_validator refuses to
    build Settings without one, because nothing in the auth layer can run
    without a signing secret.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP__",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app: AppSection = AppSection()
    auth: Optional[AuthSection] = None

    # Size of the worker pool that runs argon2 off the event loop.
    hash_workers: int = Field(default=4, ge=1)

    @model_validator(mode="after")
    def require_auth_section(self) -> "Settings":
        if self.auth is None:
            raise ValueError("auth section is missing")
        return self

    def auth_config(self) -> AuthConfig:
        """Build the immutable AuthConfig from the auth and app sections."""
        auth = self.auth
        if auth is None:
            raise ConfigurationError("auth section is missing")
        config = AuthConfig(
            secret=auth.jwt_secret,
            access_expiry_hours=auth.jwt_access_expiration_time_in_hours,
            refresh_expiry_hours=auth.jwt_refresh_expiration_time_in_hours,
            otp_expiry_minutes=auth.jwt_one_time_password_lifetime_in_minutes,
            environment=self.app.environment,
        )
        if len(config.secret) < _MIN_RECOMMENDED_SECRET_LENGTH:
            logger.warning(
                "auth.jwt_secret is shorter than %d characters; use a longer random secret in production",
                _MIN_RECOMMENDED_SECRET_LENGTH,
            )
        return config


@lru_cache
def get_settings() -> Settings:
    """Return the Settings singleton.

    pydantic's ValidationError is re-raised as ConfigurationError so startup
    code has a single exception type to treat as fatal.

    In tests: call get_settings.cache_clear() after changing the environment.
    """
    try:
        return Settings()
    except ValidationError as exc:
        logger.error("Failed to load configuration: %s", exc)
        raise ConfigurationError(f"Failed to load configuration: {exc}") from exc


@lru_cache
def get_auth_config() -> AuthConfig:
    """Return the process-wide AuthConfig, built once from get_settings()."""
    settings = get_settings()
    try:
        return settings.auth_config()
    except ConfigurationError as exc:
        logger.error("Invalid auth configuration: %s", exc.message)
        raise
