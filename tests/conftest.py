"""
tests/conftest.py -- Shared fixtures for the credential core tests.

This module provides:
  - auth_config:   the AuthConfig used by the token and cookie tests
                   (secret "test_secret", access 1h, refresh 24h, OTP 5m)
  - user:          UserProjection(id=1, email="test@example.com")
  - anyio_backend: pins the anyio pytest plugin to asyncio

The APP__* environment variables must be set before any core/auth import so
get_settings() can build Settings (the worker pool reads hash_workers from
it) instead of raising ConfigurationError for a missing auth section.
"""

from __future__ import annotations

import os

# CRITICAL: Set the auth section before any core/auth import.
os.environ.setdefault("APP__AUTH__JWT_SECRET", "test_secret")
os.environ.setdefault("APP__HASH_WORKERS", "2")

import pytest

from auth.models import UserProjection
from auth.offload import shutdown_pool
from core.config import AuthConfig


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(
        secret="test_secret",
        access_expiry_hours=1,
        refresh_expiry_hours=24,
        otp_expiry_minutes=5,
        environment="test",
    )


@pytest.fixture
def user() -> UserProjection:
    return UserProjection(id=1, email="test@example.com")


@pytest.fixture(scope="session", autouse=True)
def _stop_worker_pool():
    """Join the hash worker threads once the session is done."""
    yield
    shutdown_pool()
