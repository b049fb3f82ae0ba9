"""
tests/test_cookies.py -- Auth cookie derivation and Set-Cookie attributes.

These tests use real FastAPI Response objects and assert on the emitted
Set-Cookie header, the same string a browser would receive.

Coverage:
  - derive_auth_cookie(): prefix, delimiter, two argon2id halves that verify
    against email and secret
  - derive_auth_cookie() is not stable across calls (fresh salts)
  - development -> no Secure; production -> Secure; HttpOnly,
    SameSite=lax, Max-Age = refresh lifetime, Path=/ in both
  - clear_auth_cookie() expires the cookie
  - A response without cookie support is rejected loudly
"""

from __future__ import annotations

import pytest
from fastapi import Response

from auth.cookies import AUTH_COOKIE_NAME, clear_auth_cookie, deploy_auth_cookie, derive_auth_cookie
from auth.passwords import verify_password
from core.config import AuthConfig


def _config(environment: str, refresh_hours: int = 24) -> AuthConfig:
    return AuthConfig(
        secret="test_secret",
        access_expiry_hours=1,
        refresh_expiry_hours=refresh_hours,
        otp_expiry_minutes=5,
        environment=environment,
    )


def _set_cookie_header(response: Response) -> str:
    headers = response.headers.getlist("set-cookie")
    assert len(headers) == 1, f"Expected one Set-Cookie header, got: {headers}"
    return headers[0]


def _attributes(header: str) -> dict[str, str]:
    """Split 'name=value; Attr; Attr=x' into a lowercase attribute dict (cookie pair excluded)."""
    attrs: dict[str, str] = {}
    for part in header.split(";")[1:]:
        key, _, value = part.strip().partition("=")
        attrs[key.lower()] = value
    return attrs


@pytest.mark.anyio
class TestDeriveAuthCookie:
    async def test_format(self) -> None:
        value = await derive_auth_cookie("test@example.com", "test_secret")
        prefix, email_hash, secret_hash = value.split("____")
        assert prefix == "chat_auth"
        assert email_hash.startswith("$argon2id$")
        assert secret_hash.startswith("$argon2id$")

    async def test_halves_verify_against_inputs(self) -> None:
        value = await derive_auth_cookie("test@example.com", "test_secret")
        _prefix, email_hash, secret_hash = value.split("____")
        assert await verify_password("test@example.com", email_hash)
        assert await verify_password("test_secret", secret_hash)

    async def test_not_stable_across_calls(self) -> None:
        """Each half is freshly salted, so two derivations never match."""
        first = await derive_auth_cookie("test@example.com", "test_secret")
        second = await derive_auth_cookie("test@example.com", "test_secret")
        assert first != second


class TestDeployAuthCookie:
    """Set-Cookie attributes per environment."""

    def test_development_attributes(self) -> None:
        response = Response()
        deploy_auth_cookie(response, "abc", _config("development"))
        header = _set_cookie_header(response)
        assert header.startswith(f"{AUTH_COOKIE_NAME}=abc;")
        attrs = _attributes(header)
        assert "httponly" in attrs
        assert "secure" not in attrs
        assert attrs["samesite"].lower() == "lax"
        assert attrs["max-age"] == "86400"
        assert attrs["path"] == "/"

    def test_production_sets_secure(self) -> None:
        response = Response()
        deploy_auth_cookie(response, "abc", _config("production"))
        attrs = _attributes(_set_cookie_header(response))
        assert "secure" in attrs
        assert "httponly" in attrs
        assert attrs["samesite"].lower() == "lax"
        assert attrs["max-age"] == "86400"
        assert attrs["path"] == "/"

    @pytest.mark.parametrize("environment", ["test", "staging", "Development", ""])
    def test_only_exact_development_marker_drops_secure(self, environment: str) -> None:
        response = Response()
        deploy_auth_cookie(response, "abc", _config(environment))
        assert "secure" in _attributes(_set_cookie_header(response))

    def test_max_age_follows_refresh_lifetime(self) -> None:
        response = Response()
        deploy_auth_cookie(response, "abc", _config("production", refresh_hours=72))
        assert _attributes(_set_cookie_header(response))["max-age"] == str(72 * 3600)

    def test_response_without_cookie_support_rejected(self) -> None:
        with pytest.raises(TypeError):
            deploy_auth_cookie(object(), "abc", _config("production"))


class TestClearAuthCookie:
    def test_clear_expires_cookie(self) -> None:
        response = Response()
        clear_auth_cookie(response, _config("production"))
        header = _set_cookie_header(response)
        assert header.startswith(f"{AUTH_COOKIE_NAME}=")
        attrs = _attributes(header)
        assert attrs["max-age"] == "0"
        assert attrs["path"] == "/"
        assert "httponly" in attrs
