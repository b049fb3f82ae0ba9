"""
auth/cookies.py -- Auth cookie value derivation and Set-Cookie deployment.

The auth cookie rides alongside the JWTs. Its value is opaque: the email and
the signing secret are each argon2-hashed with their own fresh salt and
joined under a fixed prefix. Nothing in this service ever verifies it --
session validity is enforced by the signed tokens. Because both halves are
freshly salted, two derivations for the same user never match.

Cookie attributes:
  HttpOnly: always -- JS cannot read the cookie (XSS mitigation).
  Secure:   on, except when the environment is "development" (plain-HTTP
            localhost).
  SameSite: lax -- sent on same-site requests and top-level GET navigations,
            not on cross-site POST.
  Max-Age:  the refresh token lifetime, so cookie and session end together.

Layer rule: fastapi is imported for the Response type only. No routing code.
Import from core/ is allowed.
"""

from __future__ import annotations

import asyncio

from fastapi import Response

from auth.passwords import hash_password
from core.config import AuthConfig

AUTH_COOKIE_NAME = "chat_auth_cookie"

_COOKIE_PREFIX = "chat_auth"
_COOKIE_DELIMITER = "____"


async def derive_auth_cookie(email: str, secret: str) -> str:
    """Return "chat_auth____<hash(email)>____<hash(secret)>".

    The two hashes run concurrently on the worker pool.
    """
    email_hash, secret_hash = await asyncio.gather(hash_password(email), hash_password(secret))
    return _COOKIE_DELIMITER.join((_COOKIE_PREFIX, email_hash, secret_hash))


def _require_cookie_support(response: Response, method: str) -> None:
    if not callable(getattr(response, method, None)):
        raise TypeError(f"{type(response).__name__} has no {method}(); pass a Starlette/FastAPI Response")


def deploy_auth_cookie(response: Response, cookie_value: str, config: AuthConfig) -> None:
    """Write the auth cookie onto the outgoing response.

    Args:
        response:     FastAPI/Starlette response object.
        cookie_value: Value from TokenSet.auth_cookie.
        config:       AuthConfig -- environment decides Secure, the refresh
                      lifetime decides Max-Age.
    """
    _require_cookie_support(response, "set_cookie")
    response.set_cookie(
        AUTH_COOKIE_NAME,
        value=cookie_value,
        max_age=config.refresh_expiry_seconds,
        path="/",
        secure=not config.is_development,
        httponly=True,
        samesite="lax",
    )


def clear_auth_cookie(response: Response, config: AuthConfig) -> None:
    """Expire the auth cookie (logout). Attributes must match deploy_auth_cookie()."""
    _require_cookie_support(response, "delete_cookie")
    response.delete_cookie(
        AUTH_COOKIE_NAME,
        path="/",
        secure=not config.is_development,
        httponly=True,
        samesite="lax",
    )
