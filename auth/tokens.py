"""
auth/tokens.py -- JWT issuance for access, refresh and one-time-password flows.

Security design decisions:
  JWT: python-jose with HS256. Every token is signed independently with
       AuthConfig.secret and carries id, email, iat and exp (integer UTC
       seconds). decode_token() returns None on any failure -- the caller
       turns that into a 401.

  Kinds: TokenKind.AUTH issues an access/refresh pair plus the auth cookie
       value; TokenKind.ONE_TIME_PASSWORD issues one short-lived token. Any
       other kind raises InvalidTokenKind. Returning an empty TokenSet
       instead would let a controller send a success response that carries
       no usable credential.

  Clock: "now" is read once per call so iat is identical across the tokens
       of one set and exp - iat is exactly the configured lifetime.
       AuthConfig has already proven at startup that now + lifetime cannot
       overflow.

Signing is cheap CPU work and runs inline; only the cookie derivation
(argon2) is offloaded.

Layer rule: no imports from HTTP frameworks. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from jose.exceptions import JOSEError

from auth.cookies import derive_auth_cookie
from auth.models import Claims, TokenKind, TokenSet, UserProjection
from core.config import AuthConfig
from core.errors import InvalidTokenKind, SigningError

logger = logging.getLogger("chatauth.auth")

_ALGORITHM = "HS256"


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def _build_claims(user: UserProjection, now: datetime, lifetime: timedelta) -> Claims:
    return Claims(
        id=user.id,
        email=user.email,
        iat=int(now.timestamp()),
        exp=int((now + lifetime).timestamp()),
    )


def _sign(claims: Claims, secret: str) -> str:
    try:
        return jwt.encode(claims.to_payload(), secret, algorithm=_ALGORITHM)
    except JOSEError as exc:
        logger.exception("JWT signing failed for user id=%s", claims.id)
        raise SigningError("JWT signing failed") from exc


def decode_token(token: str, config: AuthConfig) -> Claims | None:
    """Verify a token's signature and expiry. Returns its Claims or None.

    Returning None (rather than raising) keeps the caller simple: any invalid
    or expired token is treated as unauthenticated.
    """
    try:
        payload = jwt.decode(token, config.secret, algorithms=[_ALGORITHM])
    except JWTError:
        return None
    if not {"id", "email", "iat", "exp"} <= payload.keys():
        return None
    try:
        return Claims.from_payload(payload)
    except (TypeError, ValueError):
        return None


# ---------------------------------------------------------------------------
# Token issuance
# ---------------------------------------------------------------------------


async def generate_tokens(kind: TokenKind | str, user: UserProjection, config: AuthConfig) -> TokenSet:
    """Issue the token set for kind.

    Args:
        kind:   TokenKind.AUTH / "auth" for access + refresh + auth cookie,
                TokenKind.ONE_TIME_PASSWORD / "one_time_password" for an OTP
                token.
        user:   Identity to stamp into the claims.
        config: Process-wide AuthConfig (secret and lifetimes).

    Raises:
        InvalidTokenKind: kind is not a TokenKind value.
        SigningError:     python-jose failed to sign.
        HashingError:     argon2 failed while deriving the auth cookie.
    """
    try:
        kind = TokenKind(kind)
    except ValueError:
        logger.error("Refusing to issue tokens of unsupported kind %r", kind)
        raise InvalidTokenKind(kind) from None

    now = datetime.now(timezone.utc)

    if kind is TokenKind.AUTH:
        access = _build_claims(user, now, timedelta(hours=config.access_expiry_hours))
        refresh = _build_claims(user, now, timedelta(hours=config.refresh_expiry_hours))
        return TokenSet(
            access_token=_sign(access, config.secret),
            refresh_token=_sign(refresh, config.secret),
            auth_cookie=await derive_auth_cookie(user.email, config.secret),
        )

    otp = _build_claims(user, now, timedelta(minutes=config.otp_expiry_minutes))
    return TokenSet(otp_token=_sign(otp, config.secret))
