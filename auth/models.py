"""
auth/models.py -- Domain dataclasses for credential issuance.

Pattern: Data class (pure data container, near-zero logic). The persistence
layer hands in a UserRecord; everything downstream of a successful login
works with the smaller UserProjection.

Layer rule: stdlib only. No imports from core/ or other auth/ modules.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum


class TokenKind(str, Enum):
    """Which track generate_tokens() issues."""

    AUTH = "auth"
    ONE_TIME_PASSWORD = "one_time_password"


@dataclass(frozen=True)
class UserProjection:
    """Minimal identity needed to issue tokens -- not the persisted user row."""

    id: int
    email: str


@dataclass
class UserRecord:
    """Stored login credential as returned by the user lookup.

    password_hash is the argon2 PHC string written at registration.
    """

    id: int
    email: str
    password_hash: str
    is_active: bool = True

    def projection(self) -> UserProjection:
        return UserProjection(id=self.id, email=self.email)


@dataclass
class Claims:
    """JWT payload. iat/exp are whole UTC seconds since the epoch."""

    id: int
    email: str
    iat: int
    exp: int

    def to_payload(self) -> dict:
        return {"id": self.id, "email": self.email, "iat": self.iat, "exp": self.exp}

    @classmethod
    def from_payload(cls, payload: dict) -> Claims:
        return cls(
            id=int(payload["id"]),
            email=str(payload["email"]),
            iat=int(payload["iat"]),
            exp=int(payload["exp"]),
        )


@dataclass
class TokenSet:
    """Result of one generate_tokens() call.

    Exactly one track is populated: access_token + refresh_token + auth_cookie
    for TokenKind.AUTH, otp_token alone for TokenKind.ONE_TIME_PASSWORD.
    """

    access_token: str | None = None
    refresh_token: str | None = None
    otp_token: str | None = None
    auth_cookie: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)
