"""
auth/passwords.py -- argon2id password hashing, verification and login check.

Security design decisions:
  Algorithm: argon2id through argon2-cffi's PasswordHasher with its default
       (RFC 9106 low-memory) parameters. Output is a self-describing PHC
       string -- $argon2id$v=19$m=...,t=...,p=...$<salt>$<digest> -- so
       verification needs no separately stored parameters, and parameter
       upgrades do not break old hashes.

  Salt: a fresh 16-byte random salt per call. Hashing the same input twice
       gives two different strings; both verify.

  Offloading: every hash/verify call runs on the bounded worker pool in
       auth.offload, never on the event loop.

  Timing equalization: _DUMMY_HASH lets authenticate_user() run exactly one
       argon2 verification whether or not the account exists, so response
       time does not reveal which emails are registered.

Layer rule: no imports from HTTP frameworks. Import from core/ is allowed.
"""

from __future__ import annotations

import logging

from argon2 import PasswordHasher, extract_parameters
from argon2 import exceptions as argon2_exc

from auth.models import UserProjection, UserRecord
from auth.offload import run_blocking
from core.errors import HashingError, InvalidHashFormat

logger = logging.getLogger("chatauth.auth")

_hasher = PasswordHasher()


# ---------------------------------------------------------------------------
# Blocking primitives -- only ever called through run_blocking()
# ---------------------------------------------------------------------------


def _hash(plain: str) -> str:
    try:
        return _hasher.hash(plain)
    except (argon2_exc.HashingError, UnicodeEncodeError) as exc:
        # argon2-cffi encodes str as UTF-8; lone surrogates cannot be encoded.
        raise HashingError("Password hashing failed") from exc


def _verify(plain: str, stored_hash: str) -> bool:
    try:
        # Parse the embedded parameters first so a structurally broken string
        # is reported as such rather than as a mismatch.
        extract_parameters(stored_hash)
        return _hasher.verify(stored_hash, plain)
    except argon2_exc.VerifyMismatchError:
        return False
    except argon2_exc.InvalidHashError as exc:
        raise InvalidHashFormat("Stored password hash is malformed") from exc
    except argon2_exc.VerificationError:
        # Digest parsed but did not verify for a reason other than a plain
        # mismatch (e.g. an undecodable digest). Same outcome for the caller.
        return False
    except UnicodeEncodeError:
        # An input that cannot be UTF-8 encoded can never match a stored hash.
        return False


# Computed once at import so the first failed lookup is not measurably
# slower than later ones.
_DUMMY_HASH: str = _hash("chatauth_timing_dummy")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def hash_password(plain: str) -> str:
    """Return an argon2id PHC hash of plain, computed off the event loop.

    Raises HashingError if argon2 rejects the input.
    """
    return await run_blocking(_hash, plain)


async def verify_password(plain: str, stored_hash: str) -> bool:
    """Return True if plain matches stored_hash.

    A non-match is a normal False, not an error. Raises InvalidHashFormat
    when stored_hash is not a parseable argon2 PHC string.
    """
    return await run_blocking(_verify, plain, stored_hash)


async def authenticate_user(record: UserRecord | None, plain: str) -> UserProjection | None:
    """Check a login attempt against the record the user lookup returned.

    Always runs argon2 once, whether or not the account exists:
    - Unknown email: verify against _DUMMY_HASH (same cost as a real check)
    - Wrong password: verify against the real hash (same cost)

    A malformed stored hash fails the login and is logged at ERROR for
    operators. Returns the UserProjection on success, None on any failure.
    """
    if record is None:
        # Equalize timing -- do NOT return before running argon2.
        await verify_password(plain, _DUMMY_HASH)
        return None
    try:
        matched = await verify_password(plain, record.password_hash)
    except InvalidHashFormat:
        logger.error("Stored password hash for user id=%s is malformed", record.id)
        return None
    if not matched or not record.is_active:
        return None
    return record.projection()
