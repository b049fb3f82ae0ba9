"""
core/errors.py -- Typed failures raised by the credential core.

Every failure the auth layer can produce is one of these classes. Callers map
them to HTTP statuses; this module knows nothing about HTTP. Each error
carries a short machine-readable `code` so a controller can build a
structured error envelope without string-matching messages.

None of these are retried: hashing, verification and signing are
deterministic given their inputs, so a failure is not transient.

Layer rule: core/ is the kernel. No imports from auth/.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for all credential-core failures."""

    code: str = "auth_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(AuthError):
    """Auth configuration missing or invalid. Fatal at process startup."""

    code = "configuration_error"


class HashingError(AuthError):
    """The argon2 primitive rejected the input.

    The message is generic on purpose -- the caller maps this to a plain
    server fault and must not leak internals to the client.
    """

    code = "hashing_error"


class InvalidHashFormat(AuthError):
    """A stored password hash could not be parsed.

    Treated as a failed login for the user; operators should see it as a
    data-integrity signal.
    """

    code = "invalid_hash_format"


class InvalidTokenKind(AuthError):
    """generate_tokens() was called with a kind it does not issue."""

    code = "invalid_token_kind"

    def __init__(self, kind: object) -> None:
        super().__init__(f"Invalid token type: {kind}")
        self.kind = kind


class SigningError(AuthError):
    """JWT signing failed. Should not happen with a valid secret and claims."""

    code = "signing_error"
