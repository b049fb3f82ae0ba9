"""auth/ -- Credential issuance and verification for the chat auth server.

Modules:
  passwords -- argon2id hash / verify, timing-equalized login check
  tokens    -- JWT access / refresh / one-time-password issuance and decoding
  cookies   -- auth cookie value derivation and Set-Cookie deployment
  offload   -- bounded worker pool that keeps argon2 off the event loop
  models    -- UserProjection, UserRecord, Claims, TokenSet, TokenKind

Layer rule: auth/ imports core/ (config, errors) and third-party libraries.
It does NOT import any HTTP routing code; controllers import from auth/,
not the other way around.
"""
