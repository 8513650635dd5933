"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT
- Opaque refresh token generation and SHA-256 hashing
"""
from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError

ph = PasswordHasher()

# 48 random bytes -> 96 hex characters
REFRESH_TOKEN_BYTES = 48


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_refresh_token() -> str:
    """Generate a random opaque refresh token.
    """
    return secrets.token_hex(REFRESH_TOKEN_BYTES)


def hash_token(token: str) -> str:
    """One-way SHA-256 hex digest; this is what gets stored.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(
    subject: int,
    email: str,
    role: str,
    secret: str,
    algorithm: str = "HS256",
    expires: timedelta = timedelta(seconds=300),
) -> str:
    """
    Sign a self-contained access token. `sub` is serialized as a string, as
    required by RFC 7519 (and enforced by PyJWT on decode).
    """
    issued = _now()
    payload = {
        "sub": str(subject),
        "email": email,
        "role": role,
        "iat": issued,
        "exp": issued + expires,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> Dict[str, Any]:
    """
    Decode and validate an access token. Raises jwt.InvalidTokenError (or a
    subclass such as ExpiredSignatureError) on any failure.
    """
    return jwt.decode(
        token,
        secret,
        algorithms=[algorithm],
        options={"require": ["sub", "exp"]},
    )
