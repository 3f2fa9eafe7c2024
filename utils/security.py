"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT access token creation/verification via PyJWT
- opaque refresh token generation
"""
from __future__ import annotations

import math
import secrets
import time
import uuid
from datetime import timedelta

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError

from utils.exceptions import (
    EntropyFailure,
    ExpiredToken,
    HashingFailure,
    InvalidToken,
    MalformedSubject,
    SigningFailure,
)

ph = PasswordHasher()

DEFAULT_ISSUER = "chirpy"
ALGORITHM = "HS256"
# symmetric only: the same secret signs and verifies
ALLOWED_ALGORITHMS = ("HS256", "HS384", "HS512")
REFRESH_TOKEN_BYTES = 32


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    try:
        return ph.hash(password)
    except HashingError as exc:
        raise HashingFailure() from exc


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2.
    Any mismatch, including a malformed hash, is just False.
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def _ttl_seconds(ttl) -> int:
    """Whole seconds, rounded up so a positive ttl never gives exp == iat."""
    seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
    if seconds < 0:
        raise SigningFailure("Access token ttl cannot be negative")
    return math.ceil(seconds)


def create_access_token(
    account_id, secret: str, ttl, issuer: str = DEFAULT_ISSUER, algorithm: str = ALGORITHM
) -> str:
    """Sign a short-lived access token for ``account_id``.

    ``ttl`` is a timedelta or a number of seconds; exp = iat + ttl.
    A ttl of 0 yields a token that is already expired.
    """
    if not secret or not isinstance(secret, str):
        raise SigningFailure("JWT secret is not configured")
    if algorithm not in ALLOWED_ALGORITHMS:
        raise SigningFailure(f"Unsupported JWT algorithm: {algorithm}")
    ttl_seconds = _ttl_seconds(ttl)
    iat = int(time.time())
    payload = {
        "iss": issuer,
        "sub": str(account_id),
        "iat": iat,
        "exp": iat + ttl_seconds,
    }
    try:
        return jwt.encode(payload, secret, algorithm=algorithm)
    except (jwt.PyJWTError, TypeError, ValueError) as exc:
        raise SigningFailure() from exc


def decode_access_token(
    token: str, secret: str, issuer: str = DEFAULT_ISSUER, algorithm: str = ALGORITHM
) -> uuid.UUID:
    """
    Verify an access token and return its subject as a UUID.

    Signature/structure/issuer problems raise InvalidToken; the expiry is a
    single ``now >= exp`` comparison done here, not by the library.
    """
    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            issuer=issuer,
            options={"verify_exp": False, "require": ["exp", "iat", "sub", "iss"]},
        )
    except jwt.InvalidTokenError as exc:
        raise InvalidToken(f"Invalid token: {exc}") from exc

    exp = decoded["exp"]
    if not isinstance(exp, (int, float)):
        raise InvalidToken("Invalid token: exp is not a number")
    if time.time() >= exp:
        raise ExpiredToken()

    try:
        return uuid.UUID(str(decoded["sub"]))
    except ValueError as exc:
        raise MalformedSubject() from exc


def make_refresh_token() -> str:
    """64 hex chars from 32 bytes of the OS random source."""
    try:
        return secrets.token_hex(REFRESH_TOKEN_BYTES)
    except (OSError, NotImplementedError) as exc:
        raise EntropyFailure() from exc
