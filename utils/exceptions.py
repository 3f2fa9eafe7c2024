"""
Application error taxonomy.

Every error carries the HTTP status it maps to; api/errors.py turns any of
them into a single-message JSON response.
"""
from __future__ import annotations


class ChirpyError(Exception):
    status_code = 500
    message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# credentials / tokens
class MissingCredential(ChirpyError):
    status_code = 401
    message = "Missing or invalid Authorization header"


class InvalidToken(ChirpyError):
    status_code = 401
    message = "Invalid token"


class ExpiredToken(ChirpyError):
    status_code = 401
    message = "Token expired"


class MalformedSubject(ChirpyError):
    status_code = 401
    message = "Token subject is not a valid id"


class Unauthorized(ChirpyError):
    """Uniform 401. The root cause is kept on ``cause`` for logging only."""
    status_code = 401
    message = "Unauthorized"

    def __init__(self, message: str | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


# sessions
class SessionInvalid(ChirpyError):
    status_code = 401
    message = "Refresh token is invalid, expired or revoked"


class AccountNotFound(ChirpyError):
    status_code = 401
    message = "Incorrect email or password"


class InvalidCredentials(ChirpyError):
    status_code = 401
    message = "Incorrect email or password"


# upstream
class UpstreamFailure(ChirpyError):
    status_code = 500


class HashingFailure(UpstreamFailure):
    message = "Could not hash password"


class SigningFailure(UpstreamFailure):
    message = "Could not sign access token"


class EntropyFailure(UpstreamFailure):
    message = "Could not generate refresh token"
