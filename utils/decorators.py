from __future__ import annotations

import hmac
import logging
from functools import wraps

from flask import current_app, g, request

from utils.exceptions import MissingCredential, Unauthorized, ChirpyError
from utils.security import ALGORITHM, DEFAULT_ISSUER, decode_access_token

logger = logging.getLogger(__name__)

AUTH_HEADER = "Authorization"
BEARER_PREFIX = "Bearer "
API_KEY_PREFIX = "ApiKey "


def _read_header(headers, prefix: str) -> str:
    raw = headers.get(AUTH_HEADER) or ""
    if raw.startswith(prefix):
        raw = raw[len(prefix):]
    value = raw.strip()
    if not value:
        raise MissingCredential()
    return value


def extract_bearer(headers) -> str:
    """Return the credential from ``Authorization: Bearer <token>``.

    The prefix is optional; an absent or empty header raises MissingCredential.
    """
    return _read_header(headers, BEARER_PREFIX)


def authenticate_access(headers, secret: str, issuer: str = DEFAULT_ISSUER, algorithm: str = ALGORITHM):
    """Resolve the caller's account id from a bearer access token.

    Every failure is reported as Unauthorized; the root cause is chained.
    """
    try:
        token = extract_bearer(headers)
        return decode_access_token(token, secret, issuer=issuer, algorithm=algorithm)
    except ChirpyError as exc:
        if exc.status_code != 401:
            raise
        raise Unauthorized(cause=exc) from exc


def authenticate_service_key(headers, expected_key: str) -> None:
    try:
        key = _read_header(headers, API_KEY_PREFIX)
    except MissingCredential as exc:
        raise Unauthorized("Missing API key", cause=exc) from exc
    if not expected_key or not hmac.compare_digest(key.encode(), expected_key.encode()):
        raise Unauthorized("Invalid API key")


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                user_id = authenticate_access(
                    request.headers,
                    current_app.config["JWT_SECRET"],
                    issuer=current_app.config.get("JWT_ISSUER", DEFAULT_ISSUER),
                    algorithm=current_app.config.get("JWT_ALGORITHM", ALGORITHM),
                )
            except Unauthorized as exc:
                logger.info("Rejected access token on %s: %s", request.path, exc.cause or exc)
                raise
            g.current_user_id = str(user_id)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def api_key_required():
    """Guard for callers holding the static service key (payment webhooks)."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                authenticate_service_key(request.headers, current_app.config.get("POLKA_KEY", ""))
            except Unauthorized:
                logger.warning("Rejected service key on %s", request.path)
                raise
            return fn(*args, **kwargs)

        return wrapper

    return decorator
