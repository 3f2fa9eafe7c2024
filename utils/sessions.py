"""
Session lifecycle: login, access token refresh and refresh token revocation.

A refresh token is Active until it expires or is revoked. Revocation is
terminal. Refreshing mints a new access token and never rotates or extends
the refresh token itself.
"""
from __future__ import annotations

import logging
from datetime import timedelta

from models.base_model import utcnow
from models.session_store import SessionStore
from models.user import User
from utils.exceptions import AccountNotFound, InvalidCredentials, SessionInvalid
from utils.security import (
    ALGORITHM,
    DEFAULT_ISSUER,
    create_access_token,
    make_refresh_token,
    verify_password,
)

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(hours=1)
REFRESH_TOKEN_TTL = timedelta(days=60)

session_store = SessionStore()


def login(
    email: str,
    password: str,
    secret: str,
    access_ttl: timedelta = ACCESS_TOKEN_TTL,
    refresh_ttl: timedelta = REFRESH_TOKEN_TTL,
    issuer: str = DEFAULT_ISSUER,
    algorithm: str = ALGORITHM,
    store: SessionStore | None = None,
):
    """Check credentials and open a new session.

    Returns ``(user, access_token, refresh_token)``. Earlier sessions of the
    same account stay valid.
    """
    store = store or session_store
    session = store.storage.get_session()
    user = session.query(User).filter(User.email == email).first()
    if user is None:
        raise AccountNotFound()
    if not verify_password(password, user.hashed_password):
        logger.info("Failed login for user %s", user.id)
        raise InvalidCredentials()

    access_token = create_access_token(user.id, secret, access_ttl, issuer=issuer, algorithm=algorithm)
    refresh_token = make_refresh_token()
    store.save_refresh_token(refresh_token, user.id, utcnow() + refresh_ttl)
    logger.info("User %s logged in", user.id)
    return user, access_token, refresh_token


def refresh_access_token(
    raw_refresh_token: str,
    secret: str,
    access_ttl: timedelta = ACCESS_TOKEN_TTL,
    issuer: str = DEFAULT_ISSUER,
    algorithm: str = ALGORITHM,
    store: SessionStore | None = None,
) -> str:
    store = store or session_store
    rt = store.find_refresh_token(raw_refresh_token)
    if rt is None or not rt.is_active():
        raise SessionInvalid()

    user = store.find_account_by_refresh_owner(rt.user_id)
    if user is None:
        raise SessionInvalid()
    token = create_access_token(user.id, secret, access_ttl, issuer=issuer, algorithm=algorithm)
    logger.info("Issued access token from refresh token for user %s", user.id)
    return token


def revoke_refresh_token(raw_refresh_token: str, store: SessionStore | None = None) -> None:
    store = store or session_store
    if not store.revoke_refresh_token(raw_refresh_token):
        raise SessionInvalid("Refresh token not found")
    logger.info("Refresh token revoked")
