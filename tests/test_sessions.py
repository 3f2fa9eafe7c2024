import logging
import uuid
from datetime import timedelta

import pytest

from models import storage
from models.base_model import utcnow
from models.refresh_token import RefreshToken
from models.session_store import SessionStore
from models.user import User
from utils import sessions
from utils.exceptions import AccountNotFound, InvalidCredentials, SessionInvalid
from utils.security import decode_access_token, hash_password

SECRET = "unit-test-secret-that-is-long-enough-for-hs256"


@pytest.fixture
def user():
    u = User(email="saul@bettercall.com", hashed_password=hash_password("legal"))
    storage.new(u)
    storage.save()
    return u


class TestLogin:
    def test_returns_both_tokens(self, user):
        found, access, refresh = sessions.login("saul@bettercall.com", "legal", SECRET)
        assert found.id == user.id
        assert decode_access_token(access, SECRET) == uuid.UUID(user.id)
        assert len(refresh) == 64

        rt = SessionStore().find_refresh_token(refresh)
        assert rt.user_id == user.id
        assert rt.revoked_at is None
        assert rt.is_active()

    def test_refresh_token_lives_sixty_days(self, user):
        before = utcnow()
        _, _, refresh = sessions.login("saul@bettercall.com", "legal", SECRET)
        rt = SessionStore().find_refresh_token(refresh)
        lifetime = rt.expires_at - before
        assert timedelta(days=60) - timedelta(minutes=1) < lifetime <= timedelta(days=60, minutes=1)

    def test_expiry_reads_back_as_utc(self, user):
        _, _, refresh = sessions.login("saul@bettercall.com", "legal", SECRET)
        storage.close()
        rt = SessionStore().find_refresh_token(refresh)
        assert rt.expires_at.tzinfo is not None
        assert rt.expires_at.utcoffset() == timedelta(0)
        assert rt.is_active()
        assert not rt.is_active(rt.expires_at)

    def test_unknown_email(self, user):
        with pytest.raises(AccountNotFound):
            sessions.login("kim@wexler.com", "legal", SECRET)

    def test_email_is_case_sensitive(self, user):
        with pytest.raises(AccountNotFound):
            sessions.login("Saul@bettercall.com", "legal", SECRET)

    def test_wrong_password(self, user):
        with pytest.raises(InvalidCredentials):
            sessions.login("saul@bettercall.com", "illegal", SECRET)

    def test_each_login_opens_a_new_session(self, user):
        _, _, first = sessions.login("saul@bettercall.com", "legal", SECRET)
        _, _, second = sessions.login("saul@bettercall.com", "legal", SECRET)
        assert first != second
        assert sessions.refresh_access_token(first, SECRET)
        assert sessions.refresh_access_token(second, SECRET)


class TestRefresh:
    def test_mints_access_token_for_owner(self, user):
        _, _, refresh = sessions.login("saul@bettercall.com", "legal", SECRET)
        token = sessions.refresh_access_token(refresh, SECRET)
        assert decode_access_token(token, SECRET) == uuid.UUID(user.id)

    def test_logs_issued_token(self, user, caplog):
        _, _, refresh = sessions.login("saul@bettercall.com", "legal", SECRET)
        with caplog.at_level(logging.INFO, logger="utils.sessions"):
            sessions.refresh_access_token(refresh, SECRET)
        assert f"Issued access token from refresh token for user {user.id}" in caplog.text

    def test_does_not_rotate_or_extend(self, user):
        _, _, refresh = sessions.login("saul@bettercall.com", "legal", SECRET)
        expires_at = SessionStore().find_refresh_token(refresh).expires_at
        sessions.refresh_access_token(refresh, SECRET)
        sessions.refresh_access_token(refresh, SECRET)
        rt = SessionStore().find_refresh_token(refresh)
        assert rt.expires_at == expires_at
        assert storage.get_session().query(RefreshToken).count() == 1

    def test_unknown_token(self, user):
        with pytest.raises(SessionInvalid):
            sessions.refresh_access_token("0" * 64, SECRET)

    def test_expired_token(self, user):
        SessionStore().save_refresh_token("a" * 64, user.id, utcnow() - timedelta(seconds=1))
        with pytest.raises(SessionInvalid):
            sessions.refresh_access_token("a" * 64, SECRET)

    def test_revoked_token(self, user):
        _, _, refresh = sessions.login("saul@bettercall.com", "legal", SECRET)
        sessions.revoke_refresh_token(refresh)
        with pytest.raises(SessionInvalid):
            sessions.refresh_access_token(refresh, SECRET)


class TestRevoke:
    def test_revoke_twice_is_not_an_error(self, user):
        _, _, refresh = sessions.login("saul@bettercall.com", "legal", SECRET)
        sessions.revoke_refresh_token(refresh)
        revoked_at = SessionStore().find_refresh_token(refresh).revoked_at

        sessions.revoke_refresh_token(refresh)

        rt = SessionStore().find_refresh_token(refresh)
        assert rt.revoked_at == revoked_at
        assert not rt.is_active()
        with pytest.raises(SessionInvalid):
            sessions.refresh_access_token(refresh, SECRET)

    def test_revoking_one_session_keeps_the_other(self, user):
        _, _, first = sessions.login("saul@bettercall.com", "legal", SECRET)
        _, _, second = sessions.login("saul@bettercall.com", "legal", SECRET)
        sessions.revoke_refresh_token(first)
        with pytest.raises(SessionInvalid):
            sessions.refresh_access_token(first, SECRET)
        assert sessions.refresh_access_token(second, SECRET)

    def test_unknown_token(self):
        with pytest.raises(SessionInvalid):
            sessions.revoke_refresh_token("f" * 64)

    def test_store_reports_unknown_token(self):
        assert SessionStore().revoke_refresh_token("f" * 64) is False
