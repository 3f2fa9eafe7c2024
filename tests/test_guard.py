import uuid
from datetime import timedelta

import pytest

from utils.decorators import (
    authenticate_access,
    authenticate_service_key,
    extract_bearer,
)
from utils.exceptions import (
    ExpiredToken,
    InvalidToken,
    MalformedSubject,
    MissingCredential,
    Unauthorized,
)
from utils.security import create_access_token

SECRET = "unit-test-secret-that-is-long-enough-for-hs256"


class TestExtractBearer:
    def test_strips_prefix(self):
        assert extract_bearer({"Authorization": "Bearer abc123"}) == "abc123"

    def test_prefix_is_optional(self):
        assert extract_bearer({"Authorization": "abc123"}) == "abc123"

    @pytest.mark.parametrize("headers", [{}, {"Authorization": ""}, {"Authorization": "Bearer "}])
    def test_missing(self, headers):
        with pytest.raises(MissingCredential):
            extract_bearer(headers)


class TestAuthenticateAccess:
    def test_valid(self):
        account_id = uuid.uuid4()
        token = create_access_token(account_id, SECRET, timedelta(hours=1))
        assert authenticate_access({"Authorization": f"Bearer {token}"}, SECRET) == account_id

    def test_missing_header(self):
        with pytest.raises(Unauthorized) as info:
            authenticate_access({}, SECRET)
        assert isinstance(info.value.cause, MissingCredential)

    def test_expired(self):
        token = create_access_token(uuid.uuid4(), SECRET, timedelta(0))
        with pytest.raises(Unauthorized) as info:
            authenticate_access({"Authorization": f"Bearer {token}"}, SECRET)
        assert isinstance(info.value.cause, ExpiredToken)

    def test_wrong_secret(self):
        token = create_access_token(uuid.uuid4(), "x" * 40, timedelta(hours=1))
        with pytest.raises(Unauthorized) as info:
            authenticate_access({"Authorization": f"Bearer {token}"}, SECRET)
        assert isinstance(info.value.cause, InvalidToken)

    def test_malformed_subject(self):
        token = create_access_token("user-42", SECRET, timedelta(hours=1))
        with pytest.raises(Unauthorized) as info:
            authenticate_access({"Authorization": f"Bearer {token}"}, SECRET)
        assert isinstance(info.value.cause, MalformedSubject)


class TestServiceKey:
    def test_match(self):
        authenticate_service_key({"Authorization": "ApiKey secret-key"}, "secret-key")

    def test_mismatch(self):
        with pytest.raises(Unauthorized):
            authenticate_service_key({"Authorization": "ApiKey nope"}, "secret-key")

    def test_missing(self):
        with pytest.raises(Unauthorized):
            authenticate_service_key({}, "secret-key")

    def test_unset_expected_key_rejects_everything(self):
        with pytest.raises(Unauthorized):
            authenticate_service_key({"Authorization": "ApiKey anything"}, "")
