from datetime import timedelta

import pytest
from jose import jwt

from app.application.services.token_service import (
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
    TokenService,
    strip_bearer_prefix,
)

SECRET = "l2k3j4lkjlkdsj"


@pytest.fixture
def token_service():
    return TokenService(SECRET)


def test_issue_pair_differs_only_in_type(token_service):
    pair = token_service.issue_pair("account-1")
    assert pair.token.startswith("Bearer ")
    assert pair.refresh_token.startswith("Bearer ")

    access = token_service.verify(strip_bearer_prefix(pair.token))
    refresh = token_service.verify(strip_bearer_prefix(pair.refresh_token))
    assert access.account_id == refresh.account_id == "account-1"
    assert access.is_refresh_token is False
    assert refresh.is_refresh_token is True


def test_lifetimes(token_service):
    pair = token_service.issue_pair("account-1")
    access = jwt.get_unverified_claims(strip_bearer_prefix(pair.token))
    refresh = jwt.get_unverified_claims(strip_bearer_prefix(pair.refresh_token))
    assert access["exp"] - access["iat"] == 60 * 60
    assert refresh["exp"] - refresh["iat"] == 30 * 24 * 60 * 60


def test_expired_token_is_rejected():
    expired = TokenService(SECRET, access_token_exp=timedelta(seconds=-10))
    pair = expired.issue_pair("account-1")
    with pytest.raises(ExpiredTokenError):
        expired.verify(strip_bearer_prefix(pair.token))
    # The refresh token keeps its own, still valid, lifetime.
    assert expired.verify(strip_bearer_prefix(pair.refresh_token)).is_refresh_token


def test_wrong_secret_is_rejected(token_service):
    other = TokenService("another-secret")
    pair = other.issue_pair("account-1")
    with pytest.raises(InvalidSignatureError):
        token_service.verify(strip_bearer_prefix(pair.token))


def test_garbage_is_malformed(token_service):
    with pytest.raises(MalformedTokenError):
        token_service.verify("not-a-token")


def test_missing_claims_are_malformed(token_service):
    token = jwt.encode({"sub": "account-1"}, SECRET, algorithm="HS256")
    with pytest.raises(MalformedTokenError):
        token_service.verify(token)


def test_secret_is_required():
    with pytest.raises(RuntimeError):
        TokenService("")
