from datetime import timedelta

import pytest

from app.application.services.account_service import AccountService
from app.application.services.token_service import TokenService
from app.domain.errors import DuplicateEmailError
from app.domain.models import AccountRole


@pytest.fixture
def token_service():
    return TokenService("testing_secret")


@pytest.fixture
def account_service(repository, token_service):
    return AccountService(repository, token_service, client_url="http://client.test/")


def test_register_normalizes_email(account_service):
    account, active_url = account_service.register("  Reader@Example.COM ", AccountRole.GUEST)
    assert account.email == "reader@example.com"
    assert account.role == AccountRole.GUEST
    assert account.password_hash is None
    assert active_url == f"http://client.test/account/active/{account.activation_token}"

    with pytest.raises(DuplicateEmailError):
        account_service.register("reader@example.com")


def test_register_loses_race_on_unique_constraint(account_service, repository, monkeypatch):
    account_service.register("reader@example.com")
    monkeypatch.setattr(repository, "get_by_email", lambda email: None)

    with pytest.raises(DuplicateEmailError):
        account_service.register("reader@example.com")


def test_activate_hashes_password(account_service, repository):
    account, _ = account_service.register("reader@example.com")
    assert account_service.activate(account.activation_token, "reader-password")

    stored = repository.get_by_id(account.id)
    assert stored.password_hash != "reader-password"
    assert stored.password_hash.startswith("$2")
    assert stored.activation_token is None
    assert account_service.login("reader@example.com", "reader-password")


def test_expired_activation_token(repository, token_service):
    service = AccountService(
        repository,
        token_service,
        client_url="http://client.test",
        activation_expiration=timedelta(seconds=-1),
    )
    account, _ = service.register("reader@example.com")
    assert service.activate(account.activation_token, "reader-password") is None
    assert repository.get_by_id(account.id).password_hash is None


def test_expired_recovery_token(repository, token_service):
    service = AccountService(
        repository,
        token_service,
        client_url="http://client.test",
        recovery_expiration=timedelta(seconds=-1),
    )
    account, _ = service.register("reader@example.com")
    service.activate(account.activation_token, "reader-password")
    service.recover_password("reader@example.com")

    recovery_token = repository.get_by_id(account.id).recovery_token
    assert service.activate(recovery_token, "other-password") is None
    assert service.login("reader@example.com", "reader-password")


def test_recover_password_unknown_email(account_service):
    assert account_service.recover_password("nobody@example.com") is None


def test_long_passwords_are_accepted(account_service):
    account, _ = account_service.register("reader@example.com")
    password = "密" * 64
    assert account_service.activate(account.activation_token, password)
    assert account_service.login("reader@example.com", password)


def test_ensure_default_admin(account_service):
    assert account_service.ensure_default_admin(None, None) is None
    first = account_service.ensure_default_admin("Admin@example.com", "admin-password")
    second = account_service.ensure_default_admin("admin@example.com", "admin-password")
    assert first.id == second.id
    assert first.role == AccountRole.ADMIN
    assert first.is_active
