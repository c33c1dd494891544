"""Service for account provisioning, authentication and recovery."""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

import bcrypt

from app.application.services.token_service import TokenPair, TokenService
from app.domain.errors import DuplicateEmailError
from app.domain.models import Account, AccountRole, utcnow
from app.domain.ports.persistence import AccountStore

logger = logging.getLogger(__name__)

# bcrypt only considers the first 72 bytes and rejects longer input.
_BCRYPT_MAX_BYTES = 72


class AccountService:
    """Coordinates the account store and the token codec."""

    def __init__(
        self,
        account_repository: AccountStore,
        token_service: TokenService,
        client_url: str,
        activation_expiration: timedelta = timedelta(hours=72),
        recovery_expiration: timedelta = timedelta(minutes=60),
    ):
        self.account_repository = account_repository
        self.token_service = token_service
        self.client_url = client_url.rstrip("/")
        self.activation_expiration = activation_expiration
        self.recovery_expiration = recovery_expiration

    def ensure_default_admin(self, email: Optional[str], password: Optional[str]) -> Optional[Account]:
        """Create an active administrator from configuration when none exists yet."""
        if not email or not password:
            return None
        email_clean = _normalize_email(email)
        existing = self.account_repository.get_by_email(email_clean)
        if existing:
            return existing
        logger.info("Creating default administrator account for %s", email_clean)
        return self.account_repository.create(
            email=email_clean,
            role=AccountRole.ADMIN,
            password_hash=_hash_password(password),
        )

    def register(self, email: str, role: AccountRole = AccountRole.CUSTOMER) -> tuple[Account, str]:
        """
        Provision a pending account.

        Args:
            email: Account email
            role: Role granted once the account is activated

        Returns:
            Tuple of (Account, activation URL)

        Raises:
            DuplicateEmailError: If email already exists
        """
        email_clean = _normalize_email(email)
        if self.account_repository.get_by_email(email_clean):
            raise DuplicateEmailError(email_clean)

        activation_token = str(uuid.uuid4())
        account = self.account_repository.create(
            email=email_clean,
            role=role,
            activation_token=activation_token,
            activation_expires_at=utcnow() + self.activation_expiration,
        )

        active_url = self.build_active_url(activation_token)
        # TODO: deliver the activation link by email once a mail transport is configured.
        logger.info("Activation link for %s: %s", account.email, active_url)
        return account, active_url

    def login(self, email: str, password: str) -> Optional[TokenPair]:
        """
        Authenticate with email and password.

        Returns:
            A fresh token pair, or None when the credentials do not match
        """
        account = self.account_repository.get_by_email(_normalize_email(email))
        if not account or not account.password_hash:
            return None
        if not _verify_password(password, account.password_hash):
            return None
        return self.token_service.issue_pair(account.id)

    def recover_password(self, email: str) -> None:
        """Rotate the recovery token. Unknown emails are ignored silently."""
        account = self.account_repository.get_by_email(_normalize_email(email))
        if not account:
            logger.debug("Password recovery requested for unknown email")
            return

        account.recovery_token = str(uuid.uuid4())
        account.recovery_expires_at = utcnow() + self.recovery_expiration
        self.account_repository.save(account)

        # TODO: deliver the recovery link by email once a mail transport is configured.
        logger.info(
            "Password recovery link for %s: %s",
            account.email,
            self.build_active_url(account.recovery_token),
        )

    def activate(self, token: str, password: str) -> Optional[TokenPair]:
        """
        Set a password through an activation or recovery link.

        Returns:
            A fresh token pair, or None when no account holds a live token
        """
        now = utcnow()
        account = self.account_repository.get_by_activation_token(token)
        if account and _is_expired(account.activation_expires_at, now):
            account = None
        if account is None:
            account = self.account_repository.get_by_recovery_token(token)
            if account and _is_expired(account.recovery_expires_at, now):
                account = None
        if account is None:
            return None

        account.password_hash = _hash_password(password)
        account.activation_token = None
        account.activation_expires_at = None
        account.recovery_token = None
        account.recovery_expires_at = None
        self.account_repository.save(account)
        logger.info("Password set for account %s", account.id)
        return self.token_service.issue_pair(account.id)

    def deactivate_recovery_link(self, account: Account) -> Account:
        account.recovery_token = None
        account.recovery_expires_at = None
        return self.account_repository.save(account)

    def refresh(self, account: Account) -> TokenPair:
        return self.token_service.issue_pair(account.id)

    def remove(self, account: Account) -> None:
        self.account_repository.delete(account.id)
        logger.info("Account %s has been destroyed", account.id)

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Get account by ID."""
        return self.account_repository.get_by_id(account_id)

    def build_active_url(self, token: str) -> str:
        return f"{self.client_url}/account/active/{token}"


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _is_expired(expires_at: Optional[datetime], now: datetime) -> bool:
    return expires_at is not None and expires_at < now


def _hash_password(password: str) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8")[:_BCRYPT_MAX_BYTES], bcrypt.gensalt()
    ).decode("utf-8")


def _verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(
        password.encode("utf-8")[:_BCRYPT_MAX_BYTES], password_hash.encode("utf-8")
    )
