"""Repository for Account persistence."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from app.domain.errors import AccountNotFoundError, DuplicateEmailError
from app.domain.models import Account, AccountRole, utcnow
from app.domain.ports.persistence import AccountStore
from app.infrastructure.persistence.database import Database
from app.infrastructure.persistence.tables import AccountRecord


class AccountRepository(AccountStore):
    """Repository for managing Account entities through the ORM."""

    def __init__(self, database: Database):
        self._database = database

    def create(
        self,
        email: str,
        role: AccountRole = AccountRole.CUSTOMER,
        password_hash: Optional[str] = None,
        activation_token: Optional[str] = None,
        activation_expires_at: Optional[datetime] = None,
    ) -> Account:
        """
        Create a new account.

        Raises:
            DuplicateEmailError: If the email is already taken
        """
        now = utcnow()
        record = AccountRecord(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=password_hash,
            role=role,
            activation_token=activation_token,
            activation_expires_at=activation_expires_at,
            created_at=now,
            updated_at=now,
        )
        try:
            with self._database.session() as session:
                session.add(record)
        except IntegrityError as exc:
            raise DuplicateEmailError(email) from exc

        return self._record_to_account(record)

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Get account by ID."""
        with self._database.session() as session:
            record = session.get(AccountRecord, account_id)
            return self._record_to_account(record) if record else None

    def get_by_email(self, email: str) -> Optional[Account]:
        """Get account by email."""
        return self._get_one(AccountRecord.email == email)

    def get_by_activation_token(self, token: str) -> Optional[Account]:
        """Get account by activation token."""
        return self._get_one(AccountRecord.activation_token == token)

    def get_by_recovery_token(self, token: str) -> Optional[Account]:
        """Get account by password recovery token."""
        return self._get_one(AccountRecord.recovery_token == token)

    def save(self, account: Account) -> Account:
        """
        Persist the mutable fields of an account.

        Raises:
            AccountNotFoundError: If the account row no longer exists
            DuplicateEmailError: If the new email is already taken
        """
        try:
            with self._database.session() as session:
                record = session.get(AccountRecord, account.id)
                if record is None:
                    raise AccountNotFoundError(account.id)

                record.email = account.email
                record.password_hash = account.password_hash
                record.role = account.role
                record.activation_token = account.activation_token
                record.activation_expires_at = account.activation_expires_at
                record.recovery_token = account.recovery_token
                record.recovery_expires_at = account.recovery_expires_at
                record.updated_at = utcnow()
                session.flush()
                return self._record_to_account(record)
        except IntegrityError as exc:
            raise DuplicateEmailError(account.email) from exc

    def delete(self, account_id: str) -> None:
        """
        Delete an account.

        Raises:
            AccountNotFoundError: If no account has the given ID
        """
        with self._database.session() as session:
            result = session.execute(
                delete(AccountRecord).where(AccountRecord.id == account_id)
            )
            if result.rowcount == 0:
                raise AccountNotFoundError(account_id)

    def _get_one(self, criterion) -> Optional[Account]:
        with self._database.session() as session:
            record = session.scalar(select(AccountRecord).where(criterion))
            return self._record_to_account(record) if record else None

    def _record_to_account(self, record: AccountRecord) -> Account:
        """Convert ORM record to Account entity."""
        return Account(
            id=record.id,
            email=record.email,
            password_hash=record.password_hash,
            role=AccountRole(record.role),
            activation_token=record.activation_token,
            activation_expires_at=record.activation_expires_at,
            recovery_token=record.recovery_token,
            recovery_expires_at=record.recovery_expires_at,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
