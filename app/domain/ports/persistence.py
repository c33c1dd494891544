from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..models import Account, AccountRole


class AccountStore(Protocol):
    """Persistence functions related to accounts."""

    def create(
        self,
        email: str,
        role: AccountRole = AccountRole.CUSTOMER,
        password_hash: Optional[str] = None,
        activation_token: Optional[str] = None,
        activation_expires_at: Optional[datetime] = None,
    ) -> Account:
        ...

    def get_by_id(self, account_id: str) -> Optional[Account]:
        ...

    def get_by_email(self, email: str) -> Optional[Account]:
        ...

    def get_by_activation_token(self, token: str) -> Optional[Account]:
        ...

    def get_by_recovery_token(self, token: str) -> Optional[Account]:
        ...

    def save(self, account: Account) -> Account:
        ...

    def delete(self, account_id: str) -> None:
        ...
