"""Account domain model for authentication and provisioning."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class AccountRole(str, Enum):
    ADMIN = "admin"
    PREMIUM = "premium"
    CUSTOMER = "customer"
    GUEST = "guest"


@dataclass(slots=True)
class Account:
    """
    Account entity.

    Attributes:
        id: Unique identifier (UUID string)
        email: Account email address (unique)
        password_hash: Hashed password, None until the account is activated
        role: Account role
        activation_token: One-time token used to set the initial password
        activation_expires_at: Expiration timestamp for the activation token
        recovery_token: One-time token used to reset a forgotten password
        recovery_expires_at: Expiration timestamp for the recovery token
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    id: str
    email: str
    password_hash: Optional[str]
    role: AccountRole
    activation_token: Optional[str]
    activation_expires_at: Optional[datetime]
    recovery_token: Optional[str]
    recovery_expires_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    @property
    def is_active(self) -> bool:
        return self.password_hash is not None

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN


def utcnow() -> datetime:
    """Naive UTC timestamp, the form SQLite round-trips."""
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)
