"""ORM table definitions."""

from sqlalchemy import Column, DateTime, Enum, String

from ...domain.models import AccountRole, utcnow
from .database import Base


class AccountRecord(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=True)
    role = Column(
        Enum(
            AccountRole,
            name="account_role",
            values_callable=lambda roles: [role.value for role in roles],
        ),
        nullable=False,
        default=AccountRole.CUSTOMER,
    )
    activation_token = Column(String(36), nullable=True, index=True)
    activation_expires_at = Column(DateTime, nullable=True)
    recovery_token = Column(String(36), nullable=True, index=True)
    recovery_expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<AccountRecord(id={self.id}, email='{self.email}', role={self.role})>"
