"""Pydantic schemas for account API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from app.domain.models import AccountRole

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 64


class AccountLoginRequest(BaseModel):
    """Request schema for login."""

    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class AccountRegisterRequest(BaseModel):
    """Request schema for admin provisioning of an account."""

    email: EmailStr
    role: AccountRole = AccountRole.CUSTOMER


class AccountRecoverPasswordRequest(BaseModel):
    email: EmailStr


class AccountActivateRequest(BaseModel):
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(CamelModel):
    """Envelope shared by every response."""

    message: str
    success: bool = True


class TokenPairResponse(MessageResponse):
    token: str
    refresh_token: str


class AccountRegisterResponse(MessageResponse):
    active_url: str


class AccountResponse(CamelModel):
    """Public account data. Credentials and one-time tokens are never exposed."""

    id: str
    email: str
    role: AccountRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AccountDetailsResponse(MessageResponse):
    account: AccountResponse
