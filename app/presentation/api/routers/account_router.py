"""API router for account authentication and management."""

from datetime import timezone
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from app.application.services.account_service import AccountService
from app.application.services.token_service import TokenPair
from app.core.dependencies import get_account_service
from app.domain.errors import AccountNotFoundError, DuplicateEmailError
from app.domain.models import Account
from app.presentation.api.dependencies import (
    AuthorizationContext,
    protect,
    refresh,
    require_admin,
)
from app.presentation.api.schemas.account_schemas import (
    AccountActivateRequest,
    AccountDetailsResponse,
    AccountLoginRequest,
    AccountRecoverPasswordRequest,
    AccountRegisterRequest,
    AccountRegisterResponse,
    AccountResponse,
    MessageResponse,
    TokenPairResponse,
)

router = APIRouter(prefix="/api/account", tags=["Account"])


@router.post("/login", response_model=TokenPairResponse, summary="Login")
def login(
    request: AccountLoginRequest,
    account_service: AccountService = Depends(get_account_service),
) -> TokenPairResponse:
    tokens = account_service.login(request.email, request.password)
    if tokens is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return _token_pair_response("Logged in", tokens)


@router.post(
    "/register",
    response_model=AccountRegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new account (only admin)",
)
def register(
    request: AccountRegisterRequest,
    _: AuthorizationContext = Depends(require_admin),
    account_service: AccountService = Depends(get_account_service),
) -> AccountRegisterResponse:
    try:
        _account, active_url = account_service.register(request.email, request.role)
    except DuplicateEmailError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return AccountRegisterResponse(message="Created new account", active_url=active_url)


@router.post("/recover-password", response_model=MessageResponse, summary="Recover password")
def recover_password(
    request: AccountRecoverPasswordRequest,
    account_service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """Always succeeds so that callers cannot tell which emails exist."""
    account_service.recover_password(request.email)
    return MessageResponse(message="Password change link has been sent")


@router.get("/me", response_model=AccountDetailsResponse, summary="Account details")
def me(context: AuthorizationContext = Depends(protect)) -> AccountDetailsResponse:
    return AccountDetailsResponse(
        message="Account details",
        account=_serialize_account(context.account),
    )


@router.put("/active/{active_token}", response_model=TokenPairResponse, summary="Activate account")
def active(
    active_token: UUID,
    request: AccountActivateRequest,
    account_service: AccountService = Depends(get_account_service),
) -> TokenPairResponse:
    """Set the password through an activation or password recovery link."""
    tokens = account_service.activate(str(active_token), request.password)
    if tokens is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found",
        )
    return _token_pair_response("Account has been activated", tokens)


@router.put(
    "/deactivate-password-recovery-link",
    response_model=MessageResponse,
    summary="Deactivate recovery link",
)
def deactivate_password_recovery_link(
    context: AuthorizationContext = Depends(protect),
    account_service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    try:
        account_service.deactivate_recovery_link(context.account)
    except AccountNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found",
        ) from e
    return MessageResponse(message="Recovery link has been deactivated")


@router.get("/refresh-token", response_model=TokenPairResponse, summary="Refresh token")
def refresh_token(
    context: AuthorizationContext = Depends(refresh),
    account_service: AccountService = Depends(get_account_service),
) -> TokenPairResponse:
    tokens = account_service.refresh(context.account)
    return _token_pair_response("New tokens have been generated", tokens)


@router.delete("/delete", response_model=MessageResponse, summary="Remove account")
def remove(
    context: AuthorizationContext = Depends(protect),
    account_service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    try:
        account_service.remove(context.account)
    except AccountNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found",
        ) from e
    return MessageResponse(message="Account has been destroyed")


def _token_pair_response(message: str, tokens: TokenPair) -> TokenPairResponse:
    return TokenPairResponse(
        message=message,
        token=tokens.token,
        refresh_token=tokens.refresh_token,
    )


def _serialize_account(account: Account) -> AccountResponse:
    return AccountResponse(
        id=account.id,
        email=account.email,
        role=account.role,
        is_active=account.is_active,
        created_at=account.created_at.replace(tzinfo=timezone.utc),
        updated_at=account.updated_at.replace(tzinfo=timezone.utc),
    )
