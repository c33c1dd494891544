"""Bearer-token authorization dependencies."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...application.services.account_service import AccountService
from ...application.services.token_service import (
    BEARER_PREFIX,
    TokenError,
    TokenPayload,
    TokenService,
    strip_bearer_prefix,
)
from ...core.dependencies import get_account_service, get_token_service
from ...domain.models import Account

logger = logging.getLogger(__name__)

BEARER_TOKEN_PATTERN = re.compile(r"^Bearer [A-Za-z0-9_-]*\.[A-Za-z0-9_-]*\.[A-Za-z0-9_-]*$")

# Only documents the security scheme in OpenAPI; the header is read below.
_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(slots=True)
class AuthorizationContext:
    is_logged_in: bool = False
    account: Optional[Account] = None


def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def bearer_token(
    authorization: Optional[str] = Header(default=None),
    _: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> str:
    """
    Raw JWT from the ``Authorization`` header.

    A missing header or one without the ``Bearer`` prefix is unauthorized (401);
    a ``Bearer`` value that is not shaped like a JWT fails validation (400).
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise _unauthorized("Bearer token not found")
    if not BEARER_TOKEN_PATTERN.fullmatch(authorization):
        raise RequestValidationError(
            [
                {
                    "type": "string_pattern_mismatch",
                    "loc": ("header", "authorization"),
                    "msg": "Invalid token format",
                }
            ]
        )
    return strip_bearer_prefix(authorization)


def _verify(token_service: TokenService, token: str) -> TokenPayload:
    try:
        return token_service.verify(token)
    except TokenError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise _unauthorized() from exc


def protect(
    token: str = Depends(bearer_token),
    token_service: TokenService = Depends(get_token_service),
    account_service: AccountService = Depends(get_account_service),
) -> AuthorizationContext:
    """Require a valid access token belonging to an existing account."""
    context = AuthorizationContext()
    payload = _verify(token_service, token)
    if payload.is_refresh_token:
        logger.info("Refresh token used for authorization")
        raise _unauthorized()

    account = account_service.get_by_id(payload.account_id)
    if not account:
        logger.info("Access token references unknown account %s", payload.account_id)
        raise _unauthorized()

    context.is_logged_in = True
    context.account = account
    return context


def refresh(
    token: str = Depends(bearer_token),
    token_service: TokenService = Depends(get_token_service),
    account_service: AccountService = Depends(get_account_service),
) -> AuthorizationContext:
    """Require a valid refresh token. The caller is not logged in by it."""
    context = AuthorizationContext()
    payload = _verify(token_service, token)
    if not payload.is_refresh_token:
        logger.info("Access token used for refreshing")
        raise _unauthorized()

    account = account_service.get_by_id(payload.account_id)
    if not account:
        logger.info("Refresh token references unknown account %s", payload.account_id)
        raise _unauthorized()

    context.account = account
    return context


def require_admin(context: AuthorizationContext = Depends(protect)) -> AuthorizationContext:
    if not context.account.is_admin:
        logger.info("Account %s is not an administrator", context.account.id)
        raise _unauthorized()
    return context
