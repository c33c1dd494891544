from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

BEARER_PREFIX = "Bearer "


class TokenError(Exception):
    """Base class for token verification failures."""


class MalformedTokenError(TokenError):
    pass


class InvalidSignatureError(TokenError):
    pass


class ExpiredTokenError(TokenError):
    pass


@dataclass(slots=True, frozen=True)
class TokenPayload:
    account_id: str
    is_refresh_token: bool


@dataclass(slots=True, frozen=True)
class TokenPair:
    token: str
    refresh_token: str


class TokenService:
    """Signs and verifies the access/refresh bearer tokens."""

    def __init__(
        self,
        secret_key: str,
        access_token_exp: timedelta = timedelta(hours=1),
        refresh_token_exp: timedelta = timedelta(days=30),
        algorithm: str = "HS256",
    ) -> None:
        if not secret_key:
            raise RuntimeError("JWT_SECRET is not configured.")
        self._secret_key = secret_key
        self._access_token_exp = access_token_exp
        self._refresh_token_exp = refresh_token_exp
        self._algorithm = algorithm

    def issue_pair(self, account_id: str) -> TokenPair:
        """Both tokens carry the same account id and differ in type and lifetime."""
        return TokenPair(
            token=BEARER_PREFIX + self._encode(account_id, False, self._access_token_exp),
            refresh_token=BEARER_PREFIX + self._encode(account_id, True, self._refresh_token_exp),
        )

    def verify(self, token: str) -> TokenPayload:
        """
        Decode and validate a token.

        Args:
            token: Encoded JWT, without the ``Bearer`` prefix

        Returns:
            The decoded payload

        Raises:
            MalformedTokenError: If the token cannot be parsed or lacks claims
            InvalidSignatureError: If the signature does not match
            ExpiredTokenError: If the token is past its expiry
        """
        try:
            jwt.get_unverified_header(token)
        except JWTError as exc:
            raise MalformedTokenError("Token could not be decoded") from exc

        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise ExpiredTokenError("Token has expired") from exc
        except JWTError as exc:
            raise InvalidSignatureError("Token signature is invalid") from exc

        account_id = claims.get("accountId")
        is_refresh_token = claims.get("isRefreshToken")
        if not isinstance(account_id, str) or not isinstance(is_refresh_token, bool):
            raise MalformedTokenError("Token payload is incomplete")
        return TokenPayload(account_id=account_id, is_refresh_token=is_refresh_token)

    def _encode(self, account_id: str, is_refresh_token: bool, lifetime: timedelta) -> str:
        now = datetime.now(tz=timezone.utc)
        payload = {
            "accountId": account_id,
            "isRefreshToken": is_refresh_token,
            "iat": now,
            "exp": now + lifetime,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)


def strip_bearer_prefix(value: str) -> str:
    if value.startswith(BEARER_PREFIX):
        return value[len(BEARER_PREFIX):]
    return value
