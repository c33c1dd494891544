"""Domain models for the account service."""

from .account import Account, AccountRole, utcnow

__all__ = [
    "Account",
    "AccountRole",
    "utcnow",
]
