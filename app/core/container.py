from dataclasses import dataclass

from ..application.services.account_service import AccountService
from ..application.services.token_service import TokenService
from ..infrastructure.persistence.database import Database
from ..infrastructure.repositories.account_repository import AccountRepository
from .config import Settings


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    database: Database
    account_repository: AccountRepository
    token_service: TokenService
    account_service: AccountService
