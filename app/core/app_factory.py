from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.account_service import AccountService
from ..application.services.token_service import TokenService
from ..infrastructure.persistence.database import Database
from ..infrastructure.repositories.account_repository import AccountRepository
from ..presentation.api.errors import register_exception_handlers
from ..presentation.api.routers import account_router

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="Account Service", lifespan=_create_lifespan(settings))
    app.state.settings = settings  # type: ignore[attr-defined]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(account_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        database = Database(settings.database_url)
        try:
            database.create_schema()
        except SQLAlchemyError as exc:
            logger.error("Something went wrong while starting the application: %s", exc)
            database.close()
            raise

        account_repository = AccountRepository(database)
        token_service = TokenService(
            secret_key=settings.jwt_secret,
            access_token_exp=timedelta(minutes=settings.access_token_exp_minutes),
            refresh_token_exp=timedelta(days=settings.refresh_token_exp_days),
            algorithm=settings.jwt_algorithm,
        )
        account_service = AccountService(
            account_repository,
            token_service,
            client_url=settings.client_url,
            activation_expiration=timedelta(hours=settings.activation_token_exp_hours),
            recovery_expiration=timedelta(minutes=settings.recovery_token_exp_minutes),
        )
        account_service.ensure_default_admin(
            settings.admin_default_email, settings.admin_default_password
        )

        container = ApplicationContainer(
            settings=settings,
            database=database,
            account_repository=account_repository,
            token_service=token_service,
            account_service=account_service,
        )

        app.state.container = container  # type: ignore[attr-defined]
        logger.info("Account service ready on %s:%s", settings.host, settings.port)

        try:
            yield
        finally:
            database.close()

    return lifespan
