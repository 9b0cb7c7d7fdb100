"""Dependency injection and application lifespan management."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import Request

from smartcare.adapters.auth import GoTrueAdminClient, GoTrueConfig
from smartcare.adapters.db.app_db import AppDatabase
from smartcare.core.users import InvitationService

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = structlog.get_logger()


class Settings:
    """Application settings loaded from environment."""

    def __init__(self) -> None:
        """Load settings from environment variables."""
        self.database_url = os.getenv("DATABASE_URL", "postgresql://localhost:5432/smartcare")
        self.supabase_url = os.getenv("SUPABASE_URL", "http://localhost:54321")
        self.supabase_service_role_key = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
        self.site_url = os.getenv("SITE_URL", "http://localhost:3000")
        self.environment = os.getenv("ENVIRONMENT", "development")
        self.cors_origins = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
        ]

    @property
    def is_production(self) -> bool:
        """Whether the app runs in production."""
        return self.environment.lower() == "production"

    @property
    def invite_redirect_url(self) -> str:
        """Where invited users land after accepting."""
        return f"{self.site_url.rstrip('/')}/"


settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - setup and teardown.

    This context manager handles:
    - Database connection pool setup
    - Identity provider client initialization
    """
    app_db = AppDatabase(settings.database_url)
    await app_db.connect()

    invitations = GoTrueAdminClient(
        GoTrueConfig(
            url=settings.supabase_url,
            service_role_key=settings.supabase_service_role_key,
        )
    )

    app.state.app_db = app_db
    app.state.invitations = invitations
    app.state.settings = settings

    logger.info("app_started", environment=settings.environment)

    yield

    await app_db.close()


def get_app_db(request: Request) -> AppDatabase:
    """Get the application database from app state."""
    app_db: AppDatabase = request.app.state.app_db
    return app_db


def get_invitation_service(request: Request) -> InvitationService:
    """Get the invitation service from app state."""
    invitations: InvitationService = request.app.state.invitations
    return invitations


def get_settings() -> Settings:
    """Get application settings."""
    return settings
