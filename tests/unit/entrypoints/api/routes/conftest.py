"""Shared fixtures for route tests."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from smartcare.core.auth.types import Principal
from smartcare.entrypoints.api.deps import (
    Settings,
    get_app_db,
    get_invitation_service,
    get_settings,
)
from smartcare.entrypoints.api.middleware.session_auth import verify_session
from smartcare.entrypoints.api.routes import api_router


@pytest.fixture
def mock_app_db() -> AsyncMock:
    """Create mock application database."""
    return AsyncMock()


@pytest.fixture
def mock_invitations() -> AsyncMock:
    """Create mock invitation service."""
    return AsyncMock()


@pytest.fixture
def test_settings() -> Settings:
    """Create development settings."""
    settings = Settings()
    settings.environment = "development"
    settings.site_url = "https://app.example.com"
    return settings


@pytest.fixture
def app(
    mock_app_db: AsyncMock,
    mock_invitations: AsyncMock,
    test_settings: Settings,
    unrestricted_admin: Principal,
) -> FastAPI:
    """Create test app with the API routes, signed in as an unrestricted admin."""
    app = FastAPI()
    app.include_router(api_router, prefix="/api/v1")
    app.dependency_overrides[verify_session] = lambda: unrestricted_admin
    app.dependency_overrides[get_app_db] = lambda: mock_app_db
    app.dependency_overrides[get_invitation_service] = lambda: mock_invitations
    app.dependency_overrides[get_settings] = lambda: test_settings
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def sign_in(app: FastAPI) -> Callable[[Principal], None]:
    """Return a helper that makes requests run as another principal."""

    def _sign_in(principal: Principal) -> None:
        app.dependency_overrides[verify_session] = lambda: principal

    return _sign_in
