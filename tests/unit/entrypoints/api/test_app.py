"""Tests for the application wiring."""

from __future__ import annotations

from fastapi.testclient import TestClient

from smartcare.entrypoints.api.app import app


class TestApp:
    """Tests for the FastAPI application."""

    def test_health(self) -> None:
        """Health check answers without touching the database."""
        client = TestClient(app)

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_routes_mounted(self) -> None:
        """Business routes live under /api/v1."""
        paths = {route.path for route in app.routes}

        assert "/api/v1/users" in paths
        assert "/api/v1/users/{user_id}/deactivate" in paths
        assert "/api/v1/tickets" in paths
        assert "/api/v1/options" in paths

    def test_users_require_token(self) -> None:
        """Requests without a bearer token are rejected before any lookup."""
        client = TestClient(app)
        app.state.app_db = None

        response = client.get("/api/v1/users")

        assert response.status_code == 401
