"""API middleware."""

from smartcare.entrypoints.api.middleware.session_auth import (
    Authenticated,
    RequireAdmin,
    require_role,
    verify_session,
)

__all__ = [
    "Authenticated",
    "RequireAdmin",
    "require_role",
    "verify_session",
]
