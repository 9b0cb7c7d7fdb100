"""Session authentication middleware."""

from collections.abc import Callable
from typing import Annotated, Any
from uuid import UUID

import structlog
from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from smartcare.adapters.db.app_db import AppDatabase
from smartcare.core.auth.jwt import TokenError, decode_token
from smartcare.core.auth.types import Principal, UserRole
from smartcare.core.exceptions import QueryExecutionError
from smartcare.entrypoints.api.deps import get_app_db

logger = structlog.get_logger()

# Use Bearer token authentication
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def verify_session(
    request: Request,
    app_db: Annotated[AppDatabase, Depends(get_app_db)],
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),  # noqa: B008
) -> Principal:
    """Verify the session token and load the caller's profile.

    Args:
        request: The current request.
        app_db: Application database.
        credentials: Bearer token credentials.

    Returns:
        Principal for the authenticated caller.

    Raises:
        HTTPException: 401 if the token is missing, invalid or has no
            profile; 403 if the account is disabled; 500 if the profile
            lookup fails.
    """
    if not credentials:
        raise _unauthorized("Missing authentication token")

    try:
        payload = decode_token(credentials.credentials)
        user_id = UUID(payload.sub)
    except TokenError as e:
        logger.warning("session_validation_failed", error=str(e))
        raise _unauthorized(str(e)) from None
    except ValueError:
        logger.warning("session_subject_invalid")
        raise _unauthorized("Invalid token subject") from None

    try:
        profile = await app_db.get_user_profile(user_id)
    except QueryExecutionError as e:
        logger.error("session_profile_lookup_failed", user_id=str(user_id), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to load user profile") from None

    if not profile:
        logger.warning("session_profile_missing", user_id=str(user_id))
        raise _unauthorized("User profile not found")

    if not profile.get("is_active", True):
        raise HTTPException(status_code=403, detail="User account is disabled")

    principal = Principal(
        id=profile["id"],
        role=int(profile.get("role") or 0),
        is_client=bool(profile.get("is_client")),
        partner_id=profile.get("partner_id"),
        email=profile.get("email") or payload.email,
    )

    # Store in request state for downstream use
    request.state.principal = principal

    logger.debug(
        "session_verified",
        user_id=str(principal.id),
        role=principal.role,
        is_client=principal.is_client,
    )

    return principal


def require_role(*roles: UserRole) -> Callable[..., Any]:
    """Dependency to require one of the given roles.

    Usage:
        @router.post("")
        async def create_item(
            principal: Annotated[Principal, Depends(require_role(UserRole.ADMIN))],
        ):
            ...

    Args:
        roles: Roles allowed through.

    Returns:
        Dependency function that validates the caller's role.
    """
    allowed = {int(role) for role in roles}

    async def role_checker(
        principal: Annotated[Principal, Depends(verify_session)],
    ) -> Principal:
        if principal.role not in allowed:
            logger.warning(
                "role_check_failed",
                user_id=str(principal.id),
                role=principal.role,
                required=sorted(allowed),
            )
            names = ", ".join(UserRole(role).name.lower() for role in sorted(allowed))
            raise HTTPException(
                status_code=403,
                detail=f"Role '{names}' required",
            )
        return principal

    return role_checker


# Common role dependencies for convenience
Authenticated = Annotated[Principal, Depends(verify_session)]
RequireAdmin = Annotated[Principal, Depends(require_role(UserRole.ADMIN))]
