"""User management routes."""

from __future__ import annotations

from typing import Annotated, Any
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from smartcare.adapters.db.app_db import AppDatabase
from smartcare.core.exceptions import (
    FilterValidationError,
    InvitationError,
    QueryExecutionError,
)
from smartcare.core.users import (
    CreateUserRequest,
    InvitationService,
    UserFilters,
    UserRecord,
    build_invite_metadata,
    can_create_for_partner,
    classify_invitation_error,
    parse_partner_id,
)
from smartcare.core.users.invitations import INVALID_PARTNER_FORMAT_MESSAGE
from smartcare.entrypoints.api.deps import (
    Settings,
    get_app_db,
    get_invitation_service,
    get_settings,
)
from smartcare.entrypoints.api.middleware.session_auth import Authenticated, RequireAdmin
from smartcare.entrypoints.api.responses import error_response

logger = structlog.get_logger()

router = APIRouter(prefix="/users", tags=["users"])

# Annotated types for dependency injection
AppDbDep = Annotated[AppDatabase, Depends(get_app_db)]
InvitationsDep = Annotated[InvitationService, Depends(get_invitation_service)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


@router.get("", response_model=list[UserRecord])
async def list_users(
    request: Request,
    principal: Authenticated,
    app_db: AppDbDep,
    settings: SettingsDep,
) -> list[UserRecord] | JSONResponse:
    """List users visible to the caller, newest first.

    Filters come straight from the query string: ``search``,
    ``first_name``, ``last_name``, ``email``, ``tel_contact``,
    ``partner_desc``, ``role``, ``is_client``, ``created_at_start``,
    ``created_at_end``, ``active`` and ``partner_id``. They narrow the
    caller's visible rows and can never widen them.
    """
    try:
        filters = UserFilters.from_query_params(request.query_params)
    except FilterValidationError as e:
        return error_response(400, str(e), settings)

    try:
        users = await app_db.list_users(principal, filters)
    except QueryExecutionError as e:
        logger.error("users_query_failed", user_id=str(principal.id), error=str(e))
        return error_response(500, "Failed to fetch users", settings, details=str(e))

    return users


@router.post("")
async def create_user(
    body: CreateUserRequest,
    principal: RequireAdmin,
    invitations: InvitationsDep,
    settings: SettingsDep,
) -> Any:
    """Invite a new user (admin only).

    Client admins may only create users for their own partner.
    """
    if not can_create_for_partner(principal, body.partner_id):
        logger.warning(
            "user_create_forbidden_partner",
            user_id=str(principal.id),
            target_partner_id=body.partner_id,
            own_partner_id=str(principal.partner_id) if principal.partner_id else None,
        )
        return error_response(
            403, "Forbidden: Cannot create user for different partner", settings
        )

    if body.missing_required:
        return error_response(
            400,
            "Missing required fields: email, firstName, and lastName are required.",
            settings,
        )

    try:
        partner_id = parse_partner_id(body.partner_id)
    except ValueError:
        return error_response(400, INVALID_PARTNER_FORMAT_MESSAGE, settings)

    metadata = build_invite_metadata(body, principal, partner_id)

    try:
        invited = await invitations.invite_user_by_email(
            body.email or "",
            data=metadata,
            redirect_to=settings.invite_redirect_url,
        )
    except InvitationError as e:
        failure = classify_invitation_error(e)
        logger.error(
            "user_invite_failed",
            user_id=str(principal.id),
            status=e.status,
            code=e.code,
            message=e.message,
        )
        return error_response(failure.status, failure.error, settings, details=e.message)

    logger.info(
        "user_invited",
        invited_user_id=str(invited.id),
        by_user_id=str(principal.id),
        partner_id=metadata["partner_id"],
    )

    return {"success": True, "user": invited.model_dump(mode="json")}


@router.post("/{user_id}/deactivate", response_model=UserRecord)
async def deactivate_user(
    user_id: UUID,
    principal: RequireAdmin,
    app_db: AppDbDep,
    settings: SettingsDep,
) -> UserRecord | JSONResponse:
    """Deactivate a user visible to the caller (admin only)."""
    try:
        user = await app_db.deactivate_user(principal, user_id)
    except QueryExecutionError as e:
        logger.error("user_deactivate_failed", user_id=str(user_id), error=str(e))
        return error_response(500, "Failed to deactivate user", settings, details=str(e))

    if user is None:
        return error_response(404, "User not found", settings)

    logger.info("user_deactivated", user_id=str(user_id), by_user_id=str(principal.id))
    return user
