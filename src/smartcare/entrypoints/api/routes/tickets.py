"""Ticket ("chamado") routes."""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from smartcare.adapters.db.app_db import AppDatabase
from smartcare.core.exceptions import FilterValidationError, QueryExecutionError
from smartcare.core.tickets import TicketFilters, TicketRecord
from smartcare.entrypoints.api.deps import Settings, get_app_db, get_settings
from smartcare.entrypoints.api.middleware.session_auth import Authenticated
from smartcare.entrypoints.api.responses import error_response

logger = structlog.get_logger()

router = APIRouter(prefix="/tickets", tags=["tickets"])

AppDbDep = Annotated[AppDatabase, Depends(get_app_db)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


@router.get("", response_model=list[TicketRecord])
async def list_tickets(
    request: Request,
    principal: Authenticated,
    app_db: AppDbDep,
    settings: SettingsDep,
) -> list[TicketRecord] | JSONResponse:
    """List tickets visible to the caller, newest first."""
    try:
        filters = TicketFilters.from_query_params(request.query_params)
    except FilterValidationError as e:
        return error_response(400, str(e), settings)

    try:
        return await app_db.list_tickets(principal, filters)
    except QueryExecutionError as e:
        logger.error("tickets_query_failed", user_id=str(principal.id), error=str(e))
        return error_response(500, "Failed to fetch tickets", settings, details=str(e))
