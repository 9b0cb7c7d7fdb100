"""Option lists for form selects."""

from __future__ import annotations

from typing import Annotated, Literal

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from smartcare.adapters.db.app_db import AppDatabase
from smartcare.core.auth.types import UserRole
from smartcare.core.exceptions import QueryExecutionError
from smartcare.entrypoints.api.deps import Settings, get_app_db, get_settings
from smartcare.entrypoints.api.middleware.session_auth import Authenticated
from smartcare.entrypoints.api.responses import error_response

logger = structlog.get_logger()

router = APIRouter(prefix="/options", tags=["options"])

AppDbDep = Annotated[AppDatabase, Depends(get_app_db)]
SettingsDep = Annotated[Settings, Depends(get_settings)]

OptionType = Literal["partners", "roles"]


class OptionResponse(BaseModel):
    """A selectable option."""

    id: str
    name: str


@router.get("", response_model=list[OptionResponse])
async def list_options(
    principal: Authenticated,
    app_db: AppDbDep,
    settings: SettingsDep,
    type: Annotated[OptionType, Query()],  # noqa: A002
) -> list[OptionResponse] | JSONResponse:
    """List partners the caller may assign, or the role catalogue."""
    if type == "roles":
        return [OptionResponse(id=str(role.value), name=role.label) for role in UserRole]

    try:
        partners = await app_db.list_partners(principal)
    except QueryExecutionError as e:
        logger.error("options_query_failed", user_id=str(principal.id), type=type, error=str(e))
        return error_response(500, "Failed to fetch options", settings, details=str(e))

    return [
        OptionResponse(id=str(p["id"]), name=p.get("partner_desc") or "") for p in partners
    ]
