"""User listing and creation types."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from smartcare.core.query import (
    bool_literal_param,
    datetime_param,
    int_param,
    text_param,
    uuid_param,
)

# Query parameters accepted by the user listing endpoint
USER_FILTER_PARAMS = (
    "search",
    "first_name",
    "last_name",
    "email",
    "tel_contact",
    "partner_desc",
    "role",
    "is_client",
    "created_at_start",
    "created_at_end",
    "active",
    "partner_id",
)


class UserFilters(BaseModel):
    """Caller-supplied filters for the user listing, already parsed.

    Every field is optional; ``None`` means the filter is not applied.
    """

    model_config = ConfigDict(frozen=True)

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    tel_contact: str | None = None
    partner_desc: str | None = None
    role: int | None = None
    is_client: bool | None = None
    created_at_start: datetime | None = None
    created_at_end: datetime | None = None
    is_active: bool | None = None
    partner_id: UUID | None = None

    @classmethod
    def from_query_params(cls, params: Mapping[str, str]) -> "UserFilters":
        """Parse raw query-string values.

        ``search`` and ``first_name`` both target the first name; when
        both are given ``first_name`` wins. ``active`` is applied whenever
        the parameter is present, even empty, and means "true" only for
        the literal string ``"true"``.

        Raises:
            FilterValidationError: If ``role``, ``partner_id`` or a date
                bound cannot be parsed.
        """
        active = params.get("active")
        return cls(
            first_name=text_param(params, "first_name") or text_param(params, "search"),
            last_name=text_param(params, "last_name"),
            email=text_param(params, "email"),
            tel_contact=text_param(params, "tel_contact"),
            partner_desc=text_param(params, "partner_desc"),
            role=int_param(params, "role"),
            is_client=bool_literal_param(params, "is_client"),
            created_at_start=datetime_param(params, "created_at_start"),
            created_at_end=datetime_param(params, "created_at_end"),
            is_active=None if active is None else active == "true",
            partner_id=uuid_param(params, "partner_id"),
        )


class UserRecord(BaseModel):
    """A user row with the partner description flattened in."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    first_name: str | None = None
    last_name: str | None = None
    email: str
    tel_contact: str | None = None
    role: int | None = None
    is_client: bool = False
    partner_id: UUID | None = None
    is_active: bool = True
    created_at: datetime
    partner_desc: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "UserRecord":
        """Build a record from a joined users/partners row."""
        return cls(
            id=row["id"],
            first_name=row.get("first_name"),
            last_name=row.get("last_name"),
            email=row["email"],
            tel_contact=row.get("tel_contact"),
            role=row.get("role"),
            is_client=bool(row.get("is_client")),
            partner_id=row.get("partner_id"),
            is_active=bool(row.get("is_active", True)),
            created_at=row["created_at"],
            partner_desc=row.get("partner_desc"),
        )


class CreateUserRequest(BaseModel):
    """Request to invite a new user.

    Field presence is validated by the route so that missing names
    produce the documented 400 body rather than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    telephone: str | None = None
    is_client: bool | None = Field(None, alias="isClient")
    role: int | str | None = None
    partner_id: str | None = Field(None, alias="partnerId")

    @property
    def missing_required(self) -> bool:
        """Whether email, first name or last name is empty."""
        return not (self.email and self.first_name and self.last_name)

    @property
    def role_value(self) -> int | str | None:
        """Role as an integer when it is numeric."""
        if isinstance(self.role, str) and self.role.strip().isdigit():
            return int(self.role)
        return self.role or None


class InvitedUser(BaseModel):
    """User account returned by the identity provider after an invite."""

    model_config = ConfigDict(extra="allow")

    id: UUID
    email: str
    invited_at: datetime | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)
