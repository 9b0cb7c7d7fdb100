"""Create-user rules: partner authorization, invite metadata and error mapping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from smartcare.core.auth.types import Principal
from smartcare.core.exceptions import InvitationError
from smartcare.core.users.types import CreateUserRequest, InvitedUser

DUPLICATE_EMAIL_MESSAGE = "A user with this email already exists."
INVALID_REFERENCE_MESSAGE = "Invalid role or partner ID provided."
INVALID_PARTNER_FORMAT_MESSAGE = "Invalid partner ID format."
DATABASE_SAVE_MESSAGE = (
    "Database error occurred while creating user. Please check the user data and try again."
)
UNEXPECTED_MESSAGE = "An unexpected error occurred."

# Provider error codes and SQLSTATEs mapped to (status, message)
_CODE_MAP: dict[str, tuple[int, str]] = {
    "email_exists": (409, DUPLICATE_EMAIL_MESSAGE),
    "user_already_exists": (409, DUPLICATE_EMAIL_MESSAGE),
    "23505": (409, DUPLICATE_EMAIL_MESSAGE),  # unique_violation
    "23503": (400, INVALID_REFERENCE_MESSAGE),  # foreign_key_violation
    "22P02": (400, INVALID_PARTNER_FORMAT_MESSAGE),  # invalid_text_representation
}

# Compatibility fallback for providers that only send free text. Order matters.
_MESSAGE_PATTERNS: tuple[tuple[tuple[str, ...], int, str], ...] = (
    (("Database error saving new user",), 500, DATABASE_SAVE_MESSAGE),
    (("duplicate key", "already exists"), 409, DUPLICATE_EMAIL_MESSAGE),
    (("Foreign Key Violation",), 400, INVALID_REFERENCE_MESSAGE),
    (("Invalid UUID Format",), 400, INVALID_PARTNER_FORMAT_MESSAGE),
)


@runtime_checkable
class InvitationService(Protocol):
    """Invites a user by email, attaching profile metadata to the account."""

    async def invite_user_by_email(
        self,
        email: str,
        data: dict[str, Any],
        redirect_to: str | None = None,
    ) -> InvitedUser:
        """Send an invitation and return the created account.

        Raises:
            InvitationError: If the provider rejects the invitation.
        """
        ...


@dataclass(frozen=True)
class InvitationFailure:
    """User-facing outcome of a failed invitation."""

    status: int
    error: str


def classify_invitation_error(error: InvitationError) -> InvitationFailure:
    """Map a provider failure to a status code and friendly message.

    Structured codes are used when present; the message patterns only
    cover providers that report failures as free text.
    """
    if error.code and error.code in _CODE_MAP:
        status, message = _CODE_MAP[error.code]
        return InvitationFailure(status=status, error=message)

    text = error.message or ""
    for patterns, status, message in _MESSAGE_PATTERNS:
        if any(pattern in text for pattern in patterns):
            return InvitationFailure(status=status, error=message)

    return InvitationFailure(status=500, error=UNEXPECTED_MESSAGE)


def can_create_for_partner(principal: Principal, partner_id: str | None) -> bool:
    """Whether the principal may create a user under ``partner_id``.

    Unrestricted admins may target any partner. Everyone else may only
    target their own partner; a missing or malformed partner never
    matches.
    """
    if principal.is_unrestricted_admin:
        return True
    if principal.partner_id is None or not partner_id:
        return False
    try:
        return UUID(partner_id) == principal.partner_id
    except ValueError:
        return False


def parse_partner_id(partner_id: str | None) -> UUID | None:
    """Parse the requested partner id.

    Raises:
        ValueError: If the value is not a UUID.
    """
    if not partner_id:
        return None
    return UUID(partner_id)


def build_invite_metadata(
    request: CreateUserRequest,
    principal: Principal,
    partner_id: UUID | None,
) -> dict[str, Any]:
    """Profile metadata attached to the invited account.

    The caller's partner is used when the request names none.
    """
    effective_partner = partner_id or principal.partner_id
    return {
        "first_name": request.first_name,
        "last_name": request.last_name,
        "is_client": bool(request.is_client),
        "is_active": True,
        "tel_contact": request.telephone or None,
        "role": request.role_value,
        "partner_id": str(effective_partner) if effective_partner else None,
    }
