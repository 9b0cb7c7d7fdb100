"""Auth domain types."""

from dataclasses import dataclass
from enum import IntEnum
from uuid import UUID

from pydantic import BaseModel


class UserRole(IntEnum):
    """User roles, stored as small integers on the user profile."""

    ADMIN = 1
    MANAGER = 2
    MEMBER = 3

    @property
    def label(self) -> str:
        """Human readable role name."""
        return self.name.title()


@dataclass(frozen=True)
class Principal:
    """The authenticated actor making a request.

    Built once per request from a verified session token and the
    caller's profile row; never mutated afterwards.
    """

    id: UUID
    role: int
    is_client: bool
    partner_id: UUID | None
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        """Whether the principal holds the ADMIN role."""
        return self.role == UserRole.ADMIN

    @property
    def is_unrestricted_admin(self) -> bool:
        """Non-client admins are exempt from partner scoping."""
        return self.is_admin and not self.is_client


class TokenPayload(BaseModel):
    """Session token claims."""

    sub: str  # user_id
    email: str | None = None
    aud: str
    exp: int  # expiration timestamp
    iat: int  # issued at timestamp
