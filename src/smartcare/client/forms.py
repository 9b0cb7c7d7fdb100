"""Create-user form state."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from smartcare.client.api import ApiClientError, SmartcareClient
from smartcare.core.auth.types import UserRole

logger = structlog.get_logger()

FALLBACK_ERROR = "Failed to create user"


@dataclass
class CreateUserForm:
    """Fields and submission state of the create-user form."""

    email: str = ""
    first_name: str = ""
    last_name: str = ""
    telephone: str = ""
    is_client: bool = False
    role: str = ""
    partner_id: str | None = None
    error: str | None = None
    is_loading: bool = False
    partner_locked: bool = False

    def sync_with_current_user(self, current_user: Mapping[str, Any]) -> None:
        """Lock partner and client flag for client admins.

        A client admin can only create client users of their own partner,
        so the form mirrors what the server would enforce.
        """
        if current_user.get("is_client") and current_user.get("role") == UserRole.ADMIN:
            self.partner_id = current_user.get("partner_id") or None
            self.is_client = True
            self.partner_locked = True

    def payload(self) -> dict[str, Any]:
        """Request body expected by ``POST /users``."""
        return {
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "telephone": self.telephone,
            "isClient": self.is_client,
            "role": self.role,
            "partnerId": self.partner_id,
        }

    async def submit(self, client: SmartcareClient) -> bool:
        """Post the form. Returns True on success and sets ``error`` otherwise."""
        self.is_loading = True
        self.error = None
        try:
            await client.create_user(self.payload())
            return True
        except ApiClientError as e:
            logger.warning("create_user_failed", status=e.status, error=e.error)
            self.error = e.error or FALLBACK_ERROR
            return False
        finally:
            self.is_loading = False
