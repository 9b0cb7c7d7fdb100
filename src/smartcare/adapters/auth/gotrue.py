"""Invite users through the identity provider's admin API."""

from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from smartcare.core.exceptions import InvitationError
from smartcare.core.users.types import InvitedUser

logger = structlog.get_logger()


@dataclass
class GoTrueConfig:
    """Identity provider admin API configuration."""

    url: str
    service_role_key: str
    timeout_seconds: int = 30


class GoTrueAdminClient:
    """Sends invitations through the GoTrue admin endpoint."""

    def __init__(self, config: GoTrueConfig):
        """Initialize the admin client.

        Args:
            config: Provider URL and credentials.
        """
        self.config = config

    @property
    def invite_url(self) -> str:
        """Admin invite endpoint."""
        return f"{self.config.url.rstrip('/')}/auth/v1/invite"

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self.config.service_role_key,
            "Authorization": f"Bearer {self.config.service_role_key}",
            "Content-Type": "application/json",
        }

    async def invite_user_by_email(
        self,
        email: str,
        data: dict[str, Any],
        redirect_to: str | None = None,
    ) -> InvitedUser:
        """Invite a user, attaching ``data`` as the account's metadata.

        Raises:
            InvitationError: If the provider rejects the invite or cannot be reached.
        """
        params = {"redirect_to": redirect_to} if redirect_to else None

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.invite_url,
                    json={"email": email, "data": data},
                    params=params,
                    headers=self._headers(),
                    timeout=self.config.timeout_seconds,
                )
        except httpx.TimeoutException:
            logger.warning("invite_timeout", url=self.invite_url)
            raise InvitationError("Invitation request timed out") from None
        except httpx.RequestError as e:
            logger.error("invite_request_error", url=self.invite_url, error=str(e))
            raise InvitationError(f"Invitation request failed: {e}") from None

        if not response.is_success:
            raise self._error_from_response(response)

        body = response.json()
        # Some provider versions wrap the account in {"user": {...}}
        account = body.get("user", body) if isinstance(body, dict) else body
        return InvitedUser.model_validate(account)

    @staticmethod
    def _error_from_response(response: httpx.Response) -> InvitationError:
        """Extract message and code from a provider error body."""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        message = (
            body.get("msg")
            or body.get("message")
            or body.get("error_description")
            or body.get("error")
            or response.text
            or f"HTTP {response.status_code}"
        )
        code = body.get("error_code") or body.get("code")

        logger.error(
            "invite_rejected",
            status_code=response.status_code,
            code=code,
            message=message,
        )
        return InvitationError(
            str(message),
            status=response.status_code,
            code=str(code) if code is not None else None,
        )
