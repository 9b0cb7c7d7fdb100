"""HTTP client for the smartcare API."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

logger = structlog.get_logger()


class ApiClientError(Exception):
    """Raised when an API call fails.

    Attributes:
        status: HTTP status code, or None if the server was not reached.
        error: Error text reported by the server.
    """

    def __init__(self, status: int | None, error: str) -> None:
        """Initialize ApiClientError.

        Args:
            status: HTTP status code, or None for transport failures.
            error: Error text reported by the server.
        """
        super().__init__(f"{status}: {error}" if status else error)
        self.status = status
        self.error = error


@dataclass
class ClientConfig:
    """API client configuration."""

    base_url: str
    access_token: str | None = None
    timeout_seconds: int = 30


class SmartcareClient:
    """Thin async client over the ``/api/v1`` endpoints."""

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            config: Base URL and credentials.
            transport: Optional transport, mainly for tests.
        """
        self.config = config
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.config.access_token:
            headers["Authorization"] = f"Bearer {self.config.access_token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self.config.base_url,
                headers=self._headers(),
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, params=params, json=json)
        except httpx.RequestError as e:
            logger.error("api_request_error", method=method, path=path, error=str(e))
            raise ApiClientError(None, str(e)) from e

        if not response.is_success:
            raise ApiClientError(response.status_code, _error_text(response))

        return response.json()

    async def list_users(self, params: Mapping[str, str]) -> list[dict[str, Any]]:
        """List users matching the given filters."""
        users: list[dict[str, Any]] = await self._request("GET", "/api/v1/users", params=params)
        return users

    async def list_tickets(self, params: Mapping[str, str]) -> list[dict[str, Any]]:
        """List tickets matching the given filters."""
        tickets: list[dict[str, Any]] = await self._request(
            "GET", "/api/v1/tickets", params=params
        )
        return tickets

    async def create_user(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Invite a new user."""
        result: dict[str, Any] = await self._request("POST", "/api/v1/users", json=payload)
        return result

    async def get_options(self, option_type: str) -> list[dict[str, Any]]:
        """Fetch select options (``partners`` or ``roles``)."""
        options: list[dict[str, Any]] = await self._request(
            "GET", "/api/v1/options", params={"type": option_type}
        )
        return options


def _error_text(response: httpx.Response) -> str:
    """Pull the error message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        error = body.get("error") or body.get("detail")
        if error:
            return str(error)
    return f"HTTP {response.status_code}"
