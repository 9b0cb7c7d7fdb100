"""Domain-specific exceptions.

All exceptions in the smartcare system inherit from SmartcareError,
making it easy to catch all system errors while still being able
to handle specific error types.
"""

from __future__ import annotations


class SmartcareError(Exception):
    """Base exception for all smartcare errors."""

    pass


class FilterValidationError(SmartcareError):
    """A list filter could not be parsed.

    Raised when a query-string filter that must be numeric, a UUID or a
    date holds something else. Routes answer these with a 400.

    Attributes:
        field: Name of the offending query parameter.
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize FilterValidationError.

        Args:
            field: Name of the offending query parameter.
            message: Human readable description.
        """
        super().__init__(message)
        self.field = field


class QueryExecutionError(SmartcareError):
    """The backing store failed while running a list query."""

    pass


class InvitationError(SmartcareError):
    """The identity provider rejected an invitation.

    Attributes:
        status: HTTP status returned by the provider, if any.
        code: Structured error code (provider code or SQLSTATE), if any.
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        code: str | None = None,
    ) -> None:
        """Initialize InvitationError.

        Args:
            message: Raw provider message.
            status: HTTP status returned by the provider.
            code: Structured error code, when the provider sends one.
        """
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
