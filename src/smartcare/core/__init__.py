"""Core domain - access scoping, filters and error classification."""

from .exceptions import (
    FilterValidationError,
    InvitationError,
    QueryExecutionError,
    SmartcareError,
)
from .query import Predicate, compile_where, contains_pattern

__all__ = [
    # Exceptions
    "SmartcareError",
    "FilterValidationError",
    "InvitationError",
    "QueryExecutionError",
    # Query building
    "Predicate",
    "compile_where",
    "contains_pattern",
]
