"""Auth domain types and utilities."""

from smartcare.core.auth.jwt import TokenError, create_access_token, decode_token
from smartcare.core.auth.types import Principal, TokenPayload, UserRole

__all__ = [
    "Principal",
    "TokenPayload",
    "UserRole",
    "create_access_token",
    "decode_token",
    "TokenError",
]
