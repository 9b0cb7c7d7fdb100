"""Session token creation and validation.

Session tokens are HS256 JWTs issued by the identity provider and
signed with the project's JWT secret.
"""

import os
from datetime import datetime, timedelta, timezone

import jwt

from smartcare.core.auth.types import TokenPayload


class TokenError(Exception):
    """Raised when token validation fails."""

    pass


# Configuration
SECRET_KEY = os.environ.get("SUPABASE_JWT_SECRET", "dev-secret-change-in-production")
ALGORITHM = "HS256"
AUDIENCE = "authenticated"
ACCESS_TOKEN_EXPIRE_MINUTES = 60


def create_access_token(user_id: str, email: str | None = None) -> str:
    """Create a session token.

    Only used for local development and tests; production tokens are
    minted by the identity provider.

    Args:
        user_id: User identifier
        email: User's email address

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        "sub": user_id,
        "email": email,
        "aud": AUDIENCE,
        "role": AUDIENCE,
        "exp": int(expire.timestamp()),
        "iat": int(now.timestamp()),
    }

    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> TokenPayload:
    """Decode and validate a session token.

    Args:
        token: Encoded JWT string

    Returns:
        Decoded token payload

    Raises:
        TokenError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM], audience=AUDIENCE)
        return TokenPayload(
            sub=payload["sub"],
            email=payload.get("email"),
            aud=payload["aud"],
            exp=payload["exp"],
            iat=payload["iat"],
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired") from None
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}") from None
    except KeyError as e:
        raise TokenError(f"Invalid token: missing claim {e}") from None
