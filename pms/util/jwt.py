"""JWT token utilities.

All signed artifacts (session, external identity, correlation and email
confirmation tokens) are HS256 JWTs carrying a ``purpose`` claim so that a
token minted for one use is rejected for any other.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from pms.config import AuthSettings


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_token(
    purpose: str,
    payload: dict[str, Any],
    expires_in: timedelta,
    settings: AuthSettings,
) -> str:
    """Create a signed token.

    Args:
        purpose: Token purpose, checked on verification
        payload: Additional claims
        expires_in: Lifetime of the token
        settings: Authentication settings

    Returns:
        Encoded JWT token
    """
    now = datetime.now(timezone.utc)
    claims = {
        **payload,
        "purpose": purpose,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(claims, settings.secret, algorithm=settings.algorithm)


def verify_token(token: str, purpose: str, settings: AuthSettings) -> dict[str, Any]:
    """Verify and decode a signed token.

    Args:
        token: JWT token to verify
        purpose: Expected token purpose
        settings: Authentication settings

    Returns:
        Decoded claims

    Raises:
        JWTError: If token is invalid, expired or minted for another purpose
    """
    try:
        claims = jwt.decode(token, settings.secret, algorithms=[settings.algorithm])
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")

    if claims.get("purpose") != purpose:
        raise JWTError("Token purpose mismatch")
    return claims
