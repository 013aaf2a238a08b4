"""Authentication cookies.

All values are signed tokens; cookies are HTTP-only and SameSite=Lax so they
survive the top-level redirect back from a provider.
"""

from datetime import datetime, timezone

from starlette.responses import Response

from pms.config import Settings
from pms.domain.value import SessionTicket


def set_auth_cookie(
    response: Response,
    name: str,
    value: str,
    settings: Settings,
    max_age: int | None = None,
) -> None:
    """Set an HTTP-only cookie on ``response``."""
    response.set_cookie(
        key=name,
        value=value,
        max_age=max_age,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
    )


def delete_auth_cookie(response: Response, name: str, settings: Settings) -> None:
    """Expire a cookie set by ``set_auth_cookie``."""
    response.delete_cookie(
        key=name,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
    )


def set_session_cookie(
    response: Response, ticket: SessionTicket, settings: Settings
) -> None:
    """Write the application session cookie.

    Non-persistent sessions get a browser-session cookie; the token itself
    still expires at ``ticket.expires_at``.
    """
    max_age = None
    if ticket.is_persistent:
        remaining = ticket.expires_at - datetime.now(timezone.utc)
        max_age = max(int(remaining.total_seconds()), 0)
    set_auth_cookie(
        response, settings.auth.session_cookie_name, ticket.token, settings, max_age
    )
