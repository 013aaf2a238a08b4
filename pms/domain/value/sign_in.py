"""Sign-in outcomes.

External sign-in returns one of these variants instead of signalling
lockout or missing links through exceptions. Callers dispatch on the
concrete type.
"""

from dataclasses import dataclass
from datetime import datetime

from pms.domain.value.identifiers import UserId
from pms.domain.value.types import ExternalIdentity


@dataclass(frozen=True)
class SessionTicket:
    """Authenticated application session, written to the session cookie."""

    token: str
    user_id: UserId
    user_name: str
    is_persistent: bool
    expires_at: datetime
    authentication_method: str | None = None


@dataclass(frozen=True)
class SignedIn:
    """The external login is linked and the user is signed in."""

    ticket: SessionTicket


@dataclass(frozen=True)
class LockedOut:
    """The linked user is currently locked out."""

    user_id: UserId


@dataclass(frozen=True)
class NotAllowed:
    """The linked user may not sign in yet (e.g. unconfirmed email)."""

    user_id: UserId


@dataclass(frozen=True)
class TwoFactorRequired:
    """The linked user must complete a second factor."""

    user_id: UserId


@dataclass(frozen=True)
class LinkRequired:
    """No local user is linked to this external login."""

    identity: ExternalIdentity


SignInResult = SignedIn | LockedOut | NotAllowed | TwoFactorRequired | LinkRequired
