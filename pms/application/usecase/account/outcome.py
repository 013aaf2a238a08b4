"""Terminal and intermediate states of the external-login flow.

Routes turn each variant into a redirect or a page.
"""

from dataclasses import dataclass, field

from pms.domain.value import SessionTicket


@dataclass(frozen=True)
class Authenticated:
    """User signed in; redirect to ``return_url``."""

    ticket: SessionTicket
    return_url: str


@dataclass(frozen=True)
class LockedOutPage:
    """Account is locked out; redirect to the lockout page."""


@dataclass(frozen=True)
class SignInRejected:
    """Sign-in policy refused the user; redirect to login with ``message``."""

    message: str
    return_url: str


@dataclass(frozen=True)
class CollectEmail:
    """Ask the user to confirm the email for a new local account."""

    provider_display_name: str
    return_url: str
    email: str | None = None
    errors: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PendingConfirmation:
    """Account created; redirect to the registration-pending page."""

    email: str


ExternalLoginOutcome = (
    Authenticated | LockedOutPage | SignInRejected | CollectEmail | PendingConfirmation
)
