"""Domain value objects."""

from pms.domain.value.identifiers import AuditLogEntryId, LoginLinkId, UserId
from pms.domain.value.sign_in import (
    LinkRequired,
    LockedOut,
    NotAllowed,
    SessionTicket,
    SignedIn,
    SignInResult,
    TwoFactorRequired,
)
from pms.domain.value.types import (
    Claim,
    ClaimTypes,
    EmailAddress,
    ExternalIdentity,
    IdentityError,
    IdentityResult,
    LoginProvider,
)

__all__ = [
    # Identifiers
    "UserId",
    "LoginLinkId",
    "AuditLogEntryId",
    # Types
    "Claim",
    "ClaimTypes",
    "EmailAddress",
    "ExternalIdentity",
    "IdentityError",
    "IdentityResult",
    "LoginProvider",
    # Sign-in outcomes
    "LinkRequired",
    "LockedOut",
    "NotAllowed",
    "SessionTicket",
    "SignedIn",
    "SignInResult",
    "TwoFactorRequired",
]
