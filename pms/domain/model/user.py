"""Local user account.

Users sign in through external providers; each account can have several
linked logins (see ``LoginLink``).
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import Field

from pms.domain.model.common import DomainModel
from pms.domain.value import UserId


def _now() -> datetime:
    return datetime.now(timezone.utc)


class User(DomainModel):
    """Local user account.

    ``user_name`` and ``email`` are set through the user store's setters,
    which also maintain the upper-cased normalized forms used for
    case-insensitive lookup and uniqueness.
    """

    id: UserId = Field(default_factory=lambda: UserId(uuid4()))
    user_name: Optional[str] = None
    normalized_user_name: Optional[str] = None
    email: Optional[str] = None
    normalized_email: Optional[str] = None
    email_confirmed: bool = False
    security_stamp: str = Field(default_factory=lambda: uuid4().hex)
    lockout_enabled: bool = False
    lockout_end: Optional[datetime] = None
    access_failed_count: int = Field(default=0, ge=0)
    two_factor_enabled: bool = False
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    def is_locked_out(self, now: datetime | None = None) -> bool:
        """Whether the account is locked out at ``now``."""
        if not self.lockout_enabled or self.lockout_end is None:
            return False
        return self.lockout_end > (now or _now())
