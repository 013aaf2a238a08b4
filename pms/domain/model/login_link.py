"""External login linked to a local user."""

from datetime import datetime, timezone

from pydantic import Field

from pms.domain.model.common import DomainModel
from pms.domain.value import LoginLinkId, UserId


class LoginLink(DomainModel):
    """Association of (provider, provider key) with a local user.

    At most one user per (provider, provider_key). Links are only ever
    added, never updated.
    """

    id: LoginLinkId
    user_id: UserId
    provider: str
    provider_key: str
    provider_display_name: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
