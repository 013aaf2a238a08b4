"""In-memory login link repository for testing."""

from typing import Optional

from pms.domain.error import DuplicateLoginError
from pms.domain.model.login_link import LoginLink
from pms.domain.repository.login_link import LoginLinkRepository
from pms.domain.value import UserId


class InMemoryLoginLinkRepository(LoginLinkRepository):
    """In-memory implementation of LoginLinkRepository for testing."""

    def __init__(self) -> None:
        self._links: dict[tuple[str, str], LoginLink] = {}

    async def find_by_provider(
        self, provider: str, provider_key: str
    ) -> Optional[LoginLink]:
        """Find the link for a provider key."""
        return self._links.get((provider, provider_key))

    async def find_all_by_user_id(self, user_id: UserId) -> list[LoginLink]:
        """Get all logins linked to a user, oldest first."""
        links = [link for link in self._links.values() if link.user_id == user_id]
        return sorted(links, key=lambda link: link.created_at)

    async def add(self, link: LoginLink) -> LoginLink:
        """Add a new link."""
        key = (link.provider, link.provider_key)
        if key in self._links:
            raise DuplicateLoginError(link.provider, link.provider_key)
        self._links[key] = link
        return link

    def all(self) -> list[LoginLink]:
        """All stored links."""
        return list(self._links.values())
