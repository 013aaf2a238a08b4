"""Login link repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from pms.domain.model.login_link import LoginLink
from pms.domain.value import UserId


class LoginLinkRepository(ABC):
    """Repository for links between external logins and local users."""

    @abstractmethod
    async def find_by_provider(
        self, provider: str, provider_key: str
    ) -> Optional[LoginLink]:
        """Find the link for a provider key.

        Args:
            provider: Provider name
            provider_key: Provider-scoped user key

        Returns:
            The link if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all_by_user_id(self, user_id: UserId) -> list[LoginLink]:
        """Get all logins linked to a user, oldest first.

        Args:
            user_id: The user's unique identifier

        Returns:
            List of links (may be empty)
        """
        pass

    @abstractmethod
    async def add(self, link: LoginLink) -> LoginLink:
        """Add a new link.

        Args:
            link: The link to add

        Returns:
            The added link

        Raises:
            DuplicateLoginError: If the provider key is already linked
        """
        pass
