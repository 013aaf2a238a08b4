"""User store interfaces."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from pms.domain.model.user import User
from pms.domain.value import UserId


class UserRepository(ABC):
    """Store for local user accounts.

    Implementations must enforce uniqueness of the normalized user name and
    raise ``DuplicateUserError`` from ``create``/``update`` when violated.
    """

    @staticmethod
    def normalize(value: str) -> str:
        """Normalized lookup key (upper-cased) for names and emails."""
        return value.strip().upper()

    async def set_user_name(self, user: User, user_name: str) -> User:
        """Return a copy of ``user`` with user name and its normalized form set."""
        return user.evolve(
            user_name=user_name,
            normalized_user_name=self.normalize(user_name),
        )

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_user_name(self, user_name: str) -> Optional[User]:
        """Find a user by user name (case-insensitive).

        Args:
            user_name: The user name to look up

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a new user.

        Args:
            user: The user to create

        Returns:
            The created user

        Raises:
            DuplicateUserError: If a unique constraint is violated
        """
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Persist changes to an existing user.

        Args:
            user: The user to update

        Returns:
            The updated user

        Raises:
            NotFoundError: If the user does not exist
            DuplicateUserError: If a unique constraint is violated
        """
        pass


class UserEmailStore(UserRepository):
    """User store that also manages email addresses.

    Implementations must enforce uniqueness of the normalized email.
    """

    async def set_email(self, user: User, email: str) -> User:
        """Return a copy of ``user`` with email set and marked unconfirmed."""
        return user.evolve(
            email=email,
            normalized_email=self.normalize(email),
            email_confirmed=False,
        )

    async def set_email_confirmed(self, user: User, confirmed: bool) -> User:
        """Return a copy of ``user`` with the confirmation flag set."""
        return user.evolve(email_confirmed=confirmed)

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by email (case-insensitive exact match).

        Args:
            email: The email address to look up

        Returns:
            The user if found, None otherwise
        """
        pass


@dataclass(frozen=True)
class EmailStoreCapability:
    """Whether the configured user store manages emails.

    Exactly one of ``EmailStoreSupported`` or ``EmailStoreUnsupported``.
    """

    store_type: type[UserRepository]


@dataclass(frozen=True)
class EmailStoreSupported(EmailStoreCapability):
    """The configured user store manages emails."""


@dataclass(frozen=True)
class EmailStoreUnsupported(EmailStoreCapability):
    """The configured user store cannot manage emails."""

    reason: str = ""


def detect_email_capability(store_type: type[UserRepository]) -> EmailStoreCapability:
    """Determine once whether a user store implementation supports emails.

    Args:
        store_type: Configured user store class

    Returns:
        Capability variant for the store
    """
    if issubclass(store_type, UserEmailStore):
        return EmailStoreSupported(store_type=store_type)
    return EmailStoreUnsupported(
        store_type=store_type,
        reason=(
            f"{store_type.__name__} does not implement UserEmailStore; "
            "external login requires a user store with email support."
        ),
    )
