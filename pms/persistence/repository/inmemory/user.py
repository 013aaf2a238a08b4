"""In-memory user store for testing."""

from typing import Optional

from pms.domain.error import DuplicateUserError, NotFoundError
from pms.domain.model.user import User
from pms.domain.repository.user import UserEmailStore
from pms.domain.value import UserId


class InMemoryUserRepository(UserEmailStore):
    """In-memory implementation of UserEmailStore for testing.

    Enforces the same uniqueness rules as the database constraints.
    """

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return self._users.get(user_id)

    async def find_by_user_name(self, user_name: str) -> Optional[User]:
        """Find a user by user name (case-insensitive)."""
        normalized = self.normalize(user_name)
        for user in self._users.values():
            if user.normalized_user_name == normalized:
                return user
        return None

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by email (case-insensitive)."""
        normalized = self.normalize(email)
        for user in self._users.values():
            if user.normalized_email == normalized:
                return user
        return None

    async def create(self, user: User) -> User:
        """Insert a new user."""
        self._check_unique(user)
        self._users[user.id] = user
        return user

    async def update(self, user: User) -> User:
        """Persist changes to an existing user."""
        if user.id not in self._users:
            raise NotFoundError("User", str(user.id))
        self._check_unique(user)
        self._users[user.id] = user
        return user

    def all(self) -> list[User]:
        """All stored users."""
        return list(self._users.values())

    def _check_unique(self, user: User) -> None:
        for other in self._users.values():
            if other.id == user.id:
                continue
            if user.normalized_user_name and (
                other.normalized_user_name == user.normalized_user_name
            ):
                raise DuplicateUserError("user_name", user.user_name or "")
            if user.normalized_email and other.normalized_email == user.normalized_email:
                raise DuplicateUserError("email", user.email or "")
