"""PostgreSQL implementation of the user store."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pms.domain.error import DuplicateUserError, NotFoundError
from pms.domain.model import User
from pms.domain.repository import UserEmailStore
from pms.domain.value import UserId
from pms.persistence.mappers import row_to_user, user_to_dict
from pms.persistence.tables import users_table


class PostgresUserRepository(UserEmailStore):
    """PostgreSQL implementation of UserEmailStore."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: User ID to look up

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_user_name(self, user_name: str) -> Optional[User]:
        """Find a user by user name (case-insensitive)."""
        stmt = select(users_table).where(
            users_table.c.normalized_user_name == self.normalize(user_name)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by email (case-insensitive)."""
        stmt = select(users_table).where(
            users_table.c.normalized_email == self.normalize(email)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def create(self, user: User) -> User:
        """Insert a new user.

        Raises:
            DuplicateUserError: If user name or email is already taken
        """
        stmt = users_table.insert().values(**user_to_dict(user))
        await self._execute_unique(stmt, user)
        return user

    async def update(self, user: User) -> User:
        """Persist changes to an existing user.

        Raises:
            NotFoundError: If the user does not exist
            DuplicateUserError: If user name or email is already taken
        """
        stmt = (
            users_table.update()
            .where(users_table.c.id == user.id)
            .values(**user_to_dict(user))
        )
        result = await self._execute_unique(stmt, user)
        if result.rowcount == 0:
            raise NotFoundError("User", str(user.id))
        return user

    async def _execute_unique(self, stmt, user: User):
        # Savepoint keeps the request transaction usable after a violation
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(stmt)
        except IntegrityError as e:
            if "uq_users_normalized_email" in str(e.orig):
                raise DuplicateUserError("email", user.email or "")
            raise DuplicateUserError("user_name", user.user_name or "")
        await self.session.flush()
        return result
