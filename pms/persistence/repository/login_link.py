"""PostgreSQL implementation of LoginLink repository."""

from typing import Optional

from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pms.domain.error import DuplicateLoginError
from pms.domain.model import LoginLink
from pms.domain.repository import LoginLinkRepository
from pms.domain.value import UserId
from pms.persistence.mappers import login_link_to_dict, row_to_login_link
from pms.persistence.tables import user_logins_table


class PostgresLoginLinkRepository(LoginLinkRepository):
    """PostgreSQL implementation of LoginLinkRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_provider(
        self, provider: str, provider_key: str
    ) -> Optional[LoginLink]:
        """Find the link for a provider key."""
        stmt = select(user_logins_table).where(
            and_(
                user_logins_table.c.provider == provider,
                user_logins_table.c.provider_key == provider_key,
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_login_link(dict(row)) if row else None

    async def find_all_by_user_id(self, user_id: UserId) -> list[LoginLink]:
        """Get all logins linked to a user, oldest first."""
        stmt = (
            select(user_logins_table)
            .where(user_logins_table.c.user_id == user_id)
            .order_by(user_logins_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_login_link(dict(row)) for row in result.mappings().all()]

    async def add(self, link: LoginLink) -> LoginLink:
        """Add a new link.

        Raises:
            DuplicateLoginError: If the provider key is already linked
        """
        stmt = user_logins_table.insert().values(**login_link_to_dict(link))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError:
            raise DuplicateLoginError(link.provider, link.provider_key)
        await self.session.flush()
        return link
