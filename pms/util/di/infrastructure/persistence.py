"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from pms.config import Settings
from pms.domain.repository import (
    AuditLogRepository,
    EmailStoreCapability,
    LoginLinkRepository,
    UserEmailStore,
    detect_email_capability,
)
from pms.persistence.database import create_engine, create_session_factory
from pms.persistence.repository import (
    PostgresAuditLogRepository,
    PostgresLoginLinkRepository,
    PostgresUserRepository,
)
from pms.util.di.base import ProviderBase
from pms.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """User, login link and audit log storage."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """PostgreSQL user, login link and audit stores."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide the shared engine, disposing its pool on container close."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()
        logfire.info("Database engine disposed")

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.APP)
    def get_email_store_capability(self) -> EmailStoreCapability:
        """Provide the email capability of the configured user store."""
        return detect_email_capability(PostgresUserRepository)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """One session per request, committed when the request scope closes.

        A user row and its login link created in the same request land in
        one transaction; any exception rolls both back.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.info("Session committed")
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_user_store(self, session: AsyncSession) -> UserEmailStore:
        """Provide user store."""
        return PostgresUserRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_login_link_repository(self, session: AsyncSession) -> LoginLinkRepository:
        """Provide LoginLink repository."""
        return PostgresLoginLinkRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_audit_log_repository(self, session: AsyncSession) -> AuditLogRepository:
        """Provide AuditLog repository."""
        return PostgresAuditLogRepository(session)
