"""Async PostgreSQL engine and sessions for the user and audit stores."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pms.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the application engine.

    Args:
        settings: Application settings with database URL and pool sizing

    Returns:
        Async engine shared by all request scopes
    """
    db = settings.database
    return create_async_engine(
        settings.database_url,
        echo=db.echo,
        pool_pre_ping=True,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_recycle=db.pool_recycle_seconds,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the per-request session factory.

    Each request scope opens one session and commits it once, so a user row
    and its login link are written in the same transaction.
    """
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
