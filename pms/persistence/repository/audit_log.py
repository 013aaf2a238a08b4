"""PostgreSQL implementation of AuditLog repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pms.domain.model import AuditLogEntry
from pms.domain.repository import AuditLogRepository
from pms.persistence.mappers import audit_log_entry_to_dict, row_to_audit_log_entry
from pms.persistence.tables import audit_logs_table


class PostgresAuditLogRepository(AuditLogRepository):
    """PostgreSQL implementation of AuditLogRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def add(self, entry: AuditLogEntry) -> AuditLogEntry:
        """Append an entry."""
        stmt = audit_logs_table.insert().values(**audit_log_entry_to_dict(entry))
        await self.session.execute(stmt)
        await self.session.flush()
        return entry

    async def find_recent(self, limit: int = 50) -> list[AuditLogEntry]:
        """Most recent entries, newest first."""
        stmt = (
            select(audit_logs_table)
            .order_by(audit_logs_table.c.timestamp.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [row_to_audit_log_entry(dict(row)) for row in result.mappings().all()]
