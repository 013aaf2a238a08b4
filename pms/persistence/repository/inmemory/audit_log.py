"""In-memory audit log repository for testing."""

from pms.domain.model.audit_log import AuditLogEntry
from pms.domain.repository.audit_log import AuditLogRepository


class InMemoryAuditLogRepository(AuditLogRepository):
    """In-memory implementation of AuditLogRepository for testing."""

    def __init__(self) -> None:
        self._entries: list[AuditLogEntry] = []

    async def add(self, entry: AuditLogEntry) -> AuditLogEntry:
        """Append an entry."""
        self._entries.append(entry)
        return entry

    async def find_recent(self, limit: int = 50) -> list[AuditLogEntry]:
        """Most recent entries, newest first."""
        entries = sorted(self._entries, key=lambda e: e.timestamp, reverse=True)
        return entries[:limit]
