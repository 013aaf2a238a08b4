"""Audit log repository interface."""

from abc import ABC, abstractmethod

from pms.domain.model.audit_log import AuditLogEntry


class AuditLogRepository(ABC):
    """Append-only store of audit entries."""

    @abstractmethod
    async def add(self, entry: AuditLogEntry) -> AuditLogEntry:
        """Append an entry.

        Args:
            entry: The entry to store

        Returns:
            The stored entry
        """
        pass

    @abstractmethod
    async def find_recent(self, limit: int = 50) -> list[AuditLogEntry]:
        """Most recent entries, newest first.

        Args:
            limit: Maximum number of entries

        Returns:
            List of entries (may be empty)
        """
        pass
