"""Audit log domain service."""

import traceback
from datetime import datetime, timezone
from uuid import uuid4

import logfire

from pms.domain.model import AuditLogEntry
from pms.domain.repository import AuditLogRepository
from pms.domain.value import AuditLogEntryId


class AuditLogService:
    """Domain service recording unhandled failures."""

    def __init__(self, audit_log_repository: AuditLogRepository) -> None:
        """Initialize audit log service.

        Args:
            audit_log_repository: Audit log repository
        """
        self.audit_log_repository = audit_log_repository

    async def record_exception(self, exc: BaseException) -> AuditLogEntry:
        """Persist an entry describing ``exc``.

        Args:
            exc: The unhandled exception

        Returns:
            The stored entry
        """
        exc_type = type(exc)
        entry = AuditLogEntry(
            id=AuditLogEntryId(uuid4()),
            timestamp=datetime.now(timezone.utc),
            message=str(exc),
            stack_trace="".join(traceback.format_tb(exc.__traceback__)) or None,
            exception_type=f"{exc_type.__module__}.{exc_type.__qualname__}",
        )
        with logfire.span(
            "audit_log_service.record_exception",
            entry_id=str(entry.id),
            exception_type=entry.exception_type,
        ):
            return await self.audit_log_repository.add(entry)

