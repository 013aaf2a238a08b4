"""Audit record of an unhandled request failure."""

from datetime import datetime
from typing import Optional

from pms.domain.model.common import DomainModel
from pms.domain.value import AuditLogEntryId


class AuditLogEntry(DomainModel):
    """Append-only record describing an unhandled exception."""

    id: AuditLogEntryId
    timestamp: datetime  # UTC
    message: str
    stack_trace: Optional[str] = None
    exception_type: str
