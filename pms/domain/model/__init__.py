"""Domain model entities."""

from pms.domain.model.audit_log import AuditLogEntry
from pms.domain.model.email import EmailJob
from pms.domain.model.login_link import LoginLink
from pms.domain.model.user import User

__all__ = [
    "AuditLogEntry",
    "EmailJob",
    "LoginLink",
    "User",
]
