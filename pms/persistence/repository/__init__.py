"""PostgreSQL repository implementations."""

from pms.persistence.repository.audit_log import PostgresAuditLogRepository
from pms.persistence.repository.login_link import PostgresLoginLinkRepository
from pms.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresAuditLogRepository",
    "PostgresLoginLinkRepository",
    "PostgresUserRepository",
]
