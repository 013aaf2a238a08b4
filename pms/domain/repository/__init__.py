"""Repository interfaces.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from pms.domain.repository.audit_log import AuditLogRepository
from pms.domain.repository.login_link import LoginLinkRepository
from pms.domain.repository.user import (
    EmailStoreCapability,
    EmailStoreSupported,
    EmailStoreUnsupported,
    UserEmailStore,
    UserRepository,
    detect_email_capability,
)

__all__ = [
    "AuditLogRepository",
    "EmailStoreCapability",
    "EmailStoreSupported",
    "EmailStoreUnsupported",
    "LoginLinkRepository",
    "UserEmailStore",
    "UserRepository",
    "detect_email_capability",
]
