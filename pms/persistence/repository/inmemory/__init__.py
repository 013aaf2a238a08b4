"""In-memory repository implementations for testing."""

from .audit_log import InMemoryAuditLogRepository
from .login_link import InMemoryLoginLinkRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryAuditLogRepository",
    "InMemoryLoginLinkRepository",
    "InMemoryUserRepository",
]
