"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from pms.domain.model import AuditLogEntry, LoginLink, User
from pms.domain.value import AuditLogEntryId, LoginLinkId, UserId


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(_uuid(row["id"])),
        user_name=row.get("user_name"),
        normalized_user_name=row.get("normalized_user_name"),
        email=row.get("email"),
        normalized_email=row.get("normalized_email"),
        email_confirmed=row["email_confirmed"],
        security_stamp=row["security_stamp"],
        lockout_enabled=row["lockout_enabled"],
        lockout_end=row.get("lockout_end"),
        access_failed_count=row["access_failed_count"],
        two_factor_enabled=row["two_factor_enabled"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict."""
    return user.model_dump()


def row_to_login_link(row: Dict[str, Any]) -> LoginLink:
    """Convert database row to LoginLink domain model."""
    return LoginLink(
        id=LoginLinkId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        provider=row["provider"],
        provider_key=row["provider_key"],
        provider_display_name=row["provider_display_name"],
        created_at=row["created_at"],
    )


def login_link_to_dict(link: LoginLink) -> Dict[str, Any]:
    """Convert LoginLink domain model to database dict."""
    return link.model_dump()


def row_to_audit_log_entry(row: Dict[str, Any]) -> AuditLogEntry:
    """Convert database row to AuditLogEntry domain model."""
    return AuditLogEntry(
        id=AuditLogEntryId(_uuid(row["id"])),
        timestamp=row["timestamp"],
        message=row["message"],
        stack_trace=row.get("stack_trace"),
        exception_type=row["exception_type"],
    )


def audit_log_entry_to_dict(entry: AuditLogEntry) -> Dict[str, Any]:
    """Convert AuditLogEntry domain model to database dict."""
    return entry.model_dump()
