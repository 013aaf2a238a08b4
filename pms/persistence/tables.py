"""SQLAlchemy table definitions for the identity store.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("user_name", String(256), nullable=True),
    Column("normalized_user_name", String(256), nullable=True),
    Column("email", String(256), nullable=True),
    Column("normalized_email", String(256), nullable=True),
    Column("email_confirmed", Boolean, nullable=False, server_default="false"),
    Column("security_stamp", String(64), nullable=False),
    Column("lockout_enabled", Boolean, nullable=False, server_default="false"),
    Column("lockout_end", TIMESTAMP(timezone=True), nullable=True),
    Column("access_failed_count", Integer, nullable=False, server_default="0"),
    Column("two_factor_enabled", Boolean, nullable=False, server_default="false"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    # Uniqueness is enforced on the normalized forms (case-insensitive)
    UniqueConstraint("normalized_user_name", name="uq_users_normalized_user_name"),
    UniqueConstraint("normalized_email", name="uq_users_normalized_email"),
)

# ============================================================================
# USER LOGINS TABLE (external login links)
# ============================================================================
user_logins_table = Table(
    "user_logins",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("provider", String(128), nullable=False),
    Column("provider_key", String(128), nullable=False),
    Column("provider_display_name", String(128), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("provider", "provider_key", name="uq_user_logins_provider_key"),
)

Index("idx_user_logins_user_id", user_logins_table.c.user_id)

# ============================================================================
# AUDIT LOGS TABLE (unhandled request failures)
# ============================================================================
audit_logs_table = Table(
    "audit_logs",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("timestamp", TIMESTAMP(timezone=True), nullable=False),
    Column("message", Text, nullable=False),
    Column("stack_trace", Text, nullable=True),
    Column("exception_type", String(512), nullable=False),
)

Index("idx_audit_logs_timestamp", audit_logs_table.c.timestamp)
