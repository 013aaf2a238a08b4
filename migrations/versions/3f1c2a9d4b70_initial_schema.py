"""initial_schema

Create the identity store schema:
- Users (local accounts, email confirmation, lockout)
- User Logins (external login links, one per provider key)
- Audit Logs (unhandled request failures)

Revision ID: 3f1c2a9d4b70
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d4b70"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_name", sa.String(256), nullable=True),
        sa.Column("normalized_user_name", sa.String(256), nullable=True),
        sa.Column("email", sa.String(256), nullable=True),
        sa.Column("normalized_email", sa.String(256), nullable=True),
        sa.Column(
            "email_confirmed", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column("security_stamp", sa.String(64), nullable=False),
        sa.Column(
            "lockout_enabled", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column("lockout_end", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "access_failed_count", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column(
            "two_factor_enabled", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        # Case-insensitive uniqueness through the normalized columns
        sa.UniqueConstraint(
            "normalized_user_name", name="uq_users_normalized_user_name"
        ),
        sa.UniqueConstraint("normalized_email", name="uq_users_normalized_email"),
    )

    # ========================================================================
    # USER_LOGINS table (external login links)
    # ========================================================================
    op.create_table(
        "user_logins",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("provider", sa.String(128), nullable=False),
        sa.Column("provider_key", sa.String(128), nullable=False),
        sa.Column("provider_display_name", sa.String(128), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "provider", "provider_key", name="uq_user_logins_provider_key"
        ),
    )
    op.create_index("idx_user_logins_user_id", "user_logins", ["user_id"])

    # ========================================================================
    # AUDIT_LOGS table
    # ========================================================================
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("timestamp", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("stack_trace", sa.Text(), nullable=True),
        sa.Column("exception_type", sa.String(512), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_audit_logs_timestamp", "audit_logs", ["timestamp"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_audit_logs_timestamp", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("idx_user_logins_user_id", table_name="user_logins")
    op.drop_table("user_logins")
    op.drop_table("users")
