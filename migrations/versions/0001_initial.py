"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-16 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


class GUID(sa.TypeDecorator):
    impl = sa.CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(sa.CHAR(36))


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("username", sa.String(length=150), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False, server_default="subscriber"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "role_capabilities",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("role", sa.String(length=50), nullable=False),
        sa.Column("capability", sa.String(length=100), nullable=False),
        sa.UniqueConstraint("role", "capability", name="uq_role_capability"),
    )
    op.create_index("ix_role_capabilities_role", "role_capabilities", ["role"], unique=False)

    op.create_table(
        "options",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("option_name", sa.String(length=191), nullable=False),
        sa.Column("option_value", sa.JSON(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_options_option_name", "options", ["option_name"], unique=True)

    op.create_table(
        "user_meta",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("user_id", GUID(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("meta_key", sa.String(length=191), nullable=False),
        sa.Column("meta_value", sa.JSON(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "meta_key", name="uq_user_meta_key"),
    )
    op.create_index("ix_user_meta_user_id", "user_meta", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_user_meta_user_id", table_name="user_meta")
    op.drop_table("user_meta")
    op.drop_index("ix_options_option_name", table_name="options")
    op.drop_table("options")
    op.drop_index("ix_role_capabilities_role", table_name="role_capabilities")
    op.drop_table("role_capabilities")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
