"""Create users table

Revision ID: 001_users_table
Revises: None
Create Date: 2026-10-16

Unique: slug, email, public_address, nonce, google_id.
Postgres unique constraints ignore NULLs, so the optional identity fields can
be absent on any number of rows.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001_users_table"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True, comment="Generated uuid4 hex, or the passwordless provider uid"),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("public_address", sa.String(255), nullable=True),
        sa.Column("nonce", sa.INTEGER(), nullable=True),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("avatar_url", sa.String(2048), nullable=True),
        sa.Column("google_id", sa.String(255), nullable=True),
        sa.Column("google_access_token", sa.String(2048), nullable=True),
        sa.Column("google_refresh_token", sa.String(2048), nullable=True),
        sa.Column(
            "is_signedup_via_google",
            sa.BOOLEAN(),
            server_default="false",
            nullable=False,
        ),
    )
    op.create_index("ix_users_slug", "users", ["slug"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_public_address", "users", ["public_address"], unique=True)
    op.create_index("ix_users_nonce", "users", ["nonce"], unique=True)
    op.create_index("ix_users_google_id", "users", ["google_id"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_users_google_id", table_name="users")
    op.drop_index("ix_users_nonce", table_name="users")
    op.drop_index("ix_users_public_address", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_slug", table_name="users")
    op.drop_table("users")
