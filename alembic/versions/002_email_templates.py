"""Create email_templates table

Revision ID: 002_email_templates
Revises: 001_users_table
Create Date: 2026-10-16

Rows are seeded at bootstrap by saas_app.main (insert_default_templates).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "002_email_templates"
down_revision: Union[str, None] = "001_users_table"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "email_templates",
        sa.Column("name", sa.String(64), primary_key=True),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("email_templates")
