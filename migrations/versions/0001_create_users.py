"""create users table keyed by wallet address

Revision ID: 0001_create_users
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_create_users"
down_revision = None
branch_labels = None
depends_on = None


TIMESTAMP_COLUMNS = ("created_at", "updated_at")


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    if inspector.has_table("users"):
        # tables from the pre-timestamp deployment only carry wallet_address and score
        existing_columns = {col["name"] for col in inspector.get_columns("users")}
        for name in TIMESTAMP_COLUMNS:
            if name not in existing_columns:
                op.add_column("users", sa.Column(name, sa.DateTime(timezone=True), nullable=True))
        return

    op.create_table(
        "users",
        sa.Column("wallet_address", sa.String(length=255), primary_key=True),
        sa.Column("score", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("score >= 0", name="ck_users_score_non_negative"),
    )


def downgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    if inspector.has_table("users"):
        op.drop_table("users")
