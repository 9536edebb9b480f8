"""Create gallery entries table.

Revision ID: 20261001_0001
Revises:
Create Date: 2026-10-01 00:00:00.000000
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "20261001_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "gallery_entries",
        sa.Column("id", sa.BigInteger(), sa.Identity(), nullable=False),
        sa.Column("prompt", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column(
            "metadata",
            sa.JSON(),
            nullable=False,
            server_default=sa.text("'{}'"),
        ),
        sa.Column("chat_id", sa.String(length=64), nullable=True),
        sa.Column("file_id", sa.String(length=255), nullable=True),
        sa.Column("bot_token", sa.String(length=255), nullable=True),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_gallery_entries_timestamp",
        "gallery_entries",
        ["timestamp"],
    )
    op.create_index(
        "ix_gallery_entries_file_id",
        "gallery_entries",
        ["file_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_gallery_entries_file_id", table_name="gallery_entries")
    op.drop_index("ix_gallery_entries_timestamp", table_name="gallery_entries")
    op.drop_table("gallery_entries")
