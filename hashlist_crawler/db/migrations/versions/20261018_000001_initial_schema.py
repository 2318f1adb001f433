"""Initial hashlist crawler schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-18

This migration adds:
- torrents: classified torrents, unique per info hash
- ingested_pages: ledger of hashlist pages already handled
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "torrents",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("info_hash", sa.String(64), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("source", sa.String(50), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("size", sa.String(32), nullable=False),
        sa.Column("seeders", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("leechers", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("ingested_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_torrents_info_hash", "torrents", ["info_hash"], unique=True)
    op.create_index("ix_torrents_source", "torrents", ["source"])
    op.create_index("ix_torrents_category", "torrents", ["category"])

    op.create_table(
        "ingested_pages",
        sa.Column("name", sa.String(512), primary_key=True),
        sa.Column("ingested_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("ingested_pages")
    op.drop_index("ix_torrents_category", table_name="torrents")
    op.drop_index("ix_torrents_source", table_name="torrents")
    op.drop_index("ix_torrents_info_hash", table_name="torrents")
    op.drop_table("torrents")
