"""Create facts table.

Revision ID: create_facts_001
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "create_facts_001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the facts table and its indexes."""
    op.create_table(
        "facts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("source", sa.String(100), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("urls", sa.JSON(), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("content_hash", sa.String(64), nullable=False),
        sa.Column("publish_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_served_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("serve_count", sa.Integer(), nullable=False),
        sa.Column("search_text", sa.Text(), server_default="", nullable=False),
        sa.Column("tag_text", sa.Text(), server_default="", nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_facts")),
        sa.UniqueConstraint("content_hash", name=op.f("uq_facts_content_hash")),
    )
    op.create_index(op.f("ix_facts_source"), "facts", ["source"])
    op.create_index(op.f("ix_facts_category"), "facts", ["category"])
    op.create_index(op.f("ix_facts_verified"), "facts", ["verified"])
    op.create_index(op.f("ix_facts_publish_date"), "facts", ["publish_date"])
    op.create_index("idx_fact_category_verified", "facts", ["category", "verified"])


def downgrade() -> None:
    """Drop the facts table."""
    op.drop_index("idx_fact_category_verified", table_name="facts")
    op.drop_index(op.f("ix_facts_publish_date"), table_name="facts")
    op.drop_index(op.f("ix_facts_verified"), table_name="facts")
    op.drop_index(op.f("ix_facts_category"), table_name="facts")
    op.drop_index(op.f("ix_facts_source"), table_name="facts")
    op.drop_table("facts")
