"""One final poll per nomination poll; discussion questions."""
from __future__ import annotations

from collections.abc import Iterable

import sqlalchemy as sa
from alembic import op

revision = "20261017_02"
down_revision = "20261017_01"
branch_labels = None
depends_on: Iterable[str] | None = None


def upgrade() -> None:  # noqa: D401
    """Cap each nomination poll at one final poll and add book_questions."""

    op.create_index("uq_polls_parent_poll_id", "polls", ["parent_poll_id"], unique=True)

    op.create_table(
        "book_questions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("community_id", sa.String(length=64), nullable=False),
        sa.Column("book", sa.String(length=255), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("submitted_by", sa.String(length=64), nullable=False),
        sa.Column("submitter_name", sa.String(length=64), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_book_questions_community_book", "book_questions", ["community_id", "book"]
    )


def downgrade() -> None:  # noqa: D401
    """Drop book_questions and the final poll lineage index."""

    op.drop_index("ix_book_questions_community_book", table_name="book_questions")
    op.drop_table("book_questions")
    op.drop_index("uq_polls_parent_poll_id", table_name="polls")
