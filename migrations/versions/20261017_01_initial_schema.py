"""Initial schema for nominations, polls, votes and winners."""
from __future__ import annotations

from collections.abc import Iterable

import sqlalchemy as sa
from alembic import op

revision = "20261017_01"
down_revision = None
branch_labels = None
depends_on: Iterable[str] | None = None


def upgrade() -> None:  # noqa: D401
    """Create the poll engine tables and their uniqueness guarantees."""

    op.create_table(
        "book_nominations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("community_id", sa.String(length=64), nullable=False),
        sa.Column("month", sa.String(length=7), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("author", sa.String(length=255), nullable=False),
        sa.Column("nominated_by", sa.String(length=64), nullable=False),
        sa.Column("nominated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_book_nominations_community_month", "book_nominations", ["community_id", "month"]
    )

    op.create_table(
        "polls",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("community_id", sa.String(length=64), nullable=False),
        sa.Column("month", sa.String(length=7), nullable=False),
        sa.Column("phase", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("question", sa.String(length=255), nullable=False),
        sa.Column("options", sa.JSON(), nullable=False),
        sa.Column("multi_vote", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("parent_poll_id", sa.Integer(), nullable=True),
        sa.Column("created_by", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["parent_poll_id"], ["polls.id"], ondelete="RESTRICT"),
        sa.CheckConstraint("phase IN (1, 2)", name="ck_polls_phase"),
    )
    op.create_index("ix_polls_community_id", "polls", ["community_id"])
    op.create_index(
        "uq_polls_one_active_per_community",
        "polls",
        ["community_id"],
        unique=True,
        sqlite_where=sa.text("active = 1"),
        postgresql_where=sa.text("active"),
    )

    op.create_table(
        "poll_votes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("poll_id", sa.Integer(), nullable=False),
        sa.Column("option_index", sa.Integer(), nullable=False),
        sa.Column("voter_id", sa.String(length=64), nullable=False),
        sa.Column("single_choice", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("voted_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["poll_id"], ["polls.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "poll_id", "voter_id", "option_index", name="uq_poll_votes_poll_voter_option"
        ),
    )
    op.create_index("ix_poll_votes_poll_id", "poll_votes", ["poll_id"])
    op.create_index(
        "uq_poll_votes_single_choice_voter",
        "poll_votes",
        ["poll_id", "voter_id"],
        unique=True,
        sqlite_where=sa.text("single_choice = 1"),
        postgresql_where=sa.text("single_choice"),
    )

    op.create_table(
        "poll_winners",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("community_id", sa.String(length=64), nullable=False),
        sa.Column("month", sa.String(length=7), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("vote_count", sa.Integer(), nullable=False),
        sa.Column("poll_id", sa.Integer(), nullable=True),
        sa.Column("announced_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["poll_id"], ["polls.id"], ondelete="SET NULL"),
    )
    op.create_index(
        "ix_poll_winners_community_month", "poll_winners", ["community_id", "month"]
    )


def downgrade() -> None:  # noqa: D401
    """Drop the poll engine tables."""

    op.drop_index("ix_poll_winners_community_month", table_name="poll_winners")
    op.drop_table("poll_winners")

    op.drop_index("uq_poll_votes_single_choice_voter", table_name="poll_votes")
    op.drop_index("ix_poll_votes_poll_id", table_name="poll_votes")
    op.drop_table("poll_votes")

    op.drop_index("uq_polls_one_active_per_community", table_name="polls")
    op.drop_index("ix_polls_community_id", table_name="polls")
    op.drop_table("polls")

    op.drop_index("ix_book_nominations_community_month", table_name="book_nominations")
    op.drop_table("book_nominations")
