"""Poll vote ORM model."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookclub.models.base import Base, utcnow


class Vote(Base):
    """One voter's vote for one option of a poll.

    ``single_choice`` mirrors ``not poll.multi_vote`` so the partial unique
    index can cap single-choice polls at one row per voter.
    """

    __tablename__ = "poll_votes"
    __table_args__ = (
        UniqueConstraint("poll_id", "voter_id", "option_index", name="uq_poll_votes_poll_voter_option"),
        Index(
            "uq_poll_votes_single_choice_voter",
            "poll_id",
            "voter_id",
            unique=True,
            sqlite_where=text("single_choice = 1"),
            postgresql_where=text("single_choice"),
        ),
        Index("ix_poll_votes_poll_id", "poll_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    poll_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("polls.id", ondelete="CASCADE"), nullable=False
    )
    option_index: Mapped[int] = mapped_column(Integer, nullable=False)
    voter_id: Mapped[str] = mapped_column(String(64), nullable=False)
    single_choice: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    voted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    poll = relationship("Poll", back_populates="votes")


__all__ = ["Vote"]
