"""Poll ORM model."""
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookclub.models.base import Base, utcnow


class PollPhase(int, enum.Enum):
    NOMINATION = 1
    FINAL = 2


class Poll(Base):
    """A round of voting over an ordered list of options.

    ``active`` is the only field that changes after creation and it only ever
    goes from true to false. A nomination poll is the parent of at most one
    final poll.
    """

    __tablename__ = "polls"
    __table_args__ = (
        CheckConstraint("phase IN (1, 2)", name="ck_polls_phase"),
        Index("ix_polls_community_id", "community_id"),
        Index("uq_polls_parent_poll_id", "parent_poll_id", unique=True),
        Index(
            "uq_polls_one_active_per_community",
            "community_id",
            unique=True,
            sqlite_where=text("active = 1"),
            postgresql_where=text("active"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community_id: Mapped[str] = mapped_column(String(64), nullable=False)
    month: Mapped[str] = mapped_column(String(7), nullable=False)
    phase: Mapped[int] = mapped_column(Integer, nullable=False, default=PollPhase.NOMINATION.value)
    question: Mapped[str] = mapped_column(String(255), nullable=False)
    options: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    multi_vote: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    parent_poll_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("polls.id", ondelete="RESTRICT"), nullable=True
    )
    created_by: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    parent = relationship("Poll", remote_side=[id])
    votes = relationship("Vote", back_populates="poll", cascade="all, delete-orphan")

    def has_option(self, option_index: int) -> bool:
        return 0 <= option_index < len(self.options)


__all__ = ["Poll", "PollPhase"]
