"""Monthly winner ORM model."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from bookclub.models.base import Base, utcnow


class Winner(Base):
    """The book a community selected for a month."""

    __tablename__ = "poll_winners"
    __table_args__ = (
        Index("ix_poll_winners_community_month", "community_id", "month"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community_id: Mapped[str] = mapped_column(String(64), nullable=False)
    month: Mapped[str] = mapped_column(String(7), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    vote_count: Mapped[int] = mapped_column(Integer, nullable=False)
    poll_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("polls.id", ondelete="SET NULL"), nullable=True
    )
    announced_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


__all__ = ["Winner"]
