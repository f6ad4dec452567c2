"""Book nomination ORM model."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from bookclub.models.base import Base, utcnow


class Nomination(Base):
    """A book proposed for a community's monthly selection."""

    __tablename__ = "book_nominations"
    __table_args__ = (
        Index("ix_book_nominations_community_month", "community_id", "month"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community_id: Mapped[str] = mapped_column(String(64), nullable=False)
    month: Mapped[str] = mapped_column(String(7), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    nominated_by: Mapped[str] = mapped_column(String(64), nullable=False)
    nominated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    @property
    def option_label(self) -> str:
        """Text shown as the poll option for this nomination."""
        return f"{self.title} by {self.author}"


__all__ = ["Nomination"]
