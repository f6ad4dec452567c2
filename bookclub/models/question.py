"""Discussion question ORM model."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bookclub.models.base import Base, utcnow


class BookQuestion(Base):
    """A member's question for a book's meetup discussion.

    ``book`` holds the normalised title (trimmed, lower case) so that lookups
    match however members capitalised the title.
    """

    __tablename__ = "book_questions"
    __table_args__ = (
        Index("ix_book_questions_community_book", "community_id", "book"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community_id: Mapped[str] = mapped_column(String(64), nullable=False)
    book: Mapped[str] = mapped_column(String(255), nullable=False)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    submitted_by: Mapped[str] = mapped_column(String(64), nullable=False)
    submitter_name: Mapped[str] = mapped_column(String(64), nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


__all__ = ["BookQuestion"]
