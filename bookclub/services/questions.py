"""Discussion questions members submit for a book's meetup."""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookclub.core.errors import ValidationError
from bookclub.db.transactions import serializable_transaction
from bookclub.models import BookQuestion

logger = logging.getLogger(__name__)

MAX_QUESTION_LENGTH = 500


def normalize_book_title(book: str | None) -> str:
    """Lookup key for a book: trimmed and lower-cased."""
    return (book or "").strip().lower()


class QuestionStore:
    def __init__(self, session: Session) -> None:
        self._session = session

    def submit(
        self,
        community_id: str,
        book: str,
        question: str,
        user_id: str,
        *,
        user_name: str | None = None,
        now: datetime | None = None,
    ) -> BookQuestion:
        book_key = normalize_book_title(book)
        if not book_key:
            raise ValidationError("A book title is required")
        text = (question or "").strip()
        if not text:
            raise ValidationError("A question is required")
        if len(text) > MAX_QUESTION_LENGTH:
            raise ValidationError(
                f"Questions are limited to {MAX_QUESTION_LENGTH} characters"
            )
        submitter = (user_id or "").strip()
        if not submitter:
            raise ValidationError("A submitter is required")

        entry = BookQuestion(
            community_id=community_id,
            book=book_key,
            question=text,
            submitted_by=submitter,
            submitter_name=(user_name or "").strip() or submitter,
        )
        if now is not None:
            entry.submitted_at = now

        with serializable_transaction(self._session):
            self._session.add(entry)
            self._session.flush()

        self._session.refresh(entry)
        logger.info("Question %s submitted for '%s' in %s", entry.id, book_key, community_id)
        return entry

    def list(self, community_id: str, book: str) -> list[BookQuestion]:
        """Questions for the book in submission order; the title match ignores case."""

        book_key = normalize_book_title(book)
        if not book_key:
            raise ValidationError("A book title is required")
        statement = (
            select(BookQuestion)
            .where(
                BookQuestion.community_id == community_id,
                BookQuestion.book == book_key,
            )
            .order_by(BookQuestion.submitted_at, BookQuestion.id)
        )
        return list(self._session.scalars(statement))


__all__ = ["MAX_QUESTION_LENGTH", "QuestionStore", "normalize_book_title"]
