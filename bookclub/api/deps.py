"""Common dependencies for API routes."""
from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from bookclub.services.book_club import BookClubService


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a session from the factory built by the application factory."""

    session: Session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def get_book_club(request: Request, session: Session = Depends(get_db_session)) -> BookClubService:
    return BookClubService(session, settings=request.app.state.settings)


__all__ = ["get_book_club", "get_db_session"]
