"""Seed a demo community with nominations for the current month."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from bookclub.core.config import get_settings
from bookclub.db.session import create_db_engine, create_session_factory, get_session
from bookclub.models import Base
from bookclub.services.book_club import BookClubService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_COMMUNITY_ID = "community-demo"
DEMO_NOMINATIONS = [
    ("Dune", "Frank Herbert", "member-1"),
    ("1984", "George Orwell", "member-2"),
    ("The Left Hand of Darkness", "Ursula K. Le Guin", "member-3"),
    ("Piranesi", "Susanna Clarke", "member-4"),
]


def seed(session: Session) -> None:
    """Add the demo nominations unless the month already has some."""

    book_club = BookClubService(session)
    existing = book_club.list_nominations(DEMO_COMMUNITY_ID)
    if existing:
        logger.info("Community %s already has %s nominations", DEMO_COMMUNITY_ID, len(existing))
        return

    for title, author, user_id in DEMO_NOMINATIONS:
        nomination = book_club.nominate(DEMO_COMMUNITY_ID, title, author, user_id)
        logger.info("Added nomination %s", nomination.option_label)


def main() -> None:
    settings = get_settings()
    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)
    with get_session(create_session_factory(settings, engine)) as session:
        seed(session)


if __name__ == "__main__":
    main()
