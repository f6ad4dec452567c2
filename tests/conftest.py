from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookclub.api.deps import get_db_session
from bookclub.core.config import Settings
from bookclub.main import create_application
from bookclub.models import Base, Poll, PollPhase, Vote
from bookclub.services.book_club import BookClubService

DATABASE_URL = "sqlite+pysqlite://"
COMMUNITY_ID = "community-1"
MONTH = "2026-01"


engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        database_url=DATABASE_URL,
        enable_metrics=True,
        enable_tracing=False,
        timezone="UTC",
        _env_file=None,
    )


@pytest.fixture()
def db_session() -> Iterator[Session]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session
    session.rollback()
    session.close()


@pytest.fixture()
def book_club(db_session: Session, settings: Settings) -> BookClubService:
    return BookClubService(
        db_session,
        settings=settings,
        clock=lambda: datetime(2026, 1, 15, 12, 0, tzinfo=UTC),
    )


@pytest.fixture()
def make_poll(db_session: Session) -> Callable[..., Poll]:
    """Insert a poll directly, optionally with vote counts per option."""

    def _make_poll(
        options: list[str],
        *,
        counts: list[int] | None = None,
        phase: PollPhase = PollPhase.NOMINATION,
        active: bool = True,
        community_id: str = COMMUNITY_ID,
        month: str = MONTH,
        parent_poll_id: int | None = None,
    ) -> Poll:
        multi_vote = phase is PollPhase.NOMINATION
        poll = Poll(
            community_id=community_id,
            month=month,
            phase=phase.value,
            question="Test poll",
            options=options,
            multi_vote=multi_vote,
            active=active,
            parent_poll_id=parent_poll_id,
            created_by="admin",
        )
        db_session.add(poll)
        db_session.flush()
        voter = 0
        for index, total in enumerate(counts or []):
            for _ in range(total):
                voter += 1
                db_session.add(
                    Vote(
                        poll_id=poll.id,
                        option_index=index,
                        voter_id=f"voter-{voter}",
                        single_choice=not multi_vote,
                    )
                )
        db_session.commit()
        db_session.refresh(poll)
        return poll

    return _make_poll


@pytest.fixture()
def client(db_session: Session, settings: Settings) -> Iterator[TestClient]:
    application = create_application(settings, session_factory=TestingSessionLocal)

    def override_get_db() -> Iterator[Session]:
        try:
            yield db_session
        finally:
            db_session.rollback()

    application.dependency_overrides[get_db_session] = override_get_db

    with TestClient(application) as test_client:
        yield test_client

    application.dependency_overrides.pop(get_db_session, None)
