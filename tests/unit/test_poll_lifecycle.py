from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookclub.core.config import Settings
from bookclub.core.errors import ConflictError, NotFoundError, PreconditionError
from bookclub.models import Poll, PollPhase, Winner
from bookclub.services.nominations import NominationStore
from bookclub.services.polls import PollLifecycleManager

COMMUNITY_ID = "community-1"
MONTH = "2026-01"


@pytest.fixture()
def manager(db_session: Session, settings: Settings) -> PollLifecycleManager:
    return PollLifecycleManager(db_session, settings=settings)


def _nominate(db_session: Session, *titles: str, month: str = MONTH) -> None:
    store = NominationStore(db_session)
    for index, title in enumerate(titles):
        store.submit(COMMUNITY_ID, month, title, f"Author {index}", f"u{index}")


def _poll_count(db_session: Session) -> int:
    return int(db_session.scalar(select(func.count()).select_from(Poll)))


def test_start_phase1_builds_options_from_nominations(db_session: Session, manager) -> None:
    _nominate(db_session, "Dune", "1984")

    poll = manager.start_phase1(COMMUNITY_ID, MONTH, "admin")

    assert poll.options == ["Dune by Author 0", "1984 by Author 1"]
    assert poll.phase == PollPhase.NOMINATION
    assert poll.multi_vote is True
    assert poll.active is True
    assert poll.parent_poll_id is None
    assert poll.question == "Book Selection — January 2026"


def test_start_phase1_requires_two_nominations(db_session: Session, manager) -> None:
    _nominate(db_session, "Dune")

    with pytest.raises(PreconditionError):
        manager.start_phase1(COMMUNITY_ID, MONTH, "admin")

    assert _poll_count(db_session) == 0


def test_start_phase1_rejects_second_active_poll(db_session: Session, manager) -> None:
    _nominate(db_session, "Dune", "1984")
    _nominate(db_session, "Emma", "Ulysses", month="2026-02")
    manager.start_phase1(COMMUNITY_ID, MONTH, "admin")

    with pytest.raises(ConflictError):
        manager.start_phase1(COMMUNITY_ID, "2026-02", "admin")

    assert _poll_count(db_session) == 1


def test_active_poll_is_scoped_to_community(db_session: Session, manager, make_poll) -> None:
    make_poll(["A", "B"], community_id="community-2")
    _nominate(db_session, "Dune", "1984")

    poll = manager.start_phase1(COMMUNITY_ID, MONTH, "admin")

    assert poll.active is True
    assert manager.active_poll("community-2").id != poll.id


def test_storage_rejects_two_active_polls_per_community(db_session: Session, make_poll) -> None:
    make_poll(["A", "B"])

    db_session.add(
        Poll(
            community_id=COMMUNITY_ID,
            month=MONTH,
            phase=1,
            question="Duplicate",
            options=["A", "B"],
            multi_vote=True,
            active=True,
            created_by="admin",
        )
    )
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_close_without_active_poll_is_not_found(manager) -> None:
    with pytest.raises(NotFoundError):
        manager.close_poll(COMMUNITY_ID)


def test_close_phase1_never_records_a_winner(db_session: Session, manager, make_poll) -> None:
    poll = make_poll(["A", "B", "C"], counts=[1, 2, 0])

    closure = manager.close_poll(COMMUNITY_ID)

    assert closure.poll.id == poll.id
    assert closure.poll.active is False
    assert closure.winner is None
    assert [entry.option_index for entry in closure.ranking] == [1, 0, 2]
    assert db_session.scalar(select(func.count()).select_from(Winner)) == 0


def test_start_phase2_requires_closed_phase1(manager, make_poll) -> None:
    with pytest.raises(PreconditionError):
        manager.start_phase2(COMMUNITY_ID, "admin")

    make_poll(["A", "B", "C"], counts=[1, 1, 1])
    with pytest.raises(PreconditionError):
        manager.start_phase2(COMMUNITY_ID, "admin")


def test_start_phase2_conflicts_with_active_poll(manager, make_poll) -> None:
    make_poll(["A", "B", "C"], counts=[1, 1, 1], active=False)
    make_poll(["X", "Y"])

    with pytest.raises(ConflictError):
        manager.start_phase2(COMMUNITY_ID, "admin")


def test_start_phase2_needs_three_options_even_with_votes(manager, make_poll) -> None:
    make_poll(["A", "B"], counts=[4, 3], active=False)

    with pytest.raises(PreconditionError):
        manager.start_phase2(COMMUNITY_ID, "admin")


def test_start_phase2_needs_three_voted_options(manager, make_poll) -> None:
    make_poll(["A", "B", "C", "D"], counts=[4, 3, 0, 0], active=False)

    with pytest.raises(PreconditionError):
        manager.start_phase2(COMMUNITY_ID, "admin")


def test_start_phase2_uses_ranked_top_three(manager, make_poll) -> None:
    parent = make_poll(["A", "B", "C", "D"], counts=[1, 3, 2, 1], active=False, month="2025-12")

    poll = manager.start_phase2(COMMUNITY_ID, "admin")

    assert poll.options == ["B", "C", "A"]
    assert poll.multi_vote is False
    assert poll.phase == PollPhase.FINAL
    assert poll.parent_poll_id == parent.id
    assert poll.month == "2025-12"
    assert poll.question == "Final Vote — December 2025"


def test_start_phase2_uses_most_recent_closed_phase1(manager, make_poll) -> None:
    make_poll(["Old A", "Old B", "Old C"], counts=[1, 1, 1], active=False)
    latest = make_poll(["New A", "New B", "New C"], counts=[1, 2, 3], active=False)

    poll = manager.start_phase2(COMMUNITY_ID, "admin")

    assert poll.parent_poll_id == latest.id
    assert poll.options == ["New C", "New B", "New A"]


def test_close_phase2_records_lowest_index_on_tie(db_session: Session, manager, make_poll) -> None:
    parent = make_poll(["A", "B", "C"], counts=[1, 1, 1], active=False)
    final = make_poll(
        ["B", "A", "C"], counts=[3, 3, 1], phase=PollPhase.FINAL, parent_poll_id=parent.id
    )

    closure = manager.close_poll(COMMUNITY_ID)

    assert closure.poll.id == final.id
    assert closure.winner is not None
    assert closure.winner.title == "B"
    assert closure.winner.vote_count == 3
    assert closure.winner.month == MONTH
    assert closure.winner.poll_id == final.id


def test_status_reports_active_poll_ranking(manager, make_poll) -> None:
    assert manager.status(COMMUNITY_ID) is None

    poll = make_poll(["A", "B"], counts=[0, 2])
    status = manager.status(COMMUNITY_ID)

    assert status is not None
    assert status.poll.id == poll.id
    assert [entry.title for entry in status.ranking] == ["B", "A"]


def test_start_phase2_refuses_to_rerun_a_finished_final(db_session: Session, manager, make_poll) -> None:
    make_poll(["A", "B", "C"], counts=[1, 1, 1], active=False)
    final = manager.start_phase2(COMMUNITY_ID, "admin")
    manager.close_poll(COMMUNITY_ID)

    with pytest.raises(PreconditionError, match="already run"):
        manager.start_phase2(COMMUNITY_ID, "admin")

    assert _poll_count(db_session) == 2
    winners = db_session.scalars(select(Winner)).all()
    assert [winner.poll_id for winner in winners] == [final.id]


def test_start_phase2_with_final_still_open_is_a_conflict(manager, make_poll) -> None:
    make_poll(["A", "B", "C"], counts=[1, 1, 1], active=False)
    manager.start_phase2(COMMUNITY_ID, "admin")

    with pytest.raises(ConflictError):
        manager.start_phase2(COMMUNITY_ID, "admin")


def test_storage_allows_one_final_poll_per_parent(db_session: Session, make_poll) -> None:
    parent = make_poll(["A", "B", "C"], counts=[1, 1, 1], active=False)
    make_poll(["A", "B", "C"], phase=PollPhase.FINAL, active=False, parent_poll_id=parent.id)

    with pytest.raises(IntegrityError):
        make_poll(["A", "B", "C"], phase=PollPhase.FINAL, parent_poll_id=parent.id)
    db_session.rollback()
