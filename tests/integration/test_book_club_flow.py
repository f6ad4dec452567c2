from __future__ import annotations

import pytest

from bookclub.core.errors import ConflictError, PreconditionError, ValidationError
from bookclub.models import PollPhase
from bookclub.services.book_club import BookClubService

COMMUNITY_ID = "community-1"


def _vote(book_club: BookClubService, poll_id: int, counts: dict[int, int]) -> None:
    voter = 0
    for option_index, total in counts.items():
        for _ in range(total):
            voter += 1
            book_club.vote(poll_id, f"member-{voter}", option_index)


def test_nominations_become_phase1_options(book_club: BookClubService) -> None:
    book_club.nominate(COMMUNITY_ID, "Dune", "Herbert", "u1")
    book_club.nominate(COMMUNITY_ID, "1984", "Orwell", "u2")

    poll = book_club.start_poll(COMMUNITY_ID, created_by="admin")

    assert poll.month == "2026-01"
    assert poll.options == ["Dune by Herbert", "1984 by Orwell"]
    assert poll.multi_vote is True
    assert poll.active is True


def test_phase1_close_records_no_winner(book_club: BookClubService) -> None:
    book_club.nominate(COMMUNITY_ID, "Dune", "Herbert", "u1")
    book_club.nominate(COMMUNITY_ID, "1984", "Orwell", "u2")
    poll = book_club.start_poll(COMMUNITY_ID, created_by="admin")

    book_club.vote(poll.id, "u1", 0)
    tally = book_club.vote(poll.id, "u2", 1)
    assert tally.counts == {0: 1, 1: 1}

    closure = book_club.close_poll(COMMUNITY_ID)

    assert closure.winner is None
    assert closure.poll.active is False
    assert book_club.past_winners(COMMUNITY_ID) == []
    assert book_club.poll_status(COMMUNITY_ID) is None


def _run_phase1(book_club: BookClubService, counts: dict[int, int]) -> int:
    for title, author in [("Dune", "Herbert"), ("1984", "Orwell"), ("Emma", "Austen")]:
        book_club.nominate(COMMUNITY_ID, title, author, "u1")
    poll = book_club.start_poll(COMMUNITY_ID, created_by="admin")
    _vote(book_club, poll.id, counts)
    book_club.close_poll(COMMUNITY_ID)
    return poll.id


def test_final_poll_takes_ranked_finalists(book_club: BookClubService) -> None:
    parent_id = _run_phase1(book_club, {0: 1, 1: 3, 2: 2})

    final = book_club.start_final_poll(COMMUNITY_ID, created_by="admin")

    assert final.options == ["1984 by Orwell", "Emma by Austen", "Dune by Herbert"]
    assert final.multi_vote is False
    assert final.phase == PollPhase.FINAL
    assert final.parent_poll_id == parent_id
    assert final.month == "2026-01"


def test_final_close_records_tie_winner_by_lowest_index(book_club: BookClubService) -> None:
    _run_phase1(book_club, {0: 1, 1: 3, 2: 2})
    final = book_club.start_final_poll(COMMUNITY_ID, created_by="admin")
    _vote(book_club, final.id, {0: 3, 1: 3, 2: 1})

    closure = book_club.close_poll(COMMUNITY_ID)

    assert closure.winner is not None
    assert closure.winner.title == "1984 by Orwell"
    assert closure.winner.vote_count == 3
    assert closure.winner.month == "2026-01"
    assert [winner.title for winner in book_club.past_winners(COMMUNITY_ID)] == ["1984 by Orwell"]


def test_final_poll_requires_three_voted_options(book_club: BookClubService) -> None:
    _run_phase1(book_club, {0: 2, 1: 1})

    with pytest.raises(PreconditionError):
        book_club.start_final_poll(COMMUNITY_ID, created_by="admin")

    assert book_club.poll_status(COMMUNITY_ID) is None


def test_single_choice_vote_moves_between_finalists(book_club: BookClubService) -> None:
    _run_phase1(book_club, {0: 1, 1: 1, 2: 1})
    final = book_club.start_final_poll(COMMUNITY_ID, created_by="admin")

    book_club.vote(final.id, "reader", 0)
    tally = book_club.vote(final.id, "reader", 2)

    assert tally.counts == {0: 0, 1: 0, 2: 1}
    assert tally.voter_count == 1


def test_closed_poll_rejects_votes(book_club: BookClubService) -> None:
    book_club.nominate(COMMUNITY_ID, "Dune", "Herbert", "u1")
    book_club.nominate(COMMUNITY_ID, "1984", "Orwell", "u2")
    poll = book_club.start_poll(COMMUNITY_ID, created_by="admin")
    book_club.close_poll(COMMUNITY_ID)

    with pytest.raises(ConflictError):
        book_club.vote(poll.id, "late", 0)


def test_explicit_month_overrides_clock(book_club: BookClubService) -> None:
    book_club.nominate(COMMUNITY_ID, "Dune", "Herbert", "u1", month="2026-03")

    assert book_club.list_nominations(COMMUNITY_ID) == []
    assert len(book_club.list_nominations(COMMUNITY_ID, "2026-03")) == 1
    assert book_club.clear_nominations(COMMUNITY_ID, "2026-03") == 1


def test_past_winners_newest_month_first(book_club: BookClubService) -> None:
    book_club.archive.record(COMMUNITY_ID, "2025-11", "Emma", 4)
    book_club.archive.record(COMMUNITY_ID, "2026-01", "Dune", 5)
    book_club.archive.record(COMMUNITY_ID, "2025-12", "1984", 2)
    book_club.archive.record("community-2", "2026-02", "Ulysses", 1)

    months = [winner.month for winner in book_club.past_winners(COMMUNITY_ID)]

    assert months == ["2026-01", "2025-12", "2025-11"]


def test_month_gets_exactly_one_winner(book_club: BookClubService) -> None:
    _run_phase1(book_club, {0: 1, 1: 1, 2: 1})
    final = book_club.start_final_poll(COMMUNITY_ID, created_by="admin")
    _vote(book_club, final.id, {2: 1})
    book_club.close_poll(COMMUNITY_ID)

    with pytest.raises(PreconditionError):
        book_club.start_final_poll(COMMUNITY_ID, created_by="admin")

    winners = book_club.past_winners(COMMUNITY_ID)
    assert [(winner.month, winner.title) for winner in winners] == [("2026-01", "Emma by Austen")]


def test_questions_are_grouped_by_book_title(book_club: BookClubService) -> None:
    book_club.submit_question(COMMUNITY_ID, "Dune ", "Who is the real villain?", "u1", "Ada")
    book_club.submit_question(COMMUNITY_ID, "DUNE", "Would you live on Arrakis?", "u2")
    book_club.submit_question(COMMUNITY_ID, "Emma", "Is Emma likeable?", "u1")
    book_club.submit_question("community-2", "Dune", "Elsewhere", "u3")

    questions = book_club.list_questions(COMMUNITY_ID, "dune")

    assert [entry.question for entry in questions] == [
        "Who is the real villain?",
        "Would you live on Arrakis?",
    ]
    assert [entry.submitter_name for entry in questions] == ["Ada", "u2"]
    assert {entry.book for entry in questions} == {"dune"}


def test_blank_question_is_rejected(book_club: BookClubService) -> None:
    with pytest.raises(ValidationError):
        book_club.submit_question(COMMUNITY_ID, "Dune", "   ", "u1")
