"""Vote endpoint addressed by poll identifier."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from bookclub.api.deps import get_book_club
from bookclub.schemas import TallyRead, VoteRequest
from bookclub.services.book_club import BookClubService

router = APIRouter(prefix="/polls")


@router.post("/{poll_id}/votes", response_model=TallyRead)
def toggle_vote(
    poll_id: int,
    payload: VoteRequest,
    book_club: BookClubService = Depends(get_book_club),
) -> TallyRead:
    """Toggle the voter's vote for an option and return the updated tally.

    Multi-choice polls add or remove the single option. Single-choice polls
    move the voter's one vote, or withdraw it when the same option is sent again.
    """

    snapshot = book_club.vote(poll_id, payload.voter_id, payload.option_index)
    return TallyRead.model_validate(snapshot)


__all__ = ["router", "toggle_vote"]
