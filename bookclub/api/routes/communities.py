"""Nomination, poll lifecycle, winner and question endpoints scoped to a community."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from bookclub.api.deps import get_book_club
from bookclub.schemas import (
    FinalPollStartRequest,
    NominationCreate,
    NominationRead,
    NominationsCleared,
    PollClosureRead,
    PollRead,
    PollStartRequest,
    PollStatusRead,
    QuestionCreate,
    QuestionRead,
    WinnerRead,
)
from bookclub.services.book_club import BookClubService

router = APIRouter(prefix="/communities/{community_id}")


@router.post("/nominations", response_model=NominationRead, status_code=status.HTTP_201_CREATED)
def nominate_book(
    community_id: str,
    payload: NominationCreate,
    book_club: BookClubService = Depends(get_book_club),
) -> NominationRead:
    nomination = book_club.nominate(
        community_id, payload.title, payload.author, payload.user_id, month=payload.month
    )
    return NominationRead.model_validate(nomination)


@router.get("/nominations", response_model=list[NominationRead])
def list_nominations(
    community_id: str,
    month: str | None = Query(default=None, description="Month as YYYY-MM"),
    book_club: BookClubService = Depends(get_book_club),
) -> list[NominationRead]:
    nominations = book_club.list_nominations(community_id, month)
    return [NominationRead.model_validate(nomination) for nomination in nominations]


@router.delete("/nominations", response_model=NominationsCleared)
def clear_nominations(
    community_id: str,
    month: str | None = Query(default=None, description="Month as YYYY-MM"),
    book_club: BookClubService = Depends(get_book_club),
) -> NominationsCleared:
    resolved = book_club.resolve_month(month)
    removed = book_club.clear_nominations(community_id, resolved)
    return NominationsCleared(month=resolved, removed=removed)


@router.post("/polls", response_model=PollRead, status_code=status.HTTP_201_CREATED)
def start_poll(
    community_id: str,
    payload: PollStartRequest,
    book_club: BookClubService = Depends(get_book_club),
) -> PollRead:
    """Open the multi-choice nomination poll for the month."""

    poll = book_club.start_poll(community_id, payload.month, created_by=payload.created_by)
    return PollRead.model_validate(poll)


@router.post("/polls/final", response_model=PollRead, status_code=status.HTTP_201_CREATED)
def start_final_poll(
    community_id: str,
    payload: FinalPollStartRequest,
    book_club: BookClubService = Depends(get_book_club),
) -> PollRead:
    """Open the single-choice runoff between the top nomination poll results."""

    poll = book_club.start_final_poll(community_id, created_by=payload.created_by)
    return PollRead.model_validate(poll)


@router.get("/polls/active", response_model=PollStatusRead)
def poll_status(
    community_id: str,
    book_club: BookClubService = Depends(get_book_club),
) -> PollStatusRead:
    current = book_club.poll_status(community_id)
    if current is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active poll")
    return PollStatusRead.model_validate(current)


@router.post("/polls/active/close", response_model=PollClosureRead)
def close_poll(
    community_id: str,
    book_club: BookClubService = Depends(get_book_club),
) -> PollClosureRead:
    closure = book_club.close_poll(community_id)
    return PollClosureRead.model_validate(closure)


@router.get("/winners", response_model=list[WinnerRead])
def past_winners(
    community_id: str,
    book_club: BookClubService = Depends(get_book_club),
) -> list[WinnerRead]:
    return [WinnerRead.model_validate(winner) for winner in book_club.past_winners(community_id)]


@router.post("/questions", response_model=QuestionRead, status_code=status.HTTP_201_CREATED)
def submit_question(
    community_id: str,
    payload: QuestionCreate,
    book_club: BookClubService = Depends(get_book_club),
) -> QuestionRead:
    """Add a question for the meetup discussion of a book."""

    entry = book_club.submit_question(
        community_id, payload.book, payload.question, payload.user_id, payload.user_name
    )
    return QuestionRead.model_validate(entry)


@router.get("/questions", response_model=list[QuestionRead])
def list_questions(
    community_id: str,
    book: str = Query(..., description="Book title; matched without regard to case"),
    book_club: BookClubService = Depends(get_book_club),
) -> list[QuestionRead]:
    return [QuestionRead.model_validate(entry) for entry in book_club.list_questions(community_id, book)]


__all__ = [
    "clear_nominations",
    "close_poll",
    "list_nominations",
    "list_questions",
    "nominate_book",
    "past_winners",
    "poll_status",
    "router",
    "start_final_poll",
    "start_poll",
    "submit_question",
]
