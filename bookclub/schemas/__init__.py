"""Pydantic schemas for API payloads."""

from .nomination import NominationCreate, NominationRead, NominationsCleared
from .poll import (
    FinalPollStartRequest,
    PollClosureRead,
    PollRead,
    PollStartRequest,
    PollStatusRead,
    RankedOptionRead,
    TallyRead,
    VoteRequest,
    WinnerRead,
)
from .question import QuestionCreate, QuestionRead

__all__ = [
    "FinalPollStartRequest",
    "NominationCreate",
    "NominationRead",
    "NominationsCleared",
    "PollClosureRead",
    "PollRead",
    "PollStartRequest",
    "PollStatusRead",
    "QuestionCreate",
    "QuestionRead",
    "RankedOptionRead",
    "TallyRead",
    "VoteRequest",
    "WinnerRead",
]
