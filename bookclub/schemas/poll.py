"""Schemas for poll, vote and winner endpoints."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PollStartRequest(BaseModel):
    created_by: str = Field(..., max_length=64, description="Operator starting the poll")
    month: str | None = Field(default=None, description="Month as YYYY-MM; defaults to the current month")


class FinalPollStartRequest(BaseModel):
    created_by: str = Field(..., max_length=64, description="Operator starting the final poll")


class PollRead(BaseModel):
    """Serialized representation of a poll."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    community_id: str
    month: str
    phase: int
    question: str
    options: list[str]
    multi_vote: bool
    active: bool
    parent_poll_id: int | None
    created_by: str
    created_at: datetime


class RankedOptionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    option_index: int
    title: str
    votes: int


class VoteRequest(BaseModel):
    voter_id: str = Field(..., max_length=64)
    option_index: int = Field(..., description="Zero-based index into the poll options")


class TallyRead(BaseModel):
    """Vote counts returned after every vote toggle."""

    model_config = ConfigDict(from_attributes=True)

    poll_id: int
    counts: dict[int, int]
    ranking: list[RankedOptionRead]
    voter_count: int
    total_votes: int


class WinnerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    community_id: str
    month: str
    title: str
    vote_count: int
    poll_id: int | None
    announced_at: datetime


class PollStatusRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    poll: PollRead
    ranking: list[RankedOptionRead]


class PollClosureRead(PollStatusRead):
    winner: WinnerRead | None = None


__all__ = [
    "FinalPollStartRequest",
    "PollClosureRead",
    "PollRead",
    "PollStartRequest",
    "PollStatusRead",
    "RankedOptionRead",
    "TallyRead",
    "VoteRequest",
    "WinnerRead",
]
