"""Schemas for nomination endpoints."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NominationCreate(BaseModel):
    """Payload for nominating a book."""

    title: str = Field(..., max_length=255, description="Book title, e.g. Dune")
    author: str = Field(..., max_length=255, description="Book author, e.g. Frank Herbert")
    user_id: str = Field(..., max_length=64, description="Member submitting the nomination")
    month: str | None = Field(
        default=None, description="Target month as YYYY-MM; defaults to the current month"
    )


class NominationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    community_id: str
    month: str
    title: str
    author: str
    nominated_by: str
    nominated_at: datetime
    option_label: str


class NominationsCleared(BaseModel):
    month: str
    removed: int


__all__ = ["NominationCreate", "NominationRead", "NominationsCleared"]
