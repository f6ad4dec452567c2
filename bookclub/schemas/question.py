"""Schemas for discussion question endpoints."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class QuestionCreate(BaseModel):
    book: str = Field(..., max_length=255, description="Title of the book being discussed")
    question: str = Field(..., max_length=500)
    user_id: str = Field(..., max_length=64)
    user_name: str | None = Field(default=None, max_length=64, description="Display name")


class QuestionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    community_id: str
    book: str
    question: str
    submitted_by: str
    submitter_name: str
    submitted_at: datetime


__all__ = ["QuestionCreate", "QuestionRead"]
