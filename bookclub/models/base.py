"""Declarative base and shared column helpers for ORM models."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""


def utcnow() -> datetime:
    """Timezone-aware timestamp used as the Python-side column default."""
    return datetime.now(timezone.utc)


__all__ = ["Base", "utcnow"]
