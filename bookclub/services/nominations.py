"""Per-community, per-month book nominations."""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from bookclub.core.errors import ValidationError
from bookclub.core.months import validate_month
from bookclub.db.transactions import serializable_transaction
from bookclub.models import Nomination

logger = logging.getLogger(__name__)


def _required(value: str | None, field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"A book {field} is required")
    return cleaned


class NominationStore:
    """Create, list and clear nominations. Identical titles are stored as-is."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def submit(
        self,
        community_id: str,
        month: str,
        title: str,
        author: str,
        user_id: str,
        *,
        now: datetime | None = None,
    ) -> Nomination:
        month = validate_month(month)
        nomination = Nomination(
            community_id=community_id,
            month=month,
            title=_required(title, "title"),
            author=_required(author, "author"),
            nominated_by=_required(user_id, "nominator"),
        )
        if now is not None:
            nomination.nominated_at = now

        with serializable_transaction(self._session):
            self._session.add(nomination)
            self._session.flush()

        self._session.refresh(nomination)
        logger.info(
            "Nomination %s '%s' submitted for %s/%s",
            nomination.id,
            nomination.option_label,
            community_id,
            month,
        )
        return nomination

    def list(self, community_id: str, month: str) -> list[Nomination]:
        statement = (
            select(Nomination)
            .where(Nomination.community_id == community_id, Nomination.month == month)
            .order_by(Nomination.nominated_at, Nomination.id)
        )
        return list(self._session.scalars(statement))

    def clear(self, community_id: str, month: str) -> int:
        """Delete every nomination for the month and return how many were removed."""

        with serializable_transaction(self._session):
            result = self._session.execute(
                delete(Nomination).where(
                    Nomination.community_id == community_id, Nomination.month == month
                )
            )
        removed = int(result.rowcount or 0)
        logger.info("Cleared %s nominations for %s/%s", removed, community_id, month)
        return removed


__all__ = ["NominationStore"]
