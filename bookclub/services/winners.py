"""Archive of monthly poll winners."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookclub.db.transactions import serializable_transaction
from bookclub.models import Winner

logger = logging.getLogger(__name__)


class WinnerArchive:
    """Stores one row per closed final poll.

    ``record`` does not check for an existing winner for the month; closing a
    final poll twice is a caller error and would add a second row.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def record(
        self,
        community_id: str,
        month: str,
        title: str,
        vote_count: int,
        *,
        poll_id: int | None = None,
    ) -> Winner:
        winner = Winner(
            community_id=community_id,
            month=month,
            title=title,
            vote_count=vote_count,
            poll_id=poll_id,
        )
        with serializable_transaction(self._session):
            self._session.add(winner)
            self._session.flush()

        logger.info("Recorded winner '%s' (%s votes) for %s/%s", title, vote_count, community_id, month)
        return winner

    def list(self, community_id: str) -> list[Winner]:
        statement = (
            select(Winner)
            .where(Winner.community_id == community_id)
            .order_by(Winner.month.desc(), Winner.announced_at.desc())
        )
        return list(self._session.scalars(statement))


__all__ = ["WinnerArchive"]
