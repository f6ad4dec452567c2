"""Vote recording with multi-choice and single-choice toggle semantics."""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookclub.core.errors import ConflictError, NotFoundError, ValidationError
from bookclub.db.transactions import serializable_transaction
from bookclub.models import Poll, Vote
from bookclub.services.tally import TallyEngine, TallySnapshot

logger = logging.getLogger(__name__)


class ToggleAction(str, enum.Enum):
    ADDED = "added"
    REMOVED = "removed"
    SWITCHED = "switched"


@dataclass(slots=True, frozen=True)
class ToggleResult:
    """Outcome of a toggle together with the tally read after commit."""

    action: ToggleAction
    phase: int
    tally: TallySnapshot


class VoteLedger:
    """Adds and removes vote rows for a single poll at a time.

    All writes for one toggle happen inside one serializable transaction, and
    the unique constraints on ``poll_votes`` reject any duplicate a concurrent
    toggle by the same voter might produce.
    """

    def __init__(self, session: Session, *, tally: TallyEngine | None = None) -> None:
        self._session = session
        self._tally = tally or TallyEngine(session)

    def toggle_vote(self, poll_id: int, voter_id: str, option_index: int) -> TallySnapshot:
        return self.toggle(poll_id, voter_id, option_index).tally

    def toggle(self, poll_id: int, voter_id: str, option_index: int) -> ToggleResult:
        voter = (voter_id or "").strip()
        if not voter:
            raise ValidationError("A voter identifier is required")

        with serializable_transaction(self._session):
            poll = self._session.get(Poll, poll_id, populate_existing=True)
            if poll is None:
                raise NotFoundError(f"Poll {poll_id} was not found")
            if not poll.active:
                raise ConflictError("This poll has ended")
            if not poll.has_option(option_index):
                raise ValidationError(
                    f"Option {option_index} is out of range for a poll with {len(poll.options)} options"
                )

            try:
                if poll.multi_vote:
                    action = self._toggle_multi(poll, voter, option_index)
                else:
                    action = self._toggle_single(poll, voter, option_index)
                self._session.flush()
            except IntegrityError as exc:
                raise ConflictError("A concurrent vote by this voter was already recorded") from exc
            phase = poll.phase

        logger.info(
            "Vote %s on poll %s option %s by %s", action.value, poll_id, option_index, voter
        )
        poll = self._session.get(Poll, poll_id)
        return ToggleResult(action=action, phase=phase, tally=self._tally.snapshot(poll))

    def _toggle_multi(self, poll: Poll, voter: str, option_index: int) -> ToggleAction:
        removed = self._session.execute(
            delete(Vote).where(
                Vote.poll_id == poll.id,
                Vote.voter_id == voter,
                Vote.option_index == option_index,
            )
        )
        if removed.rowcount:
            return ToggleAction.REMOVED

        self._session.add(
            Vote(poll_id=poll.id, voter_id=voter, option_index=option_index, single_choice=False)
        )
        return ToggleAction.ADDED

    def _toggle_single(self, poll: Poll, voter: str, option_index: int) -> ToggleAction:
        existing = self._session.scalars(
            select(Vote.option_index).where(Vote.poll_id == poll.id, Vote.voter_id == voter)
        ).all()

        # Core DELETE runs immediately, so the old row is gone before the INSERT flushes.
        self._session.execute(
            delete(Vote).where(Vote.poll_id == poll.id, Vote.voter_id == voter)
        )
        if option_index in existing:
            return ToggleAction.REMOVED

        self._session.add(
            Vote(poll_id=poll.id, voter_id=voter, option_index=option_index, single_choice=True)
        )
        return ToggleAction.SWITCHED if existing else ToggleAction.ADDED

    def current_votes(self, poll_id: int) -> dict[int, int]:
        poll = self._session.get(Poll, poll_id)
        if poll is None:
            raise NotFoundError(f"Poll {poll_id} was not found")
        return self._tally.counts(poll)

    def voter_choices(self, poll_id: int, voter_id: str) -> list[int]:
        """Option indexes the voter currently holds on the poll, ascending."""

        statement = (
            select(Vote.option_index)
            .where(Vote.poll_id == poll_id, Vote.voter_id == voter_id)
            .order_by(Vote.option_index)
        )
        return list(self._session.scalars(statement))


__all__ = ["ToggleAction", "ToggleResult", "VoteLedger"]
