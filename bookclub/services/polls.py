"""Poll lifecycle: the nomination round, the final round and closing."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookclub.core.config import Settings, get_settings
from bookclub.core.errors import ConflictError, NotFoundError, PreconditionError
from bookclub.core.months import format_month_display, validate_month
from bookclub.db.transactions import serializable_transaction
from bookclub.models import Poll, PollPhase, Winner
from bookclub.services.nominations import NominationStore
from bookclub.services.tally import RankedOption, TallyEngine
from bookclub.services.winners import WinnerArchive

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PollClosure:
    """Result of closing the active poll."""

    poll: Poll
    ranking: list[RankedOption]
    winner: Winner | None = None


@dataclass(slots=True, frozen=True)
class PollStatus:
    poll: Poll
    ranking: list[RankedOption]


def nomination_question(month: str) -> str:
    return f"Book Selection — {format_month_display(month)}"


def final_question(month: str) -> str:
    return f"Final Vote — {format_month_display(month)}"


class PollLifecycleManager:
    """Drives a community through ``phase 1 active → closed → phase 2 active → closed``.

    At most one poll per community is active at any time. The check is done
    here for a readable error, and the partial unique index on ``polls``
    rejects a second active poll if two starts race.
    """

    def __init__(
        self,
        session: Session,
        *,
        nominations: NominationStore | None = None,
        tally: TallyEngine | None = None,
        archive: WinnerArchive | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._session = session
        self._nominations = nominations or NominationStore(session)
        self._tally = tally or TallyEngine(session)
        self._archive = archive or WinnerArchive(session)
        self._settings = settings or get_settings()

    def active_poll(self, community_id: str) -> Poll | None:
        statement = select(Poll).where(Poll.community_id == community_id, Poll.active.is_(True))
        return self._session.scalars(statement.execution_options(populate_existing=True)).first()

    def latest_closed_nomination_poll(self, community_id: str) -> Poll | None:
        statement = (
            select(Poll)
            .where(
                Poll.community_id == community_id,
                Poll.phase == PollPhase.NOMINATION.value,
                Poll.active.is_(False),
            )
            .order_by(Poll.id.desc())
            .limit(1)
        )
        return self._session.scalars(statement).first()

    def _ensure_no_active_poll(self, community_id: str) -> None:
        existing = self.active_poll(community_id)
        if existing is not None:
            logger.warning(
                "Rejected poll start for %s: poll %s is still active", community_id, existing.id
            )
            raise ConflictError("There is already an active poll. Close it first.")

    def final_poll_for(self, parent_poll_id: int) -> Poll | None:
        statement = select(Poll).where(Poll.parent_poll_id == parent_poll_id)
        return self._session.scalars(statement).first()

    def _insert_poll(self, poll: Poll) -> Poll:
        self._session.add(poll)
        try:
            self._session.flush()
        except IntegrityError as exc:
            raise ConflictError(
                "Another poll was started for this community at the same time"
            ) from exc
        return poll

    def start_phase1(self, community_id: str, month: str, created_by: str) -> Poll:
        month = validate_month(month)
        minimum = self._settings.phase1_min_nominations

        with serializable_transaction(self._session):
            self._ensure_no_active_poll(community_id)

            nominations = self._nominations.list(community_id, month)
            if len(nominations) < minimum:
                raise PreconditionError(
                    f"At least {minimum} nominations are needed to start a poll for "
                    f"{format_month_display(month)}. Current: {len(nominations)}"
                )

            poll = self._insert_poll(
                Poll(
                    community_id=community_id,
                    month=month,
                    phase=PollPhase.NOMINATION.value,
                    question=nomination_question(month),
                    options=[nomination.option_label for nomination in nominations],
                    multi_vote=True,
                    active=True,
                    created_by=created_by,
                )
            )

        self._session.refresh(poll)
        logger.info(
            "Started nomination poll %s for %s/%s with %s options",
            poll.id,
            community_id,
            month,
            len(poll.options),
        )
        return poll

    def start_phase2(self, community_id: str, created_by: str) -> Poll:
        size = self._settings.final_poll_size

        with serializable_transaction(self._session):
            parent = self.latest_closed_nomination_poll(community_id)
            if parent is None:
                raise PreconditionError(
                    "No completed nomination poll found. Start one and close it first."
                )

            self._ensure_no_active_poll(community_id)

            if self.final_poll_for(parent.id) is not None:
                raise PreconditionError(
                    f"The final poll for {format_month_display(parent.month)} has already run. "
                    "Close a new nomination poll first."
                )

            if len(parent.options) < size:
                raise PreconditionError(
                    f"The nomination poll only had {len(parent.options)} books; "
                    f"the final poll needs at least {size}."
                )

            finalists = self._tally.select_top_n(parent.id, size)
            with_votes = [entry for entry in finalists if entry.votes > 0]
            if len(with_votes) < size:
                raise PreconditionError(
                    f"Only {len(with_votes)} books received votes; "
                    f"the final poll needs at least {size} books with votes."
                )

            poll = self._insert_poll(
                Poll(
                    community_id=community_id,
                    month=parent.month,
                    phase=PollPhase.FINAL.value,
                    question=final_question(parent.month),
                    options=[entry.title for entry in finalists],
                    multi_vote=False,
                    active=True,
                    parent_poll_id=parent.id,
                    created_by=created_by,
                )
            )

        self._session.refresh(poll)
        logger.info(
            "Started final poll %s for %s/%s from nomination poll %s",
            poll.id,
            community_id,
            poll.month,
            poll.parent_poll_id,
        )
        return poll

    def close_poll(self, community_id: str) -> PollClosure:
        with serializable_transaction(self._session):
            poll = self.active_poll(community_id)
            if poll is None:
                raise NotFoundError("No active poll found for this community")

            closed = self._session.execute(
                update(Poll)
                .where(Poll.id == poll.id, Poll.active.is_(True))
                .values(active=False)
            )
            if closed.rowcount != 1:
                raise ConflictError(f"Poll {poll.id} was closed by another request")
            self._session.refresh(poll)

            ranking = self._tally.rank(poll.id)
            winner = None
            if poll.phase == PollPhase.FINAL.value:
                top = ranking[0]
                winner = self._archive.record(
                    community_id, poll.month, top.title, top.votes, poll_id=poll.id
                )

        logger.info("Closed poll %s (phase %s) for %s", poll.id, poll.phase, community_id)
        return PollClosure(poll=poll, ranking=ranking, winner=winner)

    def status(self, community_id: str) -> PollStatus | None:
        poll = self.active_poll(community_id)
        if poll is None:
            return None
        return PollStatus(poll=poll, ranking=self._tally.rank(poll.id))


__all__ = [
    "PollClosure",
    "PollLifecycleManager",
    "PollStatus",
    "final_question",
    "nomination_question",
]
