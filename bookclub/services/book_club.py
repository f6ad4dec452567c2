"""Entry point used by command dispatchers to run the monthly selection."""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy.orm import Session

from bookclub.core.config import Settings, get_settings
from bookclub.core.errors import BookClubError
from bookclub.core.months import current_month, validate_month
from bookclub.models import BookQuestion, Nomination, Poll, Winner
from bookclub.obs import (
    NOMINATIONS_COUNTER,
    POLLS_CLOSED_COUNTER,
    POLLS_STARTED_COUNTER,
    QUESTIONS_COUNTER,
    WINNERS_COUNTER,
    record_rejection,
    record_vote_toggle,
    service_span,
)
from bookclub.services.nominations import NominationStore
from bookclub.services.polls import PollClosure, PollLifecycleManager, PollStatus
from bookclub.services.questions import QuestionStore
from bookclub.services.tally import TallyEngine, TallySnapshot
from bookclub.services.votes import VoteLedger
from bookclub.services.winners import WinnerArchive

logger = logging.getLogger(__name__)


class BookClubService:
    """Nomination and poll operations for one unit of work.

    Build one per request around a fresh session; the components share that
    session so nested writes join a single transaction.
    """

    def __init__(
        self,
        session: Session,
        *,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._clock = clock
        self.nominations = NominationStore(session)
        self.tally = TallyEngine(session)
        self.ledger = VoteLedger(session, tally=self.tally)
        self.archive = WinnerArchive(session)
        self.questions = QuestionStore(session)
        self.lifecycle = PollLifecycleManager(
            session,
            nominations=self.nominations,
            tally=self.tally,
            archive=self.archive,
            settings=self._settings,
        )

    def resolve_month(self, month: str | None) -> str:
        if month is None:
            now = self._clock() if self._clock is not None else None
            return current_month(now, tz=self._settings.timezone)
        return validate_month(month)

    @contextmanager
    def _operation(self, name: str, **attributes: object) -> Iterator[None]:
        with service_span(f"bookclub.{name}", **attributes):
            try:
                yield
            except BookClubError as exc:
                record_rejection(name, exc)
                logger.warning("%s rejected: %s", name, exc.message)
                raise

    def nominate(
        self,
        community_id: str,
        title: str,
        author: str,
        user_id: str,
        month: str | None = None,
    ) -> Nomination:
        with self._operation("nominate", community_id=community_id):
            nomination = self.nominations.submit(
                community_id, self.resolve_month(month), title, author, user_id
            )
        NOMINATIONS_COUNTER.inc()
        return nomination

    def list_nominations(self, community_id: str, month: str | None = None) -> list[Nomination]:
        with self._operation("list_nominations", community_id=community_id):
            return self.nominations.list(community_id, self.resolve_month(month))

    def clear_nominations(self, community_id: str, month: str | None = None) -> int:
        with self._operation("clear_nominations", community_id=community_id):
            return self.nominations.clear(community_id, self.resolve_month(month))

    def start_poll(
        self, community_id: str, month: str | None = None, *, created_by: str
    ) -> Poll:
        with self._operation("start_poll", community_id=community_id):
            poll = self.lifecycle.start_phase1(community_id, self.resolve_month(month), created_by)
        POLLS_STARTED_COUNTER.labels(phase=str(poll.phase)).inc()
        return poll

    def vote(self, poll_id: int, voter_id: str, option_index: int) -> TallySnapshot:
        with self._operation("vote", poll_id=poll_id):
            result = self.ledger.toggle(poll_id, voter_id, option_index)
        record_vote_toggle(result.phase, result.action.value)
        return result.tally

    def close_poll(self, community_id: str) -> PollClosure:
        with self._operation("close_poll", community_id=community_id):
            closure = self.lifecycle.close_poll(community_id)
        POLLS_CLOSED_COUNTER.labels(phase=str(closure.poll.phase)).inc()
        if closure.winner is not None:
            WINNERS_COUNTER.inc()
        return closure

    def start_final_poll(self, community_id: str, *, created_by: str) -> Poll:
        with self._operation("start_final_poll", community_id=community_id):
            poll = self.lifecycle.start_phase2(community_id, created_by)
        POLLS_STARTED_COUNTER.labels(phase=str(poll.phase)).inc()
        return poll

    def poll_status(self, community_id: str) -> PollStatus | None:
        with self._operation("poll_status", community_id=community_id):
            return self.lifecycle.status(community_id)

    def past_winners(self, community_id: str) -> list[Winner]:
        with self._operation("past_winners", community_id=community_id):
            return self.archive.list(community_id)

    def submit_question(
        self,
        community_id: str,
        book: str,
        question: str,
        user_id: str,
        user_name: str | None = None,
    ) -> BookQuestion:
        with self._operation("submit_question", community_id=community_id):
            entry = self.questions.submit(
                community_id, book, question, user_id, user_name=user_name
            )
        QUESTIONS_COUNTER.inc()
        return entry

    def list_questions(self, community_id: str, book: str) -> list[BookQuestion]:
        with self._operation("list_questions", community_id=community_id):
            return self.questions.list(community_id, book)


__all__ = ["BookClubService"]
