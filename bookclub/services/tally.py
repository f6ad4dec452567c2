"""Vote aggregation and ranking."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from bookclub.core.errors import NotFoundError
from bookclub.models import Poll, Vote


@dataclass(slots=True, frozen=True)
class RankedOption:
    """A poll option with its vote count."""

    option_index: int
    title: str
    votes: int


@dataclass(slots=True, frozen=True)
class TallySnapshot:
    """Vote counts for every option of a poll at read time."""

    poll_id: int
    counts: dict[int, int]
    ranking: list[RankedOption]
    voter_count: int

    @property
    def total_votes(self) -> int:
        return sum(self.counts.values())


def rank_counts(options: list[str], counts: dict[int, int]) -> list[RankedOption]:
    """Order options by votes descending; equal counts keep ascending index order."""

    entries = [
        RankedOption(option_index=index, title=title, votes=counts.get(index, 0))
        for index, title in enumerate(options)
    ]
    return sorted(entries, key=lambda entry: (-entry.votes, entry.option_index))


class TallyEngine:
    """Reads vote rows and turns them into rankings."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _get_poll(self, poll_id: int) -> Poll:
        poll = self._session.get(Poll, poll_id)
        if poll is None:
            raise NotFoundError(f"Poll {poll_id} was not found")
        return poll

    def counts(self, poll: Poll) -> dict[int, int]:
        """Distinct voters per option, with zero for options nobody picked."""

        statement = (
            select(Vote.option_index, func.count(distinct(Vote.voter_id)))
            .where(Vote.poll_id == poll.id)
            .group_by(Vote.option_index)
        )
        found = {int(index): int(total) for index, total in self._session.execute(statement)}
        return {index: found.get(index, 0) for index in range(len(poll.options))}

    def snapshot(self, poll: Poll) -> TallySnapshot:
        counts = self.counts(poll)
        voter_count = self._session.scalar(
            select(func.count(distinct(Vote.voter_id))).where(Vote.poll_id == poll.id)
        )
        return TallySnapshot(
            poll_id=poll.id,
            counts=counts,
            ranking=rank_counts(poll.options, counts),
            voter_count=int(voter_count or 0),
        )

    def rank(self, poll_id: int) -> list[RankedOption]:
        poll = self._get_poll(poll_id)
        return rank_counts(poll.options, self.counts(poll))

    def select_top_n(self, poll_id: int, n: int) -> list[RankedOption]:
        if n < 0:
            raise ValueError("n must not be negative")
        return self.rank(poll_id)[:n]

    def winner(self, poll_id: int) -> RankedOption | None:
        """Top-ranked option; a tie for the most votes goes to the lowest index.

        Returns ``None`` only for a poll without options.
        """

        ranking = self.rank(poll_id)
        return ranking[0] if ranking else None


__all__ = ["RankedOption", "TallyEngine", "TallySnapshot", "rank_counts"]
