"""ORM models package."""
from .base import Base, utcnow
from .nomination import Nomination
from .poll import Poll, PollPhase
from .question import BookQuestion
from .vote import Vote
from .winner import Winner

__all__ = [
    "Base",
    "BookQuestion",
    "Nomination",
    "Poll",
    "PollPhase",
    "Vote",
    "Winner",
    "utcnow",
]
