"""Error taxonomy shared by the nomination and poll services."""
from __future__ import annotations


class BookClubError(RuntimeError):
    """Base exception for caller-facing service errors.

    Every subclass carries an HTTP-style ``status_code`` and a default message so
    that a dispatcher can turn it into a user-facing reply without inspecting
    the concrete type.
    """

    status_code = 400
    default_message = "The request could not be completed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BookClubError):
    """Raised for empty or malformed input and out-of-range option indexes."""

    status_code = 422
    default_message = "Invalid input"


class ConflictError(BookClubError):
    """Raised when an active poll already exists or a mutation collides."""

    status_code = 409
    default_message = "The request conflicts with the current poll state"


class PreconditionError(BookClubError):
    """Raised when the lifecycle step is not yet possible."""

    status_code = 412
    default_message = "The poll is not ready for this step"


class NotFoundError(BookClubError):
    """Raised when a poll or nomination does not exist."""

    status_code = 404
    default_message = "Not found"


class PersistenceError(BookClubError):
    """Raised when the storage layer fails; the transaction was rolled back."""

    status_code = 503
    default_message = "Storage is temporarily unavailable"


__all__ = [
    "BookClubError",
    "ConflictError",
    "NotFoundError",
    "PersistenceError",
    "PreconditionError",
    "ValidationError",
]
