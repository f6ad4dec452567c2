"""Exception handlers translating service errors into JSON responses."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from bookclub.core.errors import BookClubError

logger = logging.getLogger(__name__)


async def book_club_error_handler(request: Request, exc: BookClubError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "error_code": type(exc).__name__},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the failure and return a generic body that leaks no internals."""

    logger.error(
        "Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An internal server error occurred", "error_code": "InternalServerError"},
    )


def register_exception_handlers(application: FastAPI) -> None:
    application.add_exception_handler(BookClubError, book_club_error_handler)
    application.add_exception_handler(Exception, unhandled_error_handler)


__all__ = ["register_exception_handlers"]
