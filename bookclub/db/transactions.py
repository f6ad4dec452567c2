"""Transaction scopes for multi-row mutations."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bookclub.core.errors import PersistenceError

logger = logging.getLogger(__name__)

_ACTIVE_FLAG = "bookclub.serializable_transaction"


@contextmanager
def serializable_transaction(session: Session) -> Iterator[Session]:
    """Run the block under SERIALIZABLE isolation and commit it as one unit.

    SQLite takes the write lock up front with ``BEGIN IMMEDIATE``; other
    dialects switch the transaction to SERIALIZABLE. Any exception rolls the
    whole block back. Nested scopes join the outermost one, which alone commits.
    Integrity violations propagate unchanged so callers can classify them;
    other driver failures become :class:`PersistenceError`.
    """

    if session.info.get(_ACTIVE_FLAG):
        yield session
        return

    bind = session.get_bind()
    if bind is None:
        raise RuntimeError("Session is not bound to an engine")

    session.info[_ACTIVE_FLAG] = True
    try:
        try:
            # The isolation level only applies to a freshly begun transaction, so
            # a transaction left open by earlier reads is ended first.
            if session.in_transaction():
                session.commit()
            session.connection(execution_options={"isolation_level": "SERIALIZABLE"})
            if bind.dialect.name == "sqlite":
                session.execute(text("BEGIN IMMEDIATE"))

            yield session
            session.commit()
        except IntegrityError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Storage failure; transaction rolled back")
            raise PersistenceError() from exc
        except Exception:
            session.rollback()
            raise
    finally:
        session.info.pop(_ACTIVE_FLAG, None)


__all__ = ["serializable_transaction"]
