"""SQLAlchemy engine and session management."""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from bookclub.core.config import Settings


def create_db_engine(settings: Settings) -> Engine:
    """Build the engine for the configured database URL."""

    connect_args: dict[str, object] = {}
    if settings.database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
    if settings.enable_tracing:
        from bookclub.obs import instrument_sqlalchemy_engine

        instrument_sqlalchemy_engine(engine)
    return engine


def create_session_factory(settings: Settings, engine: Engine | None = None) -> sessionmaker[Session]:
    """Return a session factory bound to ``engine`` or a fresh engine for ``settings``."""

    bind = engine or create_db_engine(settings)
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


@contextmanager
def get_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""
    session: Session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = ["create_db_engine", "create_session_factory", "get_session"]
