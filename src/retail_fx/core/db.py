from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from retail_fx.core.config import settings
from retail_fx.core.errors import BackendUnavailableError
from retail_fx.core.logging import get_logger, log_exception

logger = get_logger(__name__)

_url = make_url(settings.database_url)
_connect_args: dict = {}
if _url.drivername.startswith("sqlite"):
    _connect_args = {"check_same_thread": False}

engine = create_engine(settings.database_url, pool_pre_ping=True, connect_args=_connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def db_session() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@contextmanager
def backend_call(session: Session, operation: str) -> Iterator[None]:
    """
    Wrap a round trip to the database.

    Integrity violations propagate unchanged so callers can map them. Every other
    SQLAlchemy failure rolls the session back and surfaces as BackendUnavailableError.
    """
    try:
        yield
    except IntegrityError:
        raise
    except SQLAlchemyError as e:
        session.rollback()
        log_exception(logger, "db.backend.failure", operation=operation)
        raise BackendUnavailableError("Database is unavailable, try again") from e
