"""Transaction scopes for service operations.

Services live as long as the application (they own caches), sessions live
for one operation. Every service method opens its session from the factory
it was built with and runs inside atomic() for writes or read_only() for
reads.
"""

from collections.abc import Generator
from contextlib import contextmanager

from sqlmodel import Session

from localization.core.db import SessionFactory, SessionLocal
from localization.core.logging import get_logger

logger = get_logger(__name__)


class UnitOfWork:
    """One write transaction over one session.

    atomic() commits it when the block exits normally and rolls it back when
    the block raises, including domain errors raised after partial writes.
    """

    def __init__(self, session: Session):
        self._session = session
        self._done = False

    @property
    def session(self) -> Session:
        return self._session

    def flush(self) -> None:
        """Send pending writes so constraint violations and generated ids
        surface inside the block."""
        self._session.flush()

    def commit(self) -> None:
        if self._done:
            return
        self._session.commit()
        self._done = True
        logger.debug("uow_committed")

    def rollback(self) -> None:
        if self._done:
            return
        self._session.rollback()
        self._done = True
        logger.debug("uow_rolled_back")


@contextmanager
def atomic(
    session_factory: SessionFactory = SessionLocal,
) -> Generator[UnitOfWork, None, None]:
    """Run a block of writes as one transaction.

    Usage:
        with atomic(self._session_factory) as uow:
            uow.session.add(language)
    """
    with session_factory() as session:
        uow = UnitOfWork(session)
        try:
            yield uow
        except Exception:
            uow.rollback()
            raise
        uow.commit()


@contextmanager
def read_only(
    session_factory: SessionFactory = SessionLocal,
) -> Generator[Session, None, None]:
    """Session for reads; never commits.

    Rows loaded here stay readable after the block because the session is
    closed rather than rolled back, and sessions do not expire on commit.
    """
    with session_factory() as session:
        yield session
