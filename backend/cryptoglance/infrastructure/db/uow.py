from __future__ import annotations

from typing import Callable

from sqlalchemy.orm import Session

from cryptoglance.infrastructure.repositories.watchlist_repository import SqlAlchemyWatchlistRepository


class SqlAlchemyUnitOfWork:
    """One session per ``with`` block; uncommitted work is rolled back on exit."""

    def __init__(self, *, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None
        self._watchlist: SqlAlchemyWatchlistRepository | None = None

    def __enter__(self) -> "SqlAlchemyUnitOfWork":
        session = self._session_factory()
        self._session = session
        self._watchlist = SqlAlchemyWatchlistRepository(session=session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        session = self._session
        self._session = None
        self._watchlist = None
        if session is None:
            return
        try:
            if session.in_transaction():
                session.rollback()
        finally:
            session.close()

    @property
    def watchlist(self) -> SqlAlchemyWatchlistRepository:
        if self._watchlist is None:
            raise RuntimeError("Unit of work has no active session")
        return self._watchlist

    def commit(self) -> None:
        self._active_session().commit()

    def _active_session(self) -> Session:
        if self._session is None:
            raise RuntimeError("Unit of work has no active session")
        return self._session
