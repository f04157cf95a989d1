"""Database engine and session handle."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
import logging
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker

from shopapi.db.models import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Database:
    """Owns the engine and session factory for one process.

    Built once at startup and disposed once at shutdown; handlers reach it
    through the application context, never through a module global.
    """

    def __init__(self, url: str, *, echo: bool = False, **engine_options: Any) -> None:
        options: dict[str, Any] = {"echo": echo, **engine_options}
        if not url.startswith("sqlite"):
            options.setdefault("pool_pre_ping", True)

        self.engine = create_engine(url, **options)
        if self.engine.dialect.name == "sqlite":
            _enable_sqlite_foreign_keys(self.engine)

        self._session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            class_=Session,
        )

    def session(self) -> Generator[Session, None, None]:
        """Yield a database session for dependency injection."""
        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Provide a transactional session scope for scripts/tests."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        """Create all tables directly from model metadata (tests and local dev)."""
        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        """Close every pooled connection."""
        logger.info("Disposing database engine")
        self.engine.dispose()
