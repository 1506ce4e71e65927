"""Database engine and session management.

A Database instance owns one engine. It is created by the DI container and
passed to every store that needs storage, so there is no module-level
engine or "connected" flag.
"""
import logging
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from ltc_tracker.db.models import (  # noqa: F401  # pylint: disable=unused-import
    Account, AuthSession, DailyStat, User)
from ltc_tracker.errors import Internal

logger = logging.getLogger(__name__)


class Database:
    """Engine plus transactional session factory."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url
        kwargs: dict = {"echo": echo}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        else:
            kwargs.update(pool_pre_ping=True, pool_size=5, max_overflow=10)
        self.engine = create_engine(url, **kwargs)

    @property
    def dialect(self) -> str:
        """Backend dialect name (e.g. "postgresql", "sqlite")."""
        return self.engine.dialect.name

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Yield a session; commits on success, rolls back on error.

        Raises:
            Internal: the backend could not run the statement (connection
                lost, database locked past the timeout, ...).
        """
        session = Session(self.engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except OperationalError as exc:
            session.rollback()
            logger.error("Database operation failed: %s", exc)
            raise Internal("Database operation failed") from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init(self) -> None:
        """Create all tables. Safe to call on startup (idempotent for existing tables)."""
        SQLModel.metadata.create_all(self.engine)
        logger.info("Database initialised (%s)", self.dialect)

    def dispose(self) -> None:
        """Close pooled connections."""
        self.engine.dispose()
