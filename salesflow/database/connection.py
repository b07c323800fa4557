"""
Database store handle with SQLAlchemy engine and session management.

The Database object owns the engine and the session factory. It is
constructed explicitly by the process entry point (the application factory
or a test fixture) and handed to every caller; there is no module-level
engine. Units of work are serialized by a single lock so at most one state
transition is in flight at a time.
"""

import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from salesflow.core.config import Settings
from salesflow.core.logging import get_logger
from salesflow.database.models import Base

logger = get_logger(__name__)


class Database:
    """
    Explicitly constructed store.

    Example:
        database = Database("sqlite+pysqlite:///:memory:")
        database.create_all()
        with database.session() as session:
            OrderService(session).list_orders()
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = self._create_engine(url, echo)
        self._session_factory = sessionmaker(
            self.engine,
            class_=Session,
            expire_on_commit=False,
            autoflush=False,
        )
        self._lock = threading.Lock()

        logger.info("Database engine created", dialect=self.engine.dialect.name)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.database_url, echo=settings.debug)

    @staticmethod
    def _create_engine(url: str, echo: bool) -> Engine:
        if url.startswith("sqlite"):
            in_memory = ":memory:" in url or url.rstrip("/").endswith(":")
            return create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                # A memory database exists per connection; share one.
                poolclass=StaticPool if in_memory else None,
            )
        return create_engine(url, echo=echo, pool_pre_ping=True)

    def create_all(self) -> None:
        """Create all tables for registered models."""
        Base.metadata.create_all(self.engine)
        logger.info("Database tables created", tables=len(Base.metadata.tables))

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Open a unit of work.

        Commits on success and rolls back on any exception, so a failed
        operation leaves the store unchanged.

        Yields:
            Database session
        """
        with self._lock:
            session = self._session_factory()
            try:
                yield session
                session.commit()
            except Exception as e:
                session.rollback()
                logger.debug(
                    "Database session rolled back",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise
            finally:
                session.close()

    def check_health(self) -> bool:
        """Return True if the store answers a trivial query."""
        try:
            with self._lock, self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error("Database health check failed", error=str(e))
            return False

    def dispose(self) -> None:
        """Close all connections. A memory database is lost afterwards."""
        self.engine.dispose()
        logger.info("Database connections closed and engine disposed")


def create_database(settings: Settings, create_tables: bool = True) -> Database:
    """
    Build the store for the given settings.

    Args:
        settings: Application settings
        create_tables: Create the schema immediately

    Returns:
        Ready to use Database
    """
    database = Database.from_settings(settings)
    if create_tables:
        database.create_all()
    return database
