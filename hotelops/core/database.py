"""
Database Management and Connection Handling

Engine and session factory construction for the approval core. The core
never opens sessions on its own; the host application (or a test) obtains a
Session here and injects it into repositories and services.
"""

import contextlib
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .config import DatabaseSettings, settings
from .exceptions import StoreConnectionError
from .logging import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    """Main database connection and session manager"""

    def __init__(self, db_settings: Optional[DatabaseSettings] = None):
        self.settings = db_settings or settings.database
        self.engine: Optional[Engine] = None
        self.session_factory: Optional[sessionmaker] = None
        self._initialized = False

    def initialize(self) -> None:
        """Create the engine and session factory"""
        if self._initialized:
            return

        connect_args: Dict[str, Any] = {}
        if self.settings.is_sqlite:
            connect_args = {
                "check_same_thread": False,
                "timeout": self.settings.DB_SQLITE_TIMEOUT,
            }

        self.engine = create_engine(
            self.settings.DATABASE_URL,
            echo=self.settings.DB_ECHO,
            pool_pre_ping=self.settings.DB_POOL_PRE_PING,
            connect_args=connect_args,
        )
        self.session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )
        self._initialized = True
        logger.info("Database manager initialized", extra={"sqlite": self.settings.is_sqlite})

    def create_all(self) -> None:
        """Create all tables known to the ORM metadata"""
        from hotelops.models import Base

        self.initialize()
        Base.metadata.create_all(self.engine)

    @contextlib.contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a session that is closed on exit.

        Services commit or roll back on their own; anything left pending when
        the block raises is rolled back here.
        """
        self.initialize()
        session = self.session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> bool:
        """Verify the store answers a trivial query"""
        self.initialize()
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            raise StoreConnectionError(str(e), operation="health_check") from e

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.session_factory = None
        self._initialized = False


db_manager = DatabaseManager()


__all__ = ["DatabaseManager", "db_manager"]
