"""Database abstraction layer using SQLAlchemy 2.0.

This module provides engine configuration and connection management for the
SQLite database holding the collection registry and every collection table.
Operations are synchronous; each public store operation runs in its own
transaction obtained from ``DatabaseManager.begin()``.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from coinnavigator.core.config import Settings, get_settings
from coinnavigator.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    All models should inherit from this class to get proper ORM mapping
    and metadata management.
    """

    pass


class DatabaseManager:
    """Database engine and connection manager.

    This class lazily creates the engine, applies SQLite pragmas to every new
    connection and hands out connections and transactions.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the database manager.

        Args:
            settings: Optional settings instance. Defaults to the cached settings.
        """
        self.settings = settings or get_settings()
        self._engine: Engine | None = None

    @property
    def engine(self) -> Engine:
        """Get or create the database engine.

        Returns:
            Engine: SQLAlchemy engine instance.
        """
        if self._engine is None:
            engine_kwargs = {
                "echo": self.settings.db_echo,
                "connect_args": {"check_same_thread": False},
            }
            # An in-memory database only lives as long as its one connection
            if self.settings.is_sqlite_memory:
                engine_kwargs["poolclass"] = StaticPool

            self._engine = create_engine(self.settings.database_url, **engine_kwargs)
            self._register_sqlite_listeners(self._engine)

            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    def _register_sqlite_listeners(self, engine: Engine) -> None:
        """Apply pragmas on connect and take over transaction control.

        pysqlite only emits BEGIN before DML, which would leave CREATE TABLE
        and DROP TABLE outside the surrounding transaction. Disabling the
        driver's handling and emitting BEGIN ourselves makes DDL transactional.

        The BEGIN mode comes from the ``sqlite_begin_mode`` execution option:
        ``begin()`` takes the write lock up front with IMMEDIATE, reads use
        DEFERRED.
        """
        settings = self.settings

        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_connection, connection_record) -> None:
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            try:
                cursor.execute(
                    f"PRAGMA foreign_keys = {'ON' if settings.db_sqlite_foreign_keys else 'OFF'}"
                )
                cursor.execute(f"PRAGMA busy_timeout = {int(settings.db_sqlite_busy_timeout)}")
                if not settings.is_sqlite_memory:
                    cursor.execute(f"PRAGMA journal_mode = {settings.db_sqlite_journal_mode}")
                    cursor.execute(f"PRAGMA synchronous = {settings.db_sqlite_synchronous}")
            finally:
                cursor.close()

        @event.listens_for(engine, "begin")
        def _on_begin(conn: Connection) -> None:
            mode = conn.get_execution_options().get("sqlite_begin_mode", "DEFERRED")
            conn.exec_driver_sql(f"BEGIN {mode}")

    def create_tables(self) -> None:
        """Create all system tables (collection registry, preferences).

        Collection tables are created on demand by the collection service.
        """
        # Import models so they are registered with Base.metadata
        from coinnavigator.infrastructure.persistence import models  # noqa: F401

        with self.begin() as conn:
            Base.metadata.create_all(conn)
        logger.debug("System tables created")

    def disconnect(self) -> None:
        """Close the database engine and all connections."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.debug("Database engine disposed")

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Provide a connection for read-only work.

        Yields:
            Connection: SQLAlchemy connection.
        """
        with self.engine.connect() as conn:
            yield conn

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Provide a transactional scope for database operations.

        The transaction starts with BEGIN IMMEDIATE, so it holds SQLite's
        single write lock from the start and waits up to the busy timeout for
        other writers instead of failing on a lock upgrade. It commits when
        the block exits normally and rolls back when it raises.

        Yields:
            Connection: SQLAlchemy connection inside a transaction.

        Example:
            with db.begin() as conn:
                CoinRepository(conn).insert(table_name, coin)
        """
        with self.engine.connect() as conn:
            conn.execution_options(sqlite_begin_mode="IMMEDIATE")
            with conn.begin():
                yield conn

    def check_connection(self) -> bool:
        """Check if database connection is working.

        Returns:
            bool: True if connection is successful, False otherwise.
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
                logger.debug("Database connection check successful")
                return True
        except SQLAlchemyError as e:
            logger.error("Database connection check failed", error=str(e))
            return False


# Global database manager instance
_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Get the global database manager instance.

    Returns:
        DatabaseManager: Global database manager instance.
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def init_database(db: DatabaseManager | None = None) -> DatabaseManager:
    """Initialize the database.

    Creates the database directory for file-based SQLite, verifies the
    connection and creates the system tables.

    Args:
        db: Database manager to initialize. Defaults to the global one.

    Returns:
        DatabaseManager: The initialized database manager.

    Raises:
        RuntimeError: If the database cannot be reached.
    """
    db = db or get_db_manager()

    db_path = db.settings.database_path
    if db_path is not None:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("Database directory ensured", path=str(db_path.parent))

    if not db.check_connection():
        logger.error("Database connection failed")
        raise RuntimeError("Failed to connect to database")

    db.create_tables()
    return db


def close_database() -> None:
    """Close the global database connection."""
    global _db_manager
    if _db_manager is not None:
        _db_manager.disconnect()
        _db_manager = None
