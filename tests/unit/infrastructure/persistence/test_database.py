"""Unit tests for DatabaseManager."""

import sqlite3
from unittest.mock import patch

import pytest
from sqlalchemy import event, text
from sqlalchemy.pool import StaticPool

from coinnavigator.core.config import Settings
from coinnavigator.infrastructure.persistence.database import (
    DatabaseManager,
    close_database,
    get_db_manager,
    init_database,
)
from coinnavigator.infrastructure.persistence.table_builder import TableBuilder


def _settings(database_url: str) -> Settings:
    return Settings(_env_file=None, database_url=database_url, environment="testing")


def test_memory_database_uses_static_pool(db):
    assert isinstance(db.engine.pool, StaticPool)
    assert db.check_connection() is True


def test_system_tables_created(db):
    with db.connect() as conn:
        assert TableBuilder.table_exists(conn, "collections")
        assert TableBuilder.table_exists(conn, "preferences")


def test_foreign_keys_pragma(db):
    with db.connect() as conn:
        assert conn.execute(text("PRAGMA foreign_keys")).scalar_one() == 1


def test_ddl_is_transactional(db):
    """A CREATE TABLE is undone when its transaction rolls back."""
    with pytest.raises(RuntimeError):
        with db.begin() as conn:
            TableBuilder.create_table(conn, "col_rollback")
            raise RuntimeError("abort")

    with db.connect() as conn:
        assert TableBuilder.table_exists(conn, "col_rollback") is False


def test_disconnect_disposes_engine(db):
    engine = db.engine
    db.disconnect()
    assert db._engine is None
    assert db.engine is not engine


def test_init_database_creates_directory(tmp_path):
    db_file = tmp_path / "nested" / "dir" / "coins.db"
    db = init_database(DatabaseManager(_settings(f"sqlite:///{db_file}")))
    try:
        assert db_file.exists()
        with db.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar_one() == "wal"
    finally:
        db.disconnect()


def test_init_database_fails_without_connection(tmp_path):
    db = DatabaseManager(_settings(f"sqlite:///{tmp_path / 'coins.db'}"))
    with patch.object(DatabaseManager, "check_connection", return_value=False):
        with pytest.raises(RuntimeError, match="Failed to connect"):
            init_database(db)


def test_global_manager_lifecycle():
    from coinnavigator.infrastructure.persistence import database

    close_database()
    manager = get_db_manager()

    assert get_db_manager() is manager
    close_database()
    assert database._db_manager is None


def test_write_transactions_begin_immediate(db):
    """Writes take the write lock up front; reads stay deferred."""
    statements: list[str] = []

    def capture(conn, cursor, statement, parameters, context, executemany):
        if statement.startswith("BEGIN"):
            statements.append(statement)

    event.listen(db.engine, "before_cursor_execute", capture)
    try:
        with db.begin() as conn:
            conn.execute(text("SELECT 1"))
        with db.connect() as conn:
            conn.execute(text("SELECT 1"))
    finally:
        event.remove(db.engine, "before_cursor_execute", capture)

    assert statements == ["BEGIN IMMEDIATE", "BEGIN DEFERRED"]


def test_write_transaction_holds_lock_from_start(tmp_path):
    """A second writer cannot start while a write transaction is open."""
    db = init_database(DatabaseManager(_settings(f"sqlite:///{tmp_path / 'coins.db'}")))
    other = sqlite3.connect(tmp_path / "coins.db", timeout=0, isolation_level=None)
    try:
        with db.begin():
            with pytest.raises(sqlite3.OperationalError, match="locked"):
                other.execute("BEGIN IMMEDIATE")
        other.execute("BEGIN IMMEDIATE")
        other.execute("ROLLBACK")
    finally:
        other.close()
        db.disconnect()
