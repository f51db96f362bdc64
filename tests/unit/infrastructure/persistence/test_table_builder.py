"""Unit tests for TableBuilder."""

import uuid

from sqlalchemy import text

from coinnavigator.domain.entities import get_attribute
from coinnavigator.infrastructure.persistence.table_builder import TableBuilder


def test_quote_identifier():
    """Identifiers are double-quoted with embedded quotes doubled."""
    assert TableBuilder.quote_identifier("name") == '"name"'
    assert TableBuilder.quote_identifier('my "list"') == '"my ""list"""'


def test_generate_table_name():
    """Table names derive from the registry ID, not the collection name."""
    collection_id = "0E4B5C2A-1111-4F6B-9C0D-ABCDEF012345"
    assert TableBuilder.generate_table_name(collection_id) == "col_0e4b5c2a11114f6b9c0dabcdef012345"


def test_generate_table_name_unique_per_id():
    first = TableBuilder.generate_table_name(str(uuid.uuid4()))
    second = TableBuilder.generate_table_name(str(uuid.uuid4()))
    assert first != second


def test_build_column_def():
    assert TableBuilder.build_column_def(get_attribute("name")) == '"name" TEXT NOT NULL'
    assert TableBuilder.build_column_def(get_attribute("date")) == '"date" INTEGER'
    assert TableBuilder.build_column_def(get_attribute("weight")) == '"weight" REAL'
    assert TableBuilder.build_column_def(get_attribute("edge")) == '"edge" TEXT'


def test_build_create_table_ddl():
    """The DDL has the identity, every attribute and both image columns."""
    ddl = TableBuilder.build_create_table_ddl("col_abc")

    assert ddl.startswith('CREATE TABLE IF NOT EXISTS "col_abc" (')
    assert '"id" TEXT PRIMARY KEY' in ddl
    assert '"diameter" REAL' in ddl
    assert '"denomination" TEXT' in ddl
    assert '"obverse_png" BLOB' in ddl
    assert '"inverse_png" BLOB' in ddl
    assert ddl.index('"name"') < ddl.index('"date"') < ddl.index('"denomination"')


def test_create_table_exists_and_drop(db):
    with db.begin() as conn:
        TableBuilder.create_table(conn, "col_test")
        TableBuilder.create_table(conn, "col_test")

    with db.connect() as conn:
        assert TableBuilder.table_exists(conn, "col_test") is True
        columns = [row[1] for row in conn.execute(text('PRAGMA table_info("col_test")'))]

    assert columns == [
        "id", "name", "date", "grade", "diameter", "thickness", "edge",
        "weight", "composition", "denomination", "obverse_png", "inverse_png",
    ]

    with db.begin() as conn:
        TableBuilder.drop_table(conn, "col_test")
        TableBuilder.drop_table(conn, "col_test")

    with db.connect() as conn:
        assert TableBuilder.table_exists(conn, "col_test") is False
