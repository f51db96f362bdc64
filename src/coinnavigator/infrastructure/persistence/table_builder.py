"""Dynamic table builder for collection tables.

Generates DDL for the physical table behind each collection. Every collection
table has the same columns: the coin identity, one column per registered
attribute and two opaque image blobs.
"""

from sqlalchemy import text
from sqlalchemy.engine import Connection

from coinnavigator.core.logging import get_logger
from coinnavigator.domain.entities import Attribute, ordered_attributes

logger = get_logger(__name__)

# Identity column added to every collection table
ID_COLUMN = ("id", "TEXT PRIMARY KEY")

# Opaque attachment columns, stored and returned but never interpreted
OBVERSE_COLUMN = "obverse_png"
REVERSE_COLUMN = "inverse_png"
BLOB_COLUMNS = [
    (OBVERSE_COLUMN, "BLOB"),
    (REVERSE_COLUMN, "BLOB"),
]

TABLE_PREFIX = "col_"


class TableBuilder:
    """Builds, checks and drops the physical tables behind collections."""

    @classmethod
    def quote_identifier(cls, name: str) -> str:
        """Quote an SQL identifier, escaping embedded double quotes.

        Args:
            name: The raw identifier.

        Returns:
            The identifier safe for interpolation into SQL.
        """
        return '"' + name.replace('"', '""') + '"'

    @classmethod
    def generate_table_name(cls, collection_id: str) -> str:
        """Generate the table name for a collection.

        The name derives from the collection's registry ID rather than its
        user-chosen name, since SQLite table names are case-insensitive while
        collection names are not.

        Args:
            collection_id: The collection's registry ID (UUID string).

        Returns:
            The generated table name.
        """
        return f"{TABLE_PREFIX}{collection_id.replace('-', '').lower()}"

    @classmethod
    def build_column_def(cls, attribute: Attribute) -> str:
        """Build the column definition for one attribute.

        Args:
            attribute: The registered attribute.

        Returns:
            The column definition.
        """
        parts = [cls.quote_identifier(attribute.name), attribute.type.sql_type]
        if attribute.name == "name":
            parts.append("NOT NULL")
        return " ".join(parts)

    @classmethod
    def build_create_table_ddl(cls, table_name: str) -> str:
        """Build the CREATE TABLE statement for a collection table.

        Args:
            table_name: The physical table name.

        Returns:
            The DDL statement as a string.
        """
        column_defs = [f"{cls.quote_identifier(ID_COLUMN[0])} {ID_COLUMN[1]}"]
        column_defs.extend(cls.build_column_def(attribute) for attribute in ordered_attributes())
        column_defs.extend(
            f"{cls.quote_identifier(col)} {col_type}" for col, col_type in BLOB_COLUMNS
        )
        columns_sql = ",\n  ".join(column_defs)

        return f"CREATE TABLE IF NOT EXISTS {cls.quote_identifier(table_name)} (\n  {columns_sql}\n)"

    @classmethod
    def create_table(cls, conn: Connection, table_name: str) -> None:
        """Create the physical table if it does not exist.

        Runs inside the caller's transaction.

        Args:
            conn: Connection inside a transaction.
            table_name: The physical table name.
        """
        ddl = cls.build_create_table_ddl(table_name)
        conn.execute(text(ddl))
        logger.debug("Collection table ensured", table_name=table_name)

    @classmethod
    def table_exists(cls, conn: Connection, table_name: str) -> bool:
        """Check if a table exists.

        Args:
            conn: Database connection.
            table_name: The physical table name.

        Returns:
            True if the table exists, False otherwise.
        """
        check_sql = """
            SELECT name FROM sqlite_master
            WHERE type='table' AND name=:table_name
        """
        result = conn.execute(text(check_sql), {"table_name": table_name})
        return result.scalar_one_or_none() is not None

    @classmethod
    def drop_table(cls, conn: Connection, table_name: str) -> None:
        """Drop a collection table.

        Runs inside the caller's transaction.

        Args:
            conn: Connection inside a transaction.
            table_name: The physical table name.
        """
        ddl = f"DROP TABLE IF EXISTS {cls.quote_identifier(table_name)}"
        conn.execute(text(ddl))
        logger.debug("Collection table dropped", table_name=table_name)
