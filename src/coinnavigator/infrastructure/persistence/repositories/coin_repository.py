"""Repository for coin operations on collection tables.

Provides CRUD operations for dynamic collection tables using raw SQL, since
these tables are created at runtime and not mapped to ORM models. Table names
come from the collection registry and are always quoted.
"""

import uuid
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Connection

from coinnavigator.core.logging import get_logger
from coinnavigator.domain.entities import Attribute, AttributeType, Coin, ordered_attributes
from coinnavigator.infrastructure.persistence.table_builder import (
    OBVERSE_COLUMN,
    REVERSE_COLUMN,
    TableBuilder,
)

logger = get_logger(__name__)


def _coerce(attribute: Attribute, value: Any) -> Any:
    """Convert a stored value back to the attribute's Python type."""
    if value is None:
        return attribute.type.default
    if attribute.type is AttributeType.INTEGER:
        return int(value)
    if attribute.type is AttributeType.REAL:
        return float(value)
    return str(value)


class CoinRepository:
    """Repository for coin database operations.

    Update and delete report the number of affected rows; a missing identity
    affects zero rows and is not an error.
    """

    def __init__(self, connection: Connection) -> None:
        """Initialize the repository with a database connection.

        Args:
            connection: Active SQLAlchemy connection.
        """
        self.connection = connection

    def insert(
        self,
        table_name: str,
        coin: Coin,
        obverse_bytes: bytes | None = None,
        reverse_bytes: bytes | None = None,
    ) -> None:
        """Insert a coin into a collection table.

        Args:
            table_name: The physical table name.
            coin: The coin to insert, with its existing identity.
            obverse_bytes: Optional obverse image data.
            reverse_bytes: Optional reverse image data.
        """
        sql_values: dict[str, Any] = {"id": str(coin.id)}
        for attribute in ordered_attributes():
            sql_values[attribute.name] = getattr(coin, attribute.name)
        sql_values[OBVERSE_COLUMN] = obverse_bytes
        sql_values[REVERSE_COLUMN] = reverse_bytes

        columns = ", ".join(TableBuilder.quote_identifier(k) for k in sql_values)
        placeholders = ", ".join(f":{k}" for k in sql_values)
        insert_sql = (
            f"INSERT INTO {TableBuilder.quote_identifier(table_name)} ({columns}) "
            f"VALUES ({placeholders})"
        )

        self.connection.execute(text(insert_sql), sql_values)
        logger.debug("Coin inserted", table_name=table_name, coin_id=str(coin.id))

    def update(self, table_name: str, coin: Coin) -> int:
        """Update a coin's attributes. Image data is left unchanged.

        Args:
            table_name: The physical table name.
            coin: The coin carrying the new values.

        Returns:
            Number of rows updated (0 when the identity is not present).
        """
        sql_values = {
            attribute.name: getattr(coin, attribute.name) for attribute in ordered_attributes()
        }
        set_clause = ", ".join(
            f"{TableBuilder.quote_identifier(k)} = :{k}" for k in sql_values
        )
        update_sql = (
            f"UPDATE {TableBuilder.quote_identifier(table_name)} "
            f'SET {set_clause} WHERE "id" = :record_id'
        )

        result = self.connection.execute(
            text(update_sql), {**sql_values, "record_id": str(coin.id)}
        )
        logger.debug(
            "Coin updated",
            table_name=table_name,
            coin_id=str(coin.id),
            rows_affected=result.rowcount,
        )
        return result.rowcount

    def delete(self, table_name: str, coin_id: uuid.UUID | str) -> int:
        """Delete a coin by identity.

        Args:
            table_name: The physical table name.
            coin_id: The coin identity.

        Returns:
            Number of rows deleted (0 when the identity is not present).
        """
        delete_sql = f'DELETE FROM {TableBuilder.quote_identifier(table_name)} WHERE "id" = :record_id'
        result = self.connection.execute(text(delete_sql), {"record_id": str(coin_id)})
        logger.debug(
            "Coin deleted",
            table_name=table_name,
            coin_id=str(coin_id),
            rows_affected=result.rowcount,
        )
        return result.rowcount

    def get_by_id(self, table_name: str, coin_id: uuid.UUID | str) -> Coin | None:
        """Get a coin by identity.

        Args:
            table_name: The physical table name.
            coin_id: The coin identity.

        Returns:
            The coin if found, None otherwise.
        """
        select_sql = f'SELECT * FROM {TableBuilder.quote_identifier(table_name)} WHERE "id" = :record_id'
        row = self.connection.execute(text(select_sql), {"record_id": str(coin_id)}).fetchone()
        if row is None:
            return None
        return self._row_to_coin(row._mapping)

    def get_all(self, table_name: str) -> list[Coin]:
        """Get every coin in a collection table in insertion order.

        Args:
            table_name: The physical table name.

        Returns:
            List of coins.
        """
        select_sql = f"SELECT * FROM {TableBuilder.quote_identifier(table_name)} ORDER BY rowid"
        rows = self.connection.execute(text(select_sql)).fetchall()
        return [self._row_to_coin(row._mapping) for row in rows]

    def count(self, table_name: str) -> int:
        """Count the coins in a collection table."""
        count_sql = f"SELECT COUNT(*) FROM {TableBuilder.quote_identifier(table_name)}"
        return self.connection.execute(text(count_sql)).scalar_one()

    @staticmethod
    def _row_to_coin(mapping: Any) -> Coin:
        values = {
            attribute.name: _coerce(attribute, mapping[attribute.name])
            for attribute in ordered_attributes()
        }
        return Coin(
            id=uuid.UUID(mapping["id"]),
            obverse_bytes=mapping[OBVERSE_COLUMN],
            reverse_bytes=mapping[REVERSE_COLUMN],
            **values,
        )
