"""Repository for collection registry operations.

Provides CRUD operations for the collections table using SQLAlchemy Core on a
connection supplied by the caller, so registry changes share the caller's
transaction with the DDL for the collection table.
"""

import uuid

from sqlalchemy import delete, insert, literal_column, select
from sqlalchemy.engine import Connection

from coinnavigator.domain.entities import Collection
from coinnavigator.infrastructure.persistence.models import CollectionModel
from coinnavigator.infrastructure.persistence.table_builder import TableBuilder

_COLLECTION_COLUMNS = (
    CollectionModel.id,
    CollectionModel.name,
    CollectionModel.table_name,
    CollectionModel.created_at,
)


class CollectionRepository:
    """Repository for collection registry database operations."""

    def __init__(self, connection: Connection) -> None:
        """Initialize the repository with a database connection.

        Args:
            connection: Active SQLAlchemy connection.
        """
        self.connection = connection

    def create(self, name: str) -> Collection:
        """Register a new collection.

        Args:
            name: The collection name.

        Returns:
            The registered collection.
        """
        collection_id = str(uuid.uuid4())
        table_name = TableBuilder.generate_table_name(collection_id)
        self.connection.execute(
            insert(CollectionModel).values(id=collection_id, name=name, table_name=table_name)
        )
        return self.get_by_name(name)

    def get_by_name(self, name: str) -> Collection | None:
        """Get a collection by its exact (case-sensitive) name.

        Args:
            name: The collection name.

        Returns:
            The collection if found, None otherwise.
        """
        row = self.connection.execute(
            select(*_COLLECTION_COLUMNS).where(CollectionModel.name == name)
        ).one_or_none()
        if row is None:
            return None
        return Collection(
            id=row.id, name=row.name, table_name=row.table_name, created_at=row.created_at
        )

    def name_exists(self, name: str) -> bool:
        """Check if a collection with the given name exists.

        Args:
            name: The collection name to check.

        Returns:
            True if the name exists, False otherwise.
        """
        result = self.connection.execute(
            select(CollectionModel.id).where(CollectionModel.name == name).limit(1)
        )
        return result.scalar_one_or_none() is not None

    def list_all(self) -> list[Collection]:
        """List every registered collection in creation order."""
        rows = self.connection.execute(
            select(*_COLLECTION_COLUMNS).order_by(literal_column("rowid"))
        ).all()
        return [
            Collection(id=row.id, name=row.name, table_name=row.table_name, created_at=row.created_at)
            for row in rows
        ]

    def delete_by_name(self, name: str) -> int:
        """Remove a collection from the registry.

        Args:
            name: The collection name.

        Returns:
            Number of registry rows removed (0 or 1).
        """
        result = self.connection.execute(
            delete(CollectionModel).where(CollectionModel.name == name)
        )
        return result.rowcount
