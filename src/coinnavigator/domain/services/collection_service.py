"""Collection service for business logic.

Manages the lifecycle of named collections (create, list, delete with
protection) and coin CRUD within a collection. Each collection is backed by
its own physical table; the registry and the table are always changed in one
transaction.
"""

import threading
import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from coinnavigator.core.logging import get_logger
from coinnavigator.domain.entities import Coin, Collection
from coinnavigator.domain.services.coin_validator import CoinValidator, ValidationResult
from coinnavigator.infrastructure.persistence.database import DatabaseManager
from coinnavigator.infrastructure.persistence.repositories import (
    CoinRepository,
    CollectionRepository,
)
from coinnavigator.infrastructure.persistence.table_builder import TableBuilder

logger = get_logger(__name__)

# Created on startup and never deletable; configured defaults only add to these
PROTECTED_COLLECTIONS = ("Owned", "Wishlist")


class CoinNavigatorError(Exception):
    """Base class for collection store errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ProtectedCollectionError(CoinNavigatorError):
    """Raised when deleting a protected collection."""

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name
        super().__init__(f"Cannot delete protected collection '{collection_name}'")


class CollectionNotFoundError(CoinNavigatorError):
    """Raised when an operation names a collection that is not registered."""

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name
        super().__init__(f"Collection '{collection_name}' not found")


class CollectionService:
    """Service for collection lifecycle and coin storage.

    Writes to one collection are serialized with a per-collection lock;
    lifecycle changes also hold the registry lock. Reads take no locks.
    """

    def __init__(
        self,
        db: DatabaseManager,
        default_collections: Iterable[str] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            db: Database manager.
            default_collections: Extra protected collections created on startup.
                Defaults to the configured ``default_collections``. The
                ``PROTECTED_COLLECTIONS`` are always included.
        """
        self.db = db
        if default_collections is None:
            default_collections = db.settings.default_collections

        self.default_collections = list(PROTECTED_COLLECTIONS)
        self._protected = {name.casefold() for name in PROTECTED_COLLECTIONS}
        for name in default_collections:
            if name.casefold() not in self._protected:
                self.default_collections.append(name)
                self._protected.add(name.casefold())
        self._registry_lock = threading.RLock()
        self._locks: dict[str, threading.RLock] = {}

    # Locking

    def lock_for(self, collection_name: str) -> threading.RLock:
        """Return the write lock guarding one collection."""
        with self._registry_lock:
            lock = self._locks.get(collection_name)
            if lock is None:
                lock = threading.RLock()
                self._locks[collection_name] = lock
            return lock

    # Lifecycle

    def initialize(self) -> None:
        """Create the system tables and make sure default collections exist.

        A persistence fault while probing a default collection is treated as
        "absent" and the collection is recreated.
        """
        self.db.create_tables()
        for name in self.default_collections:
            try:
                intact = self._is_intact(name)
            except SQLAlchemyError as e:
                logger.warning(
                    "Default collection probe failed, recreating",
                    collection_name=name,
                    error=str(e),
                )
                intact = False

            if not intact:
                self.create_collection(name)

        logger.info("Collection store initialized", default_collections=self.default_collections)

    def _is_intact(self, name: str) -> bool:
        with self.db.connect() as conn:
            collection = CollectionRepository(conn).get_by_name(name)
            return collection is not None and TableBuilder.table_exists(
                conn, collection.table_name
            )

    def is_protected(self, collection_name: str) -> bool:
        """Check if a collection can never be deleted (case-insensitive)."""
        return collection_name.casefold() in self._protected

    def create_collection(self, collection_name: str) -> Collection:
        """Create a collection if it does not exist.

        Idempotent: an existing collection is returned unchanged, after making
        sure its table is present.

        Args:
            collection_name: The collection name.

        Returns:
            The registered collection.

        Raises:
            ValueError: If the name is empty.
        """
        if not collection_name or not collection_name.strip():
            raise ValueError("Collection name is required")

        with self._registry_lock, self.db.begin() as conn:
            repository = CollectionRepository(conn)
            collection = repository.get_by_name(collection_name)
            created = collection is None
            if created:
                collection = repository.create(collection_name)
            TableBuilder.create_table(conn, collection.table_name)

        if created:
            logger.info(
                "Collection created",
                collection_name=collection_name,
                table_name=collection.table_name,
            )
        return collection

    def list_collection_names(self) -> list[str]:
        """Return every known collection name in creation order."""
        with self.db.connect() as conn:
            return [collection.name for collection in CollectionRepository(conn).list_all()]

    def collection_exists(self, collection_name: str) -> bool:
        """Check if a collection is registered."""
        with self.db.connect() as conn:
            return CollectionRepository(conn).name_exists(collection_name)

    def delete_collection(self, collection_name: str) -> bool:
        """Delete a collection with all of its coins.

        The registry entry and the table are removed in one transaction.

        Args:
            collection_name: The collection name.

        Returns:
            True if the collection was deleted, False if it did not exist.

        Raises:
            ProtectedCollectionError: If the collection is protected. Nothing
                is changed in that case.
        """
        if self.is_protected(collection_name):
            logger.warning("Refused to delete protected collection", collection_name=collection_name)
            raise ProtectedCollectionError(collection_name)

        with self._registry_lock, self.lock_for(collection_name):
            with self.db.begin() as conn:
                repository = CollectionRepository(conn)
                collection = repository.get_by_name(collection_name)
                if collection is None:
                    return False
                repository.delete_by_name(collection_name)
                TableBuilder.drop_table(conn, collection.table_name)
            self._locks.pop(collection_name, None)

        logger.info(
            "Collection deleted",
            collection_name=collection_name,
            table_name=collection.table_name,
        )
        return True

    def resolve(self, conn: Connection, collection_name: str) -> Collection:
        """Look up a registered collection on an open connection.

        Raises:
            CollectionNotFoundError: If the collection is not registered.
        """
        collection = CollectionRepository(conn).get_by_name(collection_name)
        if collection is None:
            raise CollectionNotFoundError(collection_name)
        return collection

    # Coins

    def insert(
        self,
        collection_name: str,
        coin: Coin,
        obverse_bytes: bytes | None = None,
        reverse_bytes: bytes | None = None,
    ) -> None:
        """Insert a coin into a collection.

        Image data defaults to the attachments the coin already carries.

        Args:
            collection_name: The collection name.
            coin: The coin to insert.
            obverse_bytes: Optional obverse image data.
            reverse_bytes: Optional reverse image data.
        """
        if obverse_bytes is None:
            obverse_bytes = coin.obverse_bytes
        if reverse_bytes is None:
            reverse_bytes = coin.reverse_bytes

        with self.lock_for(collection_name), self.db.begin() as conn:
            collection = self.resolve(conn, collection_name)
            CoinRepository(conn).insert(collection.table_name, coin, obverse_bytes, reverse_bytes)

        logger.info("Coin inserted", collection_name=collection_name, coin_id=str(coin.id))

    def create_coin(
        self,
        collection_name: str,
        raw_fields: Mapping[str, Any],
        obverse_bytes: bytes | None = None,
        reverse_bytes: bytes | None = None,
    ) -> ValidationResult:
        """Validate raw input and store the resulting coin.

        Nothing is written when validation fails.

        Args:
            collection_name: The collection to insert into.
            raw_fields: Raw text values keyed by attribute name.
            obverse_bytes: Optional obverse image data.
            reverse_bytes: Optional reverse image data.

        Returns:
            ValidationResult with ``created_id`` set on success, or the errors.
        """
        result = CoinValidator.validate_and_build(raw_fields)
        if not result.is_valid:
            logger.info(
                "Coin validation failed",
                collection_name=collection_name,
                fields=[error.field for error in result.errors],
            )
            return result

        result.coin.obverse_bytes = obverse_bytes
        result.coin.reverse_bytes = reverse_bytes
        self.insert(collection_name, result.coin)
        result.created_id = result.coin.id
        return result

    def update(self, collection_name: str, coin: Coin) -> int:
        """Persist a coin's attribute values.

        Returns:
            Number of rows updated (0 if the coin is not in the collection).
        """
        with self.lock_for(collection_name), self.db.begin() as conn:
            collection = self.resolve(conn, collection_name)
            rows = CoinRepository(conn).update(collection.table_name, coin)

        if rows == 0:
            logger.info("Coin not found for update", collection_name=collection_name, coin_id=str(coin.id))
        return rows

    def delete(self, collection_name: str, coin_id: uuid.UUID | str) -> int:
        """Delete a coin by identity.

        Returns:
            Number of rows deleted (0 if the coin is not in the collection).
        """
        with self.lock_for(collection_name), self.db.begin() as conn:
            collection = self.resolve(conn, collection_name)
            rows = CoinRepository(conn).delete(collection.table_name, coin_id)

        if rows:
            logger.info("Coin deleted", collection_name=collection_name, coin_id=str(coin_id))
        else:
            logger.info("Coin not found for deletion", collection_name=collection_name, coin_id=str(coin_id))
        return rows

    def get_by_id(self, collection_name: str, coin_id: uuid.UUID | str) -> Coin | None:
        """Get a coin by identity, or None if absent."""
        with self.db.connect() as conn:
            collection = self.resolve(conn, collection_name)
            return CoinRepository(conn).get_by_id(collection.table_name, coin_id)

    def get_all(self, collection_name: str) -> list[Coin]:
        """Get every coin in a collection in insertion order."""
        with self.db.connect() as conn:
            collection = self.resolve(conn, collection_name)
            return CoinRepository(conn).get_all(collection.table_name)

    def count(self, collection_name: str) -> int:
        """Count the coins in a collection."""
        with self.db.connect() as conn:
            collection = self.resolve(conn, collection_name)
            return CoinRepository(conn).count(collection.table_name)
