"""Move service for relocating coins between collections.

A move inserts the coin, with its identity and image data, into the target
collection and then deletes it from the source. Both steps run in one
transaction: if either fails, neither is applied.
"""

from contextlib import ExitStack

from sqlalchemy.exc import SQLAlchemyError

from coinnavigator.core.logging import get_logger
from coinnavigator.domain.entities import Coin
from coinnavigator.domain.services.collection_service import (
    CollectionNotFoundError,
    CollectionService,
)
from coinnavigator.infrastructure.persistence.repositories import CoinRepository

logger = get_logger(__name__)


class MoveService:
    """Service for moving coins from one collection to another."""

    def __init__(self, store: CollectionService) -> None:
        """Initialize the service.

        Args:
            store: Collection service owning both collections.
        """
        self.store = store

    def move(self, source_collection: str, target_collection: str, coin: Coin | None) -> bool:
        """Move a coin between collections.

        Args:
            source_collection: Collection the coin currently lives in.
            target_collection: Collection to move the coin to.
            coin: The coin to move.

        Returns:
            True if the coin was moved, False otherwise. Invalid arguments
            fail without touching the store; a storage failure rolls back the
            whole move.
        """
        if not source_collection or not target_collection or coin is None:
            logger.warning("Invalid move operation", source=source_collection, target=target_collection)
            return False
        if source_collection == target_collection:
            logger.warning("Invalid move operation: source equals target", source=source_collection)
            return False

        try:
            with ExitStack() as stack:
                # Fixed lock order so concurrent opposite moves cannot deadlock
                for name in sorted((source_collection, target_collection)):
                    stack.enter_context(self.store.lock_for(name))

                with self.store.db.begin() as conn:
                    source = self.store.resolve(conn, source_collection)
                    target = self.store.resolve(conn, target_collection)
                    repository = CoinRepository(conn)
                    repository.insert(
                        target.table_name, coin, coin.obverse_bytes, coin.reverse_bytes
                    )
                    deleted = repository.delete(source.table_name, coin.id)
        except (SQLAlchemyError, CollectionNotFoundError) as e:
            logger.error(
                "Failed to move coin",
                source=source_collection,
                target=target_collection,
                coin_id=str(coin.id),
                error=str(e),
            )
            return False

        if deleted == 0:
            logger.warning(
                "Moved coin was not present in source collection",
                source=source_collection,
                target=target_collection,
                coin_id=str(coin.id),
            )

        logger.info(
            "Coin moved",
            source=source_collection,
            target=target_collection,
            coin_id=str(coin.id),
        )
        return True
