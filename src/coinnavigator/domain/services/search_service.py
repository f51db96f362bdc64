"""Search service for attribute-scoped filtering within a collection.

Text attributes match by case-insensitive substring. Integer and real
attributes match by exact value after parsing the query with the attribute's
type, so "38.1" finds a coin stored as 38.10000.
"""

from collections.abc import Callable

from coinnavigator.core.logging import get_logger
from coinnavigator.domain.entities import Attribute, Coin, get_attribute
from coinnavigator.domain.services.collection_service import CollectionService

logger = get_logger(__name__)

CoinMatcher = Callable[[Coin], bool]


def _never(coin: Coin) -> bool:
    return False


class SearchService:
    """Service for searching coins by a single attribute."""

    def __init__(self, store: CollectionService) -> None:
        """Initialize the service.

        Args:
            store: Collection service the coins are read from.
        """
        self.store = store

    @classmethod
    def build_matcher(cls, attribute: Attribute, query_text: str) -> CoinMatcher:
        """Build the predicate matching coins against a query.

        Args:
            attribute: The attribute to compare.
            query_text: The raw query text.

        Returns:
            A predicate over coins. A numeric query that does not parse
            yields a predicate matching nothing.
        """
        if not attribute.type.is_numeric:
            needle = query_text.lower()

            def match_text(coin: Coin) -> bool:
                return needle in coin.get_attribute_value(attribute.name).lower()

            return match_text

        try:
            target = attribute.type.parse(query_text.strip())
        except ValueError:
            return _never

        def match_value(coin: Coin) -> bool:
            return coin.get_value(attribute.name) == target

        return match_value

    def search(self, collection_name: str, attribute_name: str, query_text: str) -> list[Coin]:
        """Search a collection by one attribute.

        Args:
            collection_name: The collection to search.
            attribute_name: Name of a registered attribute.
            query_text: The value to look for.

        Returns:
            Matching coins in the collection's natural order. Unknown
            attributes return an empty list.
        """
        attribute = get_attribute(attribute_name)
        if attribute is None:
            logger.debug("Search on unknown attribute", attribute_name=attribute_name)
            return []

        matcher = self.build_matcher(attribute, query_text)
        results = [coin for coin in self.store.get_all(collection_name) if matcher(coin)]

        logger.debug(
            "Search completed",
            collection_name=collection_name,
            attribute_name=attribute_name,
            match_count=len(results),
        )
        return results
