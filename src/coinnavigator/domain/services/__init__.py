"""Domain services for CoinNavigator.

Services contain business logic that doesn't naturally fit within a single
entity: validation, collection storage, search and moves.
"""

from coinnavigator.domain.services.coin_validator import (
    REQUIRED_FIELDS_LABEL,
    CoinValidator,
    FieldError,
    ValidationResult,
)
from coinnavigator.domain.services.collection_service import (
    PROTECTED_COLLECTIONS,
    CoinNavigatorError,
    CollectionNotFoundError,
    CollectionService,
    ProtectedCollectionError,
)
from coinnavigator.domain.services.move_service import MoveService
from coinnavigator.domain.services.search_service import SearchService

__all__ = [
    "CoinNavigatorError",
    "CoinValidator",
    "CollectionNotFoundError",
    "CollectionService",
    "FieldError",
    "MoveService",
    "PROTECTED_COLLECTIONS",
    "ProtectedCollectionError",
    "REQUIRED_FIELDS_LABEL",
    "SearchService",
    "ValidationResult",
]
