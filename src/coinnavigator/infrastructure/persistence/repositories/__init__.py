"""Persistence repositories for database operations."""

from coinnavigator.infrastructure.persistence.repositories.coin_repository import (
    CoinRepository,
)
from coinnavigator.infrastructure.persistence.repositories.collection_repository import (
    CollectionRepository,
)
from coinnavigator.infrastructure.persistence.repositories.preference_repository import (
    PreferenceRepository,
)

__all__ = [
    "CoinRepository",
    "CollectionRepository",
    "PreferenceRepository",
]
