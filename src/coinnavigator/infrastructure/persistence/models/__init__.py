"""SQLAlchemy models for CoinNavigator system tables.

All models inherit from the Base class defined in database.py and are
created on startup by ``init_database``.
"""

from coinnavigator.infrastructure.persistence.models.collection import CollectionModel
from coinnavigator.infrastructure.persistence.models.preference import PreferenceModel

__all__ = [
    "CollectionModel",
    "PreferenceModel",
]
