"""Domain entities for CoinNavigator.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from coinnavigator.domain.entities.attribute_registry import (
    ATTRIBUTES,
    Attribute,
    AttributeType,
    attribute_names,
    get_attribute,
    ordered_attributes,
    required_attributes,
)
from coinnavigator.domain.entities.coin import Coin
from coinnavigator.domain.entities.collection import Collection

__all__ = [
    "ATTRIBUTES",
    "Attribute",
    "AttributeType",
    "Coin",
    "Collection",
    "attribute_names",
    "get_attribute",
    "ordered_attributes",
    "required_attributes",
]
