"""Coin entity.

A coin is the single record type kept in every collection. Besides the named
fields, it offers generic access by attribute name so forms, tables and search
can loop over all attributes without one call per field.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any

from coinnavigator.domain.entities.attribute_registry import (
    get_attribute,
    ordered_attributes,
)


@dataclass(eq=False)
class Coin:
    """A single coin.

    Identity is an opaque UUID generated at creation unless supplied by the
    store when loading. Two coins are equal when their identities are equal.

    Attributes:
        id: Unique identifier within a collection.
        name: Coin name, e.g. "Morgan Dollar".
        date: Year of issue.
        grade: Grade, e.g. "AU" or "MS-63".
        diameter: Diameter in millimetres.
        thickness: Thickness in millimetres.
        edge: Edge description, e.g. "Reeded".
        weight: Weight in grams.
        composition: Metal composition.
        denomination: Face value.
        obverse_bytes: Opaque obverse image data, never interpreted.
        reverse_bytes: Opaque reverse image data, never interpreted.
    """

    id: uuid.UUID = field(default_factory=uuid.uuid4)
    name: str = ""
    date: int = 0
    grade: str = ""
    diameter: float = 0.0
    thickness: float = 0.0
    edge: str = ""
    weight: float = 0.0
    composition: str = ""
    denomination: str = ""
    obverse_bytes: bytes | None = field(default=None, repr=False)
    reverse_bytes: bytes | None = field(default=None, repr=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Coin):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def get_value(self, attribute_name: str) -> Any:
        """Return the typed value of an attribute, or None if unknown."""
        if get_attribute(attribute_name) is None:
            return None
        return getattr(self, attribute_name)

    def get_attribute_value(self, attribute_name: str) -> str:
        """Return an attribute's value rendered as text.

        Never raises: unknown attribute names return an empty string.

        Args:
            attribute_name: Name of a registered attribute.

        Returns:
            The value as text.
        """
        attribute = get_attribute(attribute_name)
        if attribute is None:
            return ""
        return attribute.type.render(getattr(self, attribute_name))

    def set_attribute_value(self, attribute_name: str, text: str) -> bool:
        """Set an attribute from text, parsing it according to its type.

        The coin is left untouched when the attribute is unknown or the text
        does not parse.

        Args:
            attribute_name: Name of a registered attribute.
            text: The new value as text.

        Returns:
            True if the value was stored, False otherwise.
        """
        attribute = get_attribute(attribute_name)
        if attribute is None or text is None:
            return False

        try:
            value = attribute.type.parse(text)
        except ValueError:
            return False

        setattr(self, attribute_name, value)
        return True

    def to_dict(self) -> dict[str, Any]:
        """Return the identity and attribute values in display order."""
        data: dict[str, Any] = {"id": str(self.id)}
        for attribute in ordered_attributes():
            data[attribute.name] = getattr(self, attribute.name)
        return data

    def __str__(self) -> str:
        parts = [f"id={self.id}"]
        for attribute in ordered_attributes():
            parts.append(f"{attribute.name}={self.get_attribute_value(attribute.name)}")
        return "Coin{" + ", ".join(parts) + "}"
