"""Attribute registry for coin records.

The registry is the single ordered list of editable coin attributes and their
semantic types. Forms, table headers, validation, search and the physical
table schema are all derived from it, so adding an attribute means adding one
entry to ``ATTRIBUTES``.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
REAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

# SQLite stores INTEGER as signed 64-bit
INTEGER_MIN = -(2**63)
INTEGER_MAX = 2**63 - 1


class AttributeType(str, Enum):
    """Semantic types an attribute value can have."""

    TEXT = "text"
    INTEGER = "integer"
    REAL = "real"

    @property
    def sql_type(self) -> str:
        """SQL column type used when building collection tables."""
        return {
            AttributeType.TEXT: "TEXT",
            AttributeType.INTEGER: "INTEGER",
            AttributeType.REAL: "REAL",
        }[self]

    @property
    def expected_label(self) -> str:
        """Label naming the expected kind in field errors."""
        return {
            AttributeType.TEXT: "Text",
            AttributeType.INTEGER: "Integer",
            AttributeType.REAL: "Double",
        }[self]

    @property
    def default(self) -> Any:
        """Value of an attribute that was never set."""
        return {
            AttributeType.TEXT: "",
            AttributeType.INTEGER: 0,
            AttributeType.REAL: 0.0,
        }[self]

    @property
    def is_numeric(self) -> bool:
        return self is not AttributeType.TEXT

    def parse(self, text: str) -> Any:
        """Parse text into a value of this type.

        Integers accept an optional sign followed by ASCII digits. Reals accept
        an optional sign, digits with an optional fraction, and an optional
        exponent. Surrounding whitespace, underscores, ``nan`` and ``inf`` are
        rejected.

        Args:
            text: The raw text.

        Returns:
            The parsed value.

        Raises:
            ValueError: If the text is not a valid value of this type.
        """
        if self is AttributeType.TEXT:
            return text

        if self is AttributeType.INTEGER:
            if not INTEGER_PATTERN.fullmatch(text):
                raise ValueError(f"Invalid integer: {text!r}")
            value = int(text)
            if not INTEGER_MIN <= value <= INTEGER_MAX:
                raise ValueError(f"Integer out of range: {text!r}")
            return value

        if not REAL_PATTERN.fullmatch(text):
            raise ValueError(f"Invalid number: {text!r}")
        value = float(text)
        if not math.isfinite(value):
            raise ValueError(f"Number out of range: {text!r}")
        return value

    def render(self, value: Any) -> str:
        """Render a stored value as text."""
        if value is None:
            return ""
        if self is AttributeType.REAL:
            return repr(float(value))
        return str(value)


@dataclass(frozen=True)
class Attribute:
    """A single editable coin attribute.

    Attributes:
        name: Attribute name, also used as the column name.
        type: Semantic type driving parsing, storage and search.
        required: Whether the attribute must be supplied when creating a coin.
    """

    name: str
    type: AttributeType
    required: bool = False


ATTRIBUTES: tuple[Attribute, ...] = (
    Attribute("name", AttributeType.TEXT, required=True),
    Attribute("date", AttributeType.INTEGER, required=True),
    Attribute("grade", AttributeType.TEXT, required=True),
    Attribute("diameter", AttributeType.REAL),
    Attribute("thickness", AttributeType.REAL),
    Attribute("edge", AttributeType.TEXT),
    Attribute("weight", AttributeType.REAL),
    Attribute("composition", AttributeType.TEXT),
    Attribute("denomination", AttributeType.TEXT),
)


@lru_cache
def ordered_attributes() -> tuple[Attribute, ...]:
    """Return the editable attributes in display order."""
    return ATTRIBUTES


@lru_cache
def _attribute_lookup() -> dict[str, Attribute]:
    return {attribute.name: attribute for attribute in ordered_attributes()}


def get_attribute(name: str) -> Attribute | None:
    """Look up an attribute by name.

    Args:
        name: The attribute name.

    Returns:
        The attribute if registered, None otherwise.
    """
    return _attribute_lookup().get(name)


def attribute_names() -> list[str]:
    """Return the attribute names in display order."""
    return [attribute.name for attribute in ordered_attributes()]


def required_attributes() -> list[Attribute]:
    """Return the attributes that must be supplied when creating a coin."""
    return [attribute for attribute in ordered_attributes() if attribute.required]
