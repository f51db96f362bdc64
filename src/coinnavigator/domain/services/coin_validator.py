"""Coin validation service for turning raw form input into coins.

Validates raw text fields against the attribute registry and either builds a
new coin or reports every field error found in the submission.
"""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from coinnavigator.domain.entities import (
    Coin,
    ordered_attributes,
    required_attributes,
)

REQUIRED_EXPECTED = "required"


def _join_names(names: list[str]) -> str:
    if len(names) <= 2:
        return " or ".join(names)
    return ", ".join(names[:-1]) + ", or " + names[-1]


# Single aggregate field name reported when any required attribute is missing,
# e.g. "name, date, or grade".
REQUIRED_FIELDS_LABEL = _join_names([attribute.name for attribute in required_attributes()])


@dataclass
class FieldError:
    """A single field validation error.

    Attributes:
        field: Attribute name, or the required-fields aggregate label.
        expected: Expected kind: "required", "Integer" or "Double".
    """

    field: str
    expected: str


@dataclass
class ValidationResult:
    """Outcome of validating one submission.

    Attributes:
        errors: Every error found; empty when the submission is valid.
        coin: The built coin when valid, None otherwise.
        created_id: Identity of the coin once it has been stored.
    """

    errors: list[FieldError] = field(default_factory=list)
    coin: Coin | None = None
    created_id: uuid.UUID | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, field_name: str, expected: str) -> None:
        self.errors.append(FieldError(field=field_name, expected=expected))


class CoinValidator:
    """Validator for raw coin input.

    Required attributes must be non-empty after trimming; a missing one yields
    a single aggregate error. Numeric attributes are parsed only when present,
    and absent ones default to zero. Text attributes never fail.
    """

    @classmethod
    def normalize(cls, raw_fields: Mapping[str, Any]) -> dict[str, str]:
        """Trim every registered attribute's raw text, defaulting to empty."""
        values = {}
        for attribute in ordered_attributes():
            raw = raw_fields.get(attribute.name)
            values[attribute.name] = "" if raw is None else str(raw).strip()
        return values

    @classmethod
    def validate_required(cls, values: Mapping[str, str]) -> FieldError | None:
        """Check that every required attribute has a value."""
        missing = [
            attribute.name for attribute in required_attributes() if not values[attribute.name]
        ]
        if missing:
            return FieldError(field=REQUIRED_FIELDS_LABEL, expected=REQUIRED_EXPECTED)
        return None

    @classmethod
    def validate_and_build(cls, raw_fields: Mapping[str, Any]) -> ValidationResult:
        """Validate raw input and build a new coin.

        All checks run before returning so the caller sees every error of the
        submission. No coin is built when any error exists.

        Args:
            raw_fields: Raw text values keyed by attribute name.

        Returns:
            ValidationResult with either ``coin`` set or a non-empty ``errors`` list.
        """
        result = ValidationResult()
        values = cls.normalize(raw_fields)

        required_error = cls.validate_required(values)
        if required_error is not None:
            result.errors.append(required_error)

        parsed: dict[str, Any] = {}
        for attribute in ordered_attributes():
            text = values[attribute.name]
            if not attribute.type.is_numeric:
                parsed[attribute.name] = text
                continue

            if not text:
                parsed[attribute.name] = attribute.type.default
                continue

            try:
                parsed[attribute.name] = attribute.type.parse(text)
            except ValueError:
                result.add_error(attribute.name, attribute.type.expected_label)

        if not result.is_valid:
            return result

        result.coin = Coin(**parsed)
        return result
