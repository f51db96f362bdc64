"""Unit tests for CoinValidator."""

import pytest

from coinnavigator.domain.services import REQUIRED_FIELDS_LABEL, CoinValidator, FieldError


def test_required_fields_label():
    assert REQUIRED_FIELDS_LABEL == "name, date, or grade"


def test_valid_submission_builds_coin(morgan_fields):
    """A complete submission builds a coin with parsed values."""
    result = CoinValidator.validate_and_build(morgan_fields)

    assert result.is_valid
    assert result.errors == []
    coin = result.coin
    assert coin.name == "Morgan Dollar"
    assert coin.date == 1921
    assert coin.grade == "AU"
    assert coin.diameter == 38.1
    assert coin.weight == 26.73
    assert coin.composition == "90% silver, 10% copper"
    assert result.created_id is None


def test_values_are_trimmed():
    result = CoinValidator.validate_and_build(
        {"name": "  Peace Dollar ", "date": " 1922 ", "grade": "\tMS-63\n", "edge": " Reeded "}
    )

    assert result.is_valid
    assert result.coin.name == "Peace Dollar"
    assert result.coin.date == 1922
    assert result.coin.grade == "MS-63"
    assert result.coin.edge == "Reeded"


def test_optional_fields_default():
    """Missing optional attributes become empty text or zero."""
    result = CoinValidator.validate_and_build({"name": "Buffalo Nickel", "date": "1913", "grade": "F"})

    assert result.is_valid
    assert result.coin.diameter == 0.0
    assert result.coin.thickness == 0.0
    assert result.coin.weight == 0.0
    assert result.coin.edge == ""
    assert result.coin.denomination == ""


def test_each_build_gets_fresh_identity(morgan_fields):
    first = CoinValidator.validate_and_build(morgan_fields)
    second = CoinValidator.validate_and_build(morgan_fields)
    assert first.coin.id != second.coin.id


@pytest.mark.parametrize("missing", ["name", "date", "grade"])
def test_missing_required_field(morgan_fields, missing):
    """Any missing required attribute yields the single aggregate error."""
    morgan_fields[missing] = ""
    result = CoinValidator.validate_and_build(morgan_fields)

    assert not result.is_valid
    assert result.errors == [FieldError(field="name, date, or grade", expected="required")]
    assert result.coin is None


def test_whitespace_only_counts_as_missing(morgan_fields):
    morgan_fields["name"] = "   "
    result = CoinValidator.validate_and_build(morgan_fields)

    assert [e.expected for e in result.errors] == ["required"]


def test_all_required_missing_reports_once():
    result = CoinValidator.validate_and_build({})

    assert len(result.errors) == 1
    assert result.errors[0].field == REQUIRED_FIELDS_LABEL


def test_none_values_treated_as_empty():
    result = CoinValidator.validate_and_build({"name": None, "date": None, "grade": None})
    assert len(result.errors) == 1


def test_non_integer_date(morgan_fields):
    morgan_fields["date"] = "nineteen"
    result = CoinValidator.validate_and_build(morgan_fields)

    assert result.errors == [FieldError(field="date", expected="Integer")]
    assert result.coin is None


def test_fractional_date_is_rejected(morgan_fields):
    morgan_fields["date"] = "1921.5"
    result = CoinValidator.validate_and_build(morgan_fields)

    assert result.errors == [FieldError(field="date", expected="Integer")]


@pytest.mark.parametrize("field_name", ["diameter", "thickness", "weight"])
def test_non_numeric_real(morgan_fields, field_name):
    morgan_fields[field_name] = "about 10"
    result = CoinValidator.validate_and_build(morgan_fields)

    assert result.errors == [FieldError(field=field_name, expected="Double")]


def test_all_errors_collected_in_order(morgan_fields):
    """Every error of the submission is reported, required check first."""
    morgan_fields.update(grade="", diameter="big", thickness="thin", weight="heavy")
    result = CoinValidator.validate_and_build(morgan_fields)

    assert result.errors == [
        FieldError(field=REQUIRED_FIELDS_LABEL, expected="required"),
        FieldError(field="diameter", expected="Double"),
        FieldError(field="thickness", expected="Double"),
        FieldError(field="weight", expected="Double"),
    ]


def test_free_text_never_fails(morgan_fields):
    morgan_fields.update(edge="12345", composition="?!", denomination="")
    result = CoinValidator.validate_and_build(morgan_fields)
    assert result.is_valid


def test_unknown_keys_are_ignored(morgan_fields):
    morgan_fields["mintage"] = "44,690,000"
    result = CoinValidator.validate_and_build(morgan_fields)
    assert result.is_valid


def test_normalize_covers_every_attribute():
    values = CoinValidator.normalize({"name": " x "})
    assert values["name"] == "x"
    assert values["denomination"] == ""
    assert len(values) == 9
