"""Unit tests for the Coin entity."""

import uuid

import pytest

from coinnavigator.domain.entities import Coin


def test_new_coin_defaults():
    """A fresh coin has empty text, zero numbers and no images."""
    coin = Coin()

    assert isinstance(coin.id, uuid.UUID)
    assert coin.name == ""
    assert coin.date == 0
    assert coin.diameter == 0.0
    assert coin.obverse_bytes is None
    assert coin.reverse_bytes is None


def test_new_coins_get_distinct_identities():
    """Each coin gets its own identity."""
    assert Coin().id != Coin().id


def test_equality_is_by_identity():
    """Coins with the same identity are equal regardless of attributes."""
    coin_id = uuid.uuid4()
    first = Coin(id=coin_id, name="Morgan Dollar")
    second = Coin(id=coin_id, name="Peace Dollar")

    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second}) == 1


def test_same_attributes_different_identity_not_equal():
    """Identical attribute values do not make two coins equal."""
    assert Coin(name="Morgan Dollar", date=1921) != Coin(name="Morgan Dollar", date=1921)


def test_coin_not_equal_to_other_types():
    coin = Coin()
    assert coin != str(coin.id)


class TestGetAttributeValue:
    """Tests for reading attributes as text."""

    def test_text_attribute(self):
        coin = Coin(name="Morgan Dollar")
        assert coin.get_attribute_value("name") == "Morgan Dollar"

    def test_integer_attribute(self):
        coin = Coin(date=1921)
        assert coin.get_attribute_value("date") == "1921"

    def test_real_attribute(self):
        coin = Coin(diameter=38.1)
        assert coin.get_attribute_value("diameter") == "38.1"

    def test_unset_real_renders_zero(self):
        assert Coin().get_attribute_value("weight") == "0.0"

    def test_unknown_attribute_returns_empty(self):
        assert Coin(name="Morgan Dollar").get_attribute_value("mintage") == ""

    def test_identity_is_not_an_attribute(self):
        assert Coin().get_attribute_value("id") == ""


class TestSetAttributeValue:
    """Tests for setting attributes from text."""

    def test_set_text_keeps_value_verbatim(self):
        coin = Coin()
        assert coin.set_attribute_value("edge", "  Reeded ") is True
        assert coin.edge == "  Reeded "

    def test_set_integer(self):
        coin = Coin()
        assert coin.set_attribute_value("date", "1921") is True
        assert coin.date == 1921

    @pytest.mark.parametrize("text,expected", [("+5", 5), ("-44", -44), ("007", 7)])
    def test_set_integer_with_sign_or_leading_zeros(self, text, expected):
        coin = Coin()
        assert coin.set_attribute_value("date", text) is True
        assert coin.date == expected

    @pytest.mark.parametrize("text", ["19.5", " 1921", "1921 ", "", "abc", "1_000", "0x10", "9223372036854775808"])
    def test_set_integer_rejects_bad_text(self, text):
        coin = Coin(date=1878)
        assert coin.set_attribute_value("date", text) is False
        assert coin.date == 1878

    @pytest.mark.parametrize(
        "text,expected",
        [("38.1", 38.1), ("38.10000", 38.1), ("38", 38.0), (".5", 0.5), ("1e3", 1000.0), ("-2.5E-1", -0.25)],
    )
    def test_set_real(self, text, expected):
        coin = Coin()
        assert coin.set_attribute_value("diameter", text) is True
        assert coin.diameter == expected

    @pytest.mark.parametrize("text", ["nan", "inf", "-Infinity", "1e999", "abc", "", " 1.5", "1,5"])
    def test_set_real_rejects_bad_text(self, text):
        coin = Coin(weight=26.73)
        assert coin.set_attribute_value("weight", text) is False
        assert coin.weight == 26.73

    def test_unknown_attribute_is_rejected(self):
        coin = Coin(name="Morgan Dollar")
        assert coin.set_attribute_value("mintage", "100") is False
        assert not hasattr(coin, "mintage")

    def test_none_text_is_rejected(self):
        coin = Coin(name="Morgan Dollar")
        assert coin.set_attribute_value("name", None) is False
        assert coin.name == "Morgan Dollar"

    def test_set_then_get_round_trip(self):
        coin = Coin()
        coin.set_attribute_value("weight", "26.73")
        assert coin.get_attribute_value("weight") == "26.73"


def test_get_value_returns_typed_value():
    coin = Coin(date=1921, diameter=38.1)
    assert coin.get_value("date") == 1921
    assert coin.get_value("diameter") == 38.1
    assert coin.get_value("obverse_bytes") is None


def test_to_dict_in_display_order():
    """to_dict lists the identity first, then attributes in registry order."""
    coin = Coin(name="Morgan Dollar", date=1921)
    data = coin.to_dict()

    assert list(data) == [
        "id", "name", "date", "grade", "diameter", "thickness",
        "edge", "weight", "composition", "denomination",
    ]
    assert data["id"] == str(coin.id)
    assert data["date"] == 1921


def test_str_lists_every_attribute():
    coin = Coin(name="Morgan Dollar", date=1921, grade="AU")
    rendered = str(coin)

    assert rendered.startswith(f"Coin{{id={coin.id}, name=Morgan Dollar, date=1921, grade=AU")
    assert rendered.endswith("denomination=}")


def test_repr_omits_image_bytes():
    coin = Coin(obverse_bytes=b"\x89PNG" * 100)
    assert "PNG" not in repr(coin)
