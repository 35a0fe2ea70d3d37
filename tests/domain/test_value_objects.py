"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money, Quantity, SelectedOptions


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "USD"

    def test_of_factory_from_string(self):
        m = Money.of("25.99")
        assert m.amount == Decimal("25.99")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten dollars")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_addition(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")

    def test_subtraction_going_negative_rejected(self):
        with pytest.raises(ValidationError, match="negative amount"):
            Money.of("5") - Money.of("10")

    def test_multiplication_by_int(self):
        assert Money.of("7.50") * 3 == Money.of("22.50")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "USD") + Money(Decimal("5"), "EUR")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"
        assert str(Money.of("9.5")) == "$9.50"

    def test_percent(self):
        assert Money.of("25.50").percent(Decimal("10")).amount == Decimal("2.55")

    def test_rounding_is_half_away_from_zero(self):
        assert Money.of("0.125").rounded() == Money.of("0.13")
        assert Money.of("0.135").rounded() == Money.of("0.14")
        assert Money.of("2.004").rounded() == Money.of("2.00")

    def test_zero(self):
        assert Money.zero().is_zero
        assert not Money.of("0.01").is_zero


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(0)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(-3)

    def test_non_integer_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity("2")  # type: ignore[arg-type]


# ── SelectedOptions ──────────────────────────────────────────────────────────


class TestSelectedOptions:

    def test_equal_by_value(self):
        assert SelectedOptions("M", "red") == SelectedOptions(size="M", color="red")

    def test_str(self):
        assert str(SelectedOptions("M", "red")) == "M/red"
        assert str(SelectedOptions(color="red")) == "red"
        assert str(SelectedOptions()) == ""
