"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from pos.domain.exceptions import ValidationError
from pos.domain.model.value_objects import Money, Quantity, round_money


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")

    def test_of_factory_from_string(self):
        m = Money.of("25.99")
        assert m.amount == Decimal("25.99")

    def test_of_factory_from_int(self):
        m = Money.of(10)
        assert m.amount == Decimal("10")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_non_finite_rejected(self):
        with pytest.raises(ValidationError, match="finite"):
            Money(Decimal("NaN"))

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10.5)

    def test_addition(self):
        result = Money.of("10") + Money.of("5.50")
        assert result == Money.of("15.50")

    def test_multiplication_by_int(self):
        assert Money.of("4.50") * 3 == Money.of("13.50")

    def test_multiplication_by_bool_rejected(self):
        with pytest.raises(TypeError):
            Money.of("4.50") * True

    def test_full_precision_kept_until_rounded(self):
        m = Money.of("0.125") * 3
        assert m.amount == Decimal("0.375")
        assert m.rounded() == Decimal("0.38")

    def test_str_shows_cents(self):
        assert str(Money.of("3")) == "$3.00"

    def test_zero(self):
        assert Money.zero().amount == Decimal("0")


class TestRoundMoney:

    def test_half_up(self):
        assert round_money(Decimal("2.345")) == Decimal("2.35")
        assert round_money(Decimal("2.344")) == Decimal("2.34")

    def test_pads_to_cents(self):
        assert str(round_money(Decimal("7"))) == "7.00"


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
            Quantity(1.5)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)
