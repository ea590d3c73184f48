"""Tests for monetary helpers."""

from decimal import Decimal

import pytest

from marketlens.shared.money import format_money, quantize_money, safe_ratio, to_decimal


class TestToDecimal:
    """Tests for to_decimal conversion."""

    def test_float_goes_through_str(self) -> None:
        """0.1 should become Decimal('0.1'), not the binary expansion."""
        assert to_decimal(0.1) == Decimal("0.1")

    def test_int_and_str(self) -> None:
        """Ints and numeric strings should convert exactly."""
        assert to_decimal(12) == Decimal("12")
        assert to_decimal("19.90") == Decimal("19.90")

    def test_rejects_garbage(self) -> None:
        """Non-numeric values should raise ValueError."""
        with pytest.raises(ValueError):
            to_decimal("abc")

    def test_rejects_nan_and_bool(self) -> None:
        """NaN and booleans are not amounts."""
        with pytest.raises(ValueError):
            to_decimal(float("nan"))
        with pytest.raises(ValueError):
            to_decimal(True)


class TestQuantizeMoney:
    """Tests for output rounding."""

    def test_round_half_up(self) -> None:
        """Halves should round away from zero."""
        assert quantize_money(Decimal("1.005")) == Decimal("1.01")
        assert quantize_money(Decimal("1.004")) == Decimal("1.00")

    def test_custom_places(self) -> None:
        """Explicit places should override settings."""
        assert quantize_money(Decimal("3.14159"), places=3) == Decimal("3.142")


def test_format_money() -> None:
    """Display strings should carry the symbol and two places."""
    assert format_money(Decimal("1234.5")) == "RM 1,234.50"
    assert format_money(Decimal("2"), symbol="$") == "$ 2.00"


def test_safe_ratio_zero_denominator() -> None:
    """Division by zero should yield exactly 0."""
    assert safe_ratio(Decimal("10"), 0) == Decimal("0")
    assert safe_ratio(Decimal("10"), 4) == Decimal("2.5")
