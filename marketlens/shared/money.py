"""Decimal helpers for monetary values.

Amounts stay unrounded through every computation. Rounding happens once,
when a value leaves the engine for display.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from marketlens.core.config import get_settings

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Convert a stored number to Decimal without binary float artifacts.

    Args:
        value: int, float, str or Decimal.

    Returns:
        Decimal representation (floats go through ``str`` first).

    Raises:
        ValueError: If the value is not numeric or not finite.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"Not a monetary value: {value!r}")
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"Not a monetary value: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a finite monetary value: {value!r}")
    return result


def quantize_money(value: Decimal, places: int | None = None) -> Decimal:
    """Round a monetary value half-up to the configured number of places."""
    if places is None:
        places = get_settings().money_decimal_places
    exponent = Decimal(1).scaleb(-places)
    return value.quantize(exponent, rounding=ROUND_HALF_UP)


def format_money(value: Decimal, symbol: str | None = None) -> str:
    """Format a value for display, e.g. ``RM 1,234.50``."""
    if symbol is None:
        symbol = get_settings().currency_symbol
    return f"{symbol} {quantize_money(value):,}"


def safe_ratio(numerator: Decimal, denominator: Decimal | int) -> Decimal:
    """Divide, returning exactly 0 when the denominator is 0."""
    if denominator == 0:
        return ZERO
    return numerator / Decimal(denominator)
