"""Shared utilities used across features."""

from marketlens.shared.money import ZERO, format_money, quantize_money, safe_ratio, to_decimal

__all__ = [
    "ZERO",
    "format_money",
    "quantize_money",
    "safe_ratio",
    "to_decimal",
]
