"""Revenue split: tax, service fee, platform commission and vendor share."""

from marketlens.features.revenue.splitter import RevenueSplit, RevenueSplitCalculator

__all__ = [
    "RevenueSplit",
    "RevenueSplitCalculator",
]
