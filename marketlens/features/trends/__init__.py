"""Trends: half-over-half direction of a series and period-over-period change."""

from marketlens.features.trends.analyzer import TrendAnalyzer
from marketlens.features.trends.schemas import PeriodChange, TrendDirection, TrendResult

__all__ = [
    "PeriodChange",
    "TrendAnalyzer",
    "TrendDirection",
    "TrendResult",
]
