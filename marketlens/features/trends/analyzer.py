r"""Trend analyzer.

Compares the first and second halves of a series:

    [10, 10, 10, 50, 50, 50]      halves of len // 2 = 3
     \_______/  \_______/
      avg 10     avg 50      -> (50 - 10) / 10 = 4.0 -> increasing

For odd lengths the middle value belongs to neither half.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from marketlens.core.config import get_settings
from marketlens.core.exceptions import ConfigurationError
from marketlens.features.trends.schemas import PeriodChange, TrendDirection, TrendResult
from marketlens.shared.money import ZERO, safe_ratio, to_decimal

HUNDRED = Decimal("100")


class TrendAnalyzer:
    """Classify the direction of change in a series or between two periods."""

    def __init__(self, threshold: Decimal | None = None) -> None:
        """Initialize analyzer.

        Args:
            threshold: Relative change beyond which a series counts as
                increasing or decreasing (defaults to settings, 0.10).

        Raises:
            ConfigurationError: If the threshold is negative.
        """
        if threshold is None:
            threshold = get_settings().trend_threshold
        if threshold < 0:
            raise ConfigurationError(
                f"Trend threshold must be non-negative, got {threshold}",
                details={"threshold": str(threshold)},
            )
        self.threshold = threshold

    def classify(self, relative_change: Decimal) -> TrendDirection:
        """Map a relative change onto a direction using the threshold."""
        if relative_change > self.threshold:
            return TrendDirection.INCREASING
        if relative_change < -self.threshold:
            return TrendDirection.DECREASING
        return TrendDirection.STABLE

    def trend(self, series: Sequence[Decimal | int | float]) -> TrendResult:
        """Compare the averages of the two halves of a series.

        Args:
            series: Ordered values, oldest first.

        Returns:
            TrendResult. Series shorter than 2, or whose first half averages
            0, are stable with magnitude 0.
        """
        half = len(series) // 2
        if half == 0:
            return TrendResult(direction=TrendDirection.STABLE, magnitude=ZERO)

        values = [to_decimal(value) for value in series]
        first_avg = sum(values[:half], ZERO) / half
        second_avg = sum(values[-half:], ZERO) / half
        if first_avg == 0:
            return TrendResult(direction=TrendDirection.STABLE, magnitude=ZERO)

        magnitude = (second_avg - first_avg) / first_avg
        return TrendResult(direction=self.classify(magnitude), magnitude=magnitude)

    def compare(self, current: Decimal, previous: Decimal) -> PeriodChange:
        """Percentage change of ``current`` over ``previous``; 0 when previous is 0."""
        relative = safe_ratio(current - previous, previous)
        return PeriodChange(
            current=current,
            previous=previous,
            change_pct=relative * HUNDRED,
            direction=self.classify(relative),
        )
