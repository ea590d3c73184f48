"""Aggregation: fold monetary events into per-bucket revenue rows."""

from marketlens.features.aggregation.engine import (
    AggregationEngine,
    average_order_value,
    totals,
)
from marketlens.features.aggregation.schemas import (
    AggregateRow,
    AggregationResult,
    RevenueFigures,
)

__all__ = [
    "AggregateRow",
    "AggregationEngine",
    "AggregationResult",
    "RevenueFigures",
    "average_order_value",
    "totals",
]
