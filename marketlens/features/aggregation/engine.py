"""Aggregation engine.

Folds attributed MonetaryEvents into one AggregateRow per time bucket.

Algorithm (single pass):
    1. Build key -> position from the bucket list
    2. For each event: skip if malformed, look up its bucket by key, drop it
       if it lies outside the (possibly clipped) bucket, else accumulate
    3. Freeze every accumulator into an immutable row, in bucket order

CRITICAL: Pure summation. The result does not depend on event order.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from marketlens.core.exceptions import MalformedRecordError
from marketlens.core.logging import get_logger
from marketlens.features.aggregation.schemas import (
    AggregateRow,
    AggregationResult,
    RevenueFigures,
)
from marketlens.features.attribution.events import MonetaryEvent
from marketlens.features.bucketing.bucketer import TimeWindowBucketer
from marketlens.features.bucketing.schemas import TimeBucket
from marketlens.features.records.models import OrderStatus
from marketlens.features.revenue.splitter import RevenueSplit, RevenueSplitCalculator
from marketlens.shared.money import ZERO, safe_ratio

logger = get_logger(__name__)


@dataclass
class _Accumulator:
    """Mutable running sums for one bucket, used only during a fold."""

    gross: Decimal = ZERO
    tax: Decimal = ZERO
    fee: Decimal = ZERO
    platform: Decimal = ZERO
    vendor: Decimal = ZERO
    order_count: int = 0
    status_counts: Counter[str] = field(default_factory=Counter)

    def add(self, split: RevenueSplit, status: OrderStatus) -> None:
        self.gross += split.gross
        self.tax += split.tax
        self.fee += split.fee
        self.platform += split.platform_share
        self.vendor += split.vendor_share
        self.order_count += 1
        self.status_counts[status.value] += 1

    def merge(self, figures: RevenueFigures) -> None:
        self.gross += figures.gross_revenue
        self.tax += figures.tax_revenue
        self.fee += figures.fee_revenue
        self.platform += figures.platform_revenue
        self.vendor += figures.vendor_revenue
        self.order_count += figures.order_count
        self.status_counts.update(figures.status_counts)

    def values(self) -> dict[str, Any]:
        return {
            "gross_revenue": self.gross,
            "tax_revenue": self.tax,
            "fee_revenue": self.fee,
            "platform_revenue": self.platform,
            "vendor_revenue": self.vendor,
            "order_count": self.order_count,
            "status_counts": dict(sorted(self.status_counts.items())),
        }

    def freeze(self, bucket: TimeBucket) -> AggregateRow:
        return AggregateRow(bucket=bucket, **self.values())


def _check_event(event: MonetaryEvent) -> None:
    if event.timestamp is None:
        raise MalformedRecordError(
            "Event has no timestamp",
            details={"order_id": event.order_id},
        )
    if event.gross_amount < 0:
        raise MalformedRecordError(
            "Event has a negative amount",
            details={"order_id": event.order_id, "gross": str(event.gross_amount)},
        )


class AggregationEngine:
    """Bucket and sum monetary events.

    Example:
        >>> engine = AggregationEngine()
        >>> buckets = TimeWindowBucketer().buckets_for(time_range, Granularity.DAY)
        >>> result = engine.fold(events, buckets)
        >>> result.rows[0].gross_revenue, result.skipped
    """

    def __init__(
        self,
        splitter: RevenueSplitCalculator | None = None,
        bucketer: TimeWindowBucketer | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            splitter: Calculator for tax, fee and commission (configured rates by default).
            bucketer: Bucketer whose key function locates events.
        """
        self.splitter = splitter or RevenueSplitCalculator()
        self.bucketer = bucketer or TimeWindowBucketer()

    def fold(
        self, events: Iterable[MonetaryEvent], buckets: Sequence[TimeBucket]
    ) -> AggregationResult:
        """Fold events into one row per bucket.

        Args:
            events: Attributed events, in any order.
            buckets: Ordered buckets of a single granularity (from ``buckets_for``).

        Returns:
            AggregationResult with one row per bucket and the malformed-event count.
            Events outside every bucket are dropped without being counted.
        """
        accumulators = [_Accumulator() for _ in buckets]
        index = self.bucketer.bucket_index(list(buckets))
        granularity = buckets[0].granularity if buckets else None
        skipped = 0
        seen = 0

        for event in events:
            seen += 1
            try:
                _check_event(event)
            except MalformedRecordError as e:
                skipped += 1
                logger.debug("aggregation.event_skipped", reason=e.message, **e.details)
                continue
            if granularity is None:
                continue

            position = index.get(self.bucketer.key_for(event.timestamp, granularity))
            if position is None or not buckets[position].contains(event.timestamp):
                continue
            accumulators[position].add(
                self.splitter.split(event.gross_amount),
                OrderStatus.coerce(event.status),
            )

        logger.debug(
            "aggregation.fold_completed",
            bucket_count=len(buckets),
            event_count=seen,
            skipped=skipped,
        )
        return AggregationResult(
            rows=[acc.freeze(bucket) for acc, bucket in zip(accumulators, buckets, strict=True)],
            skipped=skipped,
        )

    def aggregate(
        self, events: Iterable[MonetaryEvent], buckets: Sequence[TimeBucket]
    ) -> list[AggregateRow]:
        """Fold events and return only the rows."""
        return self.fold(events, buckets).rows

    def summarize(self, events: Iterable[MonetaryEvent]) -> RevenueFigures:
        """Sum events without bucketing them.

        Callers are expected to pass events of one time window already.
        Malformed events are skipped as in ``fold``.
        """
        acc = _Accumulator()
        for event in events:
            try:
                _check_event(event)
            except MalformedRecordError as e:
                logger.debug("aggregation.event_skipped", reason=e.message, **e.details)
                continue
            acc.add(self.splitter.split(event.gross_amount), OrderStatus.coerce(event.status))
        return RevenueFigures(**acc.values())


# =============================================================================
# Row Helpers
# =============================================================================


def totals(rows: Iterable[RevenueFigures]) -> RevenueFigures:
    """Collapse rows into a single summary (zero-valued for no rows)."""
    acc = _Accumulator()
    for row in rows:
        acc.merge(row)
    return RevenueFigures(**acc.values())


def average_order_value(rows: Iterable[RevenueFigures]) -> Decimal:
    """Total gross divided by total order count; 0 when there are no orders."""
    gross = ZERO
    count = 0
    for row in rows:
        gross += row.gross_revenue
        count += row.order_count
    return safe_ratio(gross, count)
