"""Test fixtures for the aggregation module."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from marketlens.features.aggregation.engine import AggregationEngine
from marketlens.features.attribution.events import MonetaryEvent
from marketlens.features.bucketing.bucketer import TimeWindowBucketer
from marketlens.features.bucketing.schemas import Granularity, TimeBucket, TimeRange
from marketlens.features.records.models import OrderStatus
from marketlens.features.revenue.splitter import RevenueSplitCalculator


def _make_event(
    day: int,
    gross: str,
    status: OrderStatus | str = OrderStatus.COMPLETED,
    hour: int = 12,
    order_id: str = "O",
) -> MonetaryEvent:
    """Build an event on 2024-03-<day> at <hour>:00 UTC."""
    return MonetaryEvent(
        timestamp=datetime(2024, 3, day, hour, tzinfo=UTC),
        gross_amount=Decimal(gross),
        vendor_id=None,
        order_id=order_id,
        status=status,
    )


@pytest.fixture
def make_event():
    """Factory for events on a March 2024 day."""
    return _make_event


@pytest.fixture
def engine() -> AggregationEngine:
    """Engine with explicit 10% commission, 6% tax, 10% service fee."""
    splitter = RevenueSplitCalculator(
        commission_rate=Decimal("0.10"),
        tax_rate=Decimal("0.06"),
        service_fee_rate=Decimal("0.10"),
    )
    return AggregationEngine(splitter=splitter, bucketer=TimeWindowBucketer(max_buckets=1000))


@pytest.fixture
def day_buckets() -> list[TimeBucket]:
    """Three day buckets; the first is clipped to start at 18:00."""
    time_range = TimeRange(
        start=datetime(2024, 3, 14, 18, tzinfo=UTC),
        end=datetime(2024, 3, 17, tzinfo=UTC),
    )
    return TimeWindowBucketer().buckets_for(time_range, Granularity.DAY)


@pytest.fixture
def sample_events(make_event) -> list[MonetaryEvent]:
    """Events spread over 03-15 and 03-16 with mixed statuses."""
    return [
        make_event(15, "100", order_id="O1"),
        make_event(15, "50", OrderStatus.PENDING, order_id="O2"),
        make_event(16, "19.99", OrderStatus.CANCELLED, order_id="O3"),
        make_event(16, "30.5", "delivered", order_id="O4"),
        make_event(16, "12", "ready", order_id="O5"),
    ]
