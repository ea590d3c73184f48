"""Test fixtures for the bucketing module."""

from datetime import UTC, datetime

import pytest

from marketlens.features.bucketing.bucketer import TimeWindowBucketer
from marketlens.features.bucketing.schemas import TimeRange


@pytest.fixture
def bucketer() -> TimeWindowBucketer:
    """Bucketer with the default ceiling."""
    return TimeWindowBucketer()


@pytest.fixture
def reference_instant() -> datetime:
    """Fixed 'now' for window construction (Friday 2024-03-15 13:05 UTC)."""
    return datetime(2024, 3, 15, 13, 5, tzinfo=UTC)


@pytest.fixture
def ragged_range() -> TimeRange:
    """A range that starts and ends mid-bucket for every granularity."""
    return TimeRange(
        start=datetime(2023, 11, 20, 7, 30, tzinfo=UTC),
        end=datetime(2024, 2, 3, 18, 45, tzinfo=UTC),
    )
