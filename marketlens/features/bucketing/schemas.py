"""Pydantic schemas for time windows and buckets.

All instants are UTC. Ranges are half-open: ``[start, end)``.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from marketlens.features.records.models import UtcDatetime, as_utc

# =============================================================================
# Enums
# =============================================================================


class Granularity(str, Enum):
    """Time granularity for revenue series.

    Controls how events are grouped into buckets.
    """

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


# Length of the "last <period>" windows offered by the dashboards
TRAILING_WINDOWS: dict[Granularity, timedelta] = {
    Granularity.HOUR: timedelta(hours=1),
    Granularity.DAY: timedelta(days=1),
    Granularity.WEEK: timedelta(days=7),
    Granularity.MONTH: timedelta(days=30),
    Granularity.QUARTER: timedelta(days=91),
    Granularity.YEAR: timedelta(days=365),
}


# =============================================================================
# Ranges and Buckets
# =============================================================================


class TimeRange(BaseModel):
    """Half-open UTC time window ``[start, end)``.

    A range with ``start >= end`` is legal and simply empty, so callers can
    probe empty windows without special-casing them.
    """

    model_config = ConfigDict(frozen=True)

    start: UtcDatetime = Field(..., description="Inclusive start instant (UTC)")
    end: UtcDatetime = Field(..., description="Exclusive end instant (UTC)")

    @classmethod
    def trailing(cls, period: Granularity, reference_instant: datetime) -> TimeRange:
        """Build the window of one ``period`` ending at ``reference_instant``.

        The reference instant is always passed in; ranges are never derived
        from the wall clock.

        Args:
            period: Window length (day = 24h, week = 7d, month = 30d, year = 365d).
            reference_instant: Exclusive end of the window.

        Returns:
            TimeRange covering ``[reference_instant - period, reference_instant)``.
        """
        end = as_utc(reference_instant)
        return cls(start=end - TRAILING_WINDOWS[period], end=end)

    @property
    def is_empty(self) -> bool:
        """True when the range contains no instants."""
        return self.start >= self.end

    @property
    def duration(self) -> timedelta:
        """Length of the range (zero for empty ranges)."""
        return max(self.end - self.start, timedelta(0))

    def contains(self, instant: datetime) -> bool:
        """Check whether an instant lies in ``[start, end)``."""
        return self.start <= as_utc(instant) < self.end

    def previous(self) -> TimeRange:
        """The adjacent window of equal length ending where this one starts."""
        return TimeRange(start=self.start - self.duration, end=self.start)


class TimeBucket(BaseModel):
    """One interval of a series.

    ``key`` is a deterministic function of the calendar interval; ``label`` is
    a short display string. Edge buckets may be clipped to the requested range,
    so ``start``/``end`` are the effective boundaries.
    """

    model_config = ConfigDict(frozen=True)

    granularity: Granularity = Field(..., description="Calendar unit the bucket belongs to")
    key: str = Field(..., description="Deterministic bucket key, e.g. '2024-03' or '2024-W11'")
    label: str = Field(..., description="Short display label, e.g. '03/15' or '13:00'")
    start: UtcDatetime = Field(..., description="Inclusive start instant (UTC)")
    end: UtcDatetime = Field(..., description="Exclusive end instant (UTC)")

    def contains(self, instant: datetime) -> bool:
        """Check whether an instant lies in ``[start, end)``."""
        return self.start <= as_utc(instant) < self.end
