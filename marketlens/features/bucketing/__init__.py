"""Time bucketing: granularities, half-open ranges and gap-free bucket lists."""

from marketlens.features.bucketing.bucketer import TimeWindowBucketer
from marketlens.features.bucketing.schemas import (
    TRAILING_WINDOWS,
    Granularity,
    TimeBucket,
    TimeRange,
)

__all__ = [
    "TRAILING_WINDOWS",
    "Granularity",
    "TimeBucket",
    "TimeRange",
    "TimeWindowBucketer",
]
