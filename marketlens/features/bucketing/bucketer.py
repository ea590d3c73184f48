"""Time window bucketer.

Maps instants to calendar buckets and generates the gap-free bucket list for
a requested range.

CRITICAL: Keys depend only on the UTC instant and the granularity. No locale,
no local time zone, no wall clock.

Bucket generation (day granularity, range 2024-03-14T18:00 .. 2024-03-16T06:00):
    2024-03-14  [03-14T18:00, 03-15T00:00)   first bucket clipped to range start
    2024-03-15  [03-15T00:00, 03-16T00:00)
    2024-03-16  [03-16T00:00, 03-16T06:00)   last bucket clipped to range end
"""

from __future__ import annotations

from datetime import datetime, timedelta

from marketlens.core.config import get_settings
from marketlens.core.exceptions import BucketLimitError
from marketlens.core.logging import get_logger
from marketlens.features.bucketing.schemas import Granularity, TimeBucket, TimeRange
from marketlens.features.records.models import as_utc

logger = get_logger(__name__)


def _add_months(instant: datetime, months: int) -> datetime:
    years, month_index = divmod(instant.month - 1 + months, 12)
    return instant.replace(year=instant.year + years, month=month_index + 1)


class TimeWindowBucketer:
    """Calendar bucketing over UTC instants.

    Weeks are ISO weeks (Monday start, ISO week-numbering year in the key).

    Example:
        >>> bucketer = TimeWindowBucketer()
        >>> bucketer.key_for(datetime(2024, 3, 15, 13, 5, tzinfo=UTC), Granularity.WEEK)
        '2024-W11'
    """

    def __init__(self, max_buckets: int | None = None) -> None:
        """Initialize bucketer.

        Args:
            max_buckets: Ceiling on buckets per request (defaults to settings).
        """
        self.max_buckets = (
            max_buckets if max_buckets is not None else get_settings().analytics_max_buckets
        )

    @staticmethod
    def floor(instant: datetime, granularity: Granularity) -> datetime:
        """Start of the calendar bucket containing ``instant``."""
        instant = as_utc(instant)
        if granularity == Granularity.HOUR:
            return instant.replace(minute=0, second=0, microsecond=0)

        day = instant.replace(hour=0, minute=0, second=0, microsecond=0)
        if granularity == Granularity.DAY:
            return day
        if granularity == Granularity.WEEK:
            return day - timedelta(days=day.weekday())
        if granularity == Granularity.MONTH:
            return day.replace(day=1)
        if granularity == Granularity.QUARTER:
            return day.replace(month=(day.month - 1) // 3 * 3 + 1, day=1)
        # YEAR
        return day.replace(month=1, day=1)

    @staticmethod
    def advance(bucket_start: datetime, granularity: Granularity) -> datetime:
        """Start of the bucket following the one starting at ``bucket_start``."""
        if granularity == Granularity.HOUR:
            return bucket_start + timedelta(hours=1)
        if granularity == Granularity.DAY:
            return bucket_start + timedelta(days=1)
        if granularity == Granularity.WEEK:
            return bucket_start + timedelta(weeks=1)
        if granularity == Granularity.MONTH:
            return _add_months(bucket_start, 1)
        if granularity == Granularity.QUARTER:
            return _add_months(bucket_start, 3)
        # YEAR
        return bucket_start.replace(year=bucket_start.year + 1)

    @staticmethod
    def key_for(instant: datetime, granularity: Granularity) -> str:
        """Deterministic bucket key for an instant.

        Args:
            instant: Any datetime; naive values are taken as UTC.
            granularity: Bucket size.

        Returns:
            Key such as ``2024-03-15T13``, ``2024-03-15``, ``2024-W11``,
            ``2024-03``, ``2024-Q1`` or ``2024``.
        """
        ts = as_utc(instant)
        if granularity == Granularity.HOUR:
            return f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d}T{ts.hour:02d}"
        if granularity == Granularity.DAY:
            return f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d}"
        if granularity == Granularity.WEEK:
            iso = ts.isocalendar()
            return f"{iso.year:04d}-W{iso.week:02d}"
        if granularity == Granularity.MONTH:
            return f"{ts.year:04d}-{ts.month:02d}"
        if granularity == Granularity.QUARTER:
            return f"{ts.year:04d}-Q{(ts.month - 1) // 3 + 1}"
        return f"{ts.year:04d}"

    @staticmethod
    def label_for(instant: datetime, granularity: Granularity) -> str:
        """Short chart label for the bucket containing an instant."""
        ts = as_utc(instant)
        if granularity == Granularity.HOUR:
            return f"{ts.hour:02d}:00"
        if granularity == Granularity.DAY:
            return f"{ts.month:02d}/{ts.day:02d}"
        if granularity == Granularity.WEEK:
            return f"W{ts.isocalendar().week:02d}"
        if granularity == Granularity.MONTH:
            return f"{ts.year:04d}-{ts.month:02d}"
        if granularity == Granularity.QUARTER:
            return f"Q{(ts.month - 1) // 3 + 1} {ts.year:04d}"
        return f"{ts.year:04d}"

    def buckets_for(self, time_range: TimeRange, granularity: Granularity) -> list[TimeBucket]:
        """Generate the ordered, gap-free buckets covering ``time_range``.

        Every bucket is present even when no data will fall into it. The
        first and last buckets are clipped so that together the buckets
        cover exactly ``[start, end)``.

        Args:
            time_range: Requested window.
            granularity: Bucket size.

        Returns:
            Ordered buckets; empty when ``start >= end``.

        Raises:
            BucketLimitError: If more than ``max_buckets`` buckets would be produced.
        """
        if time_range.is_empty:
            return []

        start, end = time_range.start, time_range.end
        buckets: list[TimeBucket] = []
        cursor = self.floor(start, granularity)

        while cursor < end:
            if len(buckets) >= self.max_buckets:
                raise BucketLimitError(
                    f"Range produces more than {self.max_buckets} {granularity.value} buckets",
                    details={
                        "granularity": granularity.value,
                        "start": start.isoformat(),
                        "end": end.isoformat(),
                        "max_buckets": self.max_buckets,
                    },
                )
            following = self.advance(cursor, granularity)
            buckets.append(
                TimeBucket(
                    granularity=granularity,
                    key=self.key_for(cursor, granularity),
                    label=self.label_for(cursor, granularity),
                    start=max(cursor, start),
                    end=min(following, end),
                )
            )
            cursor = following

        logger.debug(
            "bucketing.buckets_generated",
            granularity=granularity.value,
            bucket_count=len(buckets),
        )
        return buckets

    def bucket_index(self, buckets: list[TimeBucket]) -> dict[str, int]:
        """Map each bucket key to its position for O(1) lookup."""
        return {bucket.key: position for position, bucket in enumerate(buckets)}
