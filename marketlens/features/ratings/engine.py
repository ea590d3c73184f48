"""Rating statistics over customer feedback."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from marketlens.core.logging import get_logger
from marketlens.features.bucketing.schemas import TimeRange
from marketlens.features.records.models import FeedbackRecord

logger = get_logger(__name__)

STARS = (1, 2, 3, 4, 5)


class RatingStats(BaseModel):
    """Summary of a set of feedback records.

    All values are 0 (never NaN) for an empty input, and the distribution
    always has the five keys 1..5.
    """

    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, ge=0, description="Number of feedback records.")
    average: float = Field(default=0.0, ge=0, description="Mean rating, 0 when empty.")
    reply_count: int = Field(default=0, ge=0, description="Records with a vendor reply.")
    reply_rate: float = Field(
        default=0.0,
        ge=0,
        le=100,
        description="reply_count / total * 100, 0 when empty.",
    )
    distribution: dict[int, int] = Field(
        default_factory=lambda: dict.fromkeys(STARS, 0),
        description="Record count per whole star 1..5, zero-filled.",
    )
    skipped: int = Field(default=0, ge=0, description="Malformed feedback records left out.")

    @property
    def distribution_percentages(self) -> dict[int, float]:
        """Share of each star in percent, 0 when empty."""
        if self.total == 0:
            return dict.fromkeys(STARS, 0.0)
        return {star: count / self.total * 100 for star, count in self.distribution.items()}


class RatingStatisticsEngine:
    """Compute rating distribution, average and reply rate."""

    def statistics(self, feedback: Iterable[FeedbackRecord]) -> RatingStats:
        """Summarize feedback.

        Ratings are already clamped to 1..5 by FeedbackRecord; the star
        bucket truncates fractional ratings (4.7 counts as 4).
        """
        distribution = dict.fromkeys(STARS, 0)
        total = 0
        rating_sum = 0.0
        reply_count = 0

        for record in feedback:
            total += 1
            rating_sum += record.rating
            distribution[record.star] += 1
            if record.has_vendor_reply:
                reply_count += 1

        if total == 0:
            return RatingStats()

        return RatingStats(
            total=total,
            average=rating_sum / total,
            reply_count=reply_count,
            reply_rate=reply_count / total * 100,
            distribution=distribution,
        )

    def statistics_for_range(
        self, feedback: Iterable[FeedbackRecord], time_range: TimeRange
    ) -> RatingStats:
        """Summarize only the feedback given within ``[start, end)``."""
        stats = self.statistics(
            record for record in feedback if time_range.contains(record.timestamp)
        )
        logger.debug(
            "ratings.statistics_computed",
            start=time_range.start.isoformat(),
            end=time_range.end.isoformat(),
            total=stats.total,
        )
        return stats
