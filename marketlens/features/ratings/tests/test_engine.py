"""Unit tests for RatingStatisticsEngine."""

from datetime import UTC, datetime

from marketlens.features.bucketing.schemas import TimeRange
from marketlens.features.records.models import parse_feedback


class TestStatistics:
    """Tests for feedback summaries."""

    def test_known_ratings(self, engine, feedback) -> None:
        """[5, 5, 4, 1] averages 3.75."""
        stats = engine.statistics(feedback)

        assert stats.total == 4
        assert stats.average == 3.75
        assert stats.distribution == {1: 1, 2: 0, 3: 0, 4: 1, 5: 2}

    def test_reply_rate(self, engine, feedback) -> None:
        """Two of four records were replied to."""
        stats = engine.statistics(feedback)

        assert stats.reply_count == 2
        assert stats.reply_rate == 50.0

    def test_empty_input(self, engine) -> None:
        """Zero values and a zero-filled distribution, never NaN."""
        stats = engine.statistics([])

        assert stats.total == 0
        assert stats.average == 0.0
        assert stats.reply_rate == 0.0
        assert stats.distribution == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
        assert stats.distribution_percentages == {1: 0.0, 2: 0.0, 3: 0.0, 4: 0.0, 5: 0.0}

    def test_fractional_and_out_of_range_ratings(self, engine) -> None:
        """4.7 counts as a 4 star; 7 is clamped to 5 and 0 to 1."""
        records = [
            parse_feedback({"rating": value, "timestamp": "2024-03-01T00:00:00Z"})
            for value in (4.7, 7, 0)
        ]
        stats = engine.statistics(records)

        assert stats.distribution == {1: 1, 2: 0, 3: 0, 4: 1, 5: 1}
        assert stats.average == (4.7 + 5 + 1) / 3

    def test_distribution_percentages(self, engine, feedback) -> None:
        """Each star's share of the total."""
        shares = engine.statistics(feedback).distribution_percentages

        assert shares[5] == 50.0
        assert shares[1] == 25.0
        assert sum(shares.values()) == 100.0


class TestStatisticsForRange:
    """Tests for time-filtered statistics."""

    def test_filters_half_open_range(self, engine, feedback) -> None:
        """The record exactly at the end instant is excluded."""
        time_range = TimeRange(
            start=datetime(2024, 3, 5, 10, tzinfo=UTC),
            end=datetime(2024, 3, 20, 10, tzinfo=UTC),
        )
        stats = engine.statistics_for_range(feedback, time_range)

        assert stats.total == 2
        assert stats.average == 4.5
        assert stats.reply_rate == 50.0

    def test_inverted_range_is_empty(self, engine, feedback) -> None:
        """start > end yields an empty result, not an error."""
        time_range = TimeRange(
            start=datetime(2024, 4, 1, tzinfo=UTC),
            end=datetime(2024, 3, 1, tzinfo=UTC),
        )
        assert engine.statistics_for_range(feedback, time_range).total == 0
