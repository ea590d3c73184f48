"""Unit tests for AggregationEngine."""

import itertools
from decimal import Decimal

from marketlens.features.aggregation.engine import average_order_value, totals
from marketlens.features.attribution.events import MonetaryEvent


class TestFold:
    """Tests for folding events into bucket rows."""

    def test_one_row_per_bucket_in_order(self, engine, day_buckets, sample_events) -> None:
        """Rows follow the bucket list, empty buckets included."""
        rows = engine.aggregate(sample_events, day_buckets)

        assert [row.bucket.key for row in rows] == ["2024-03-14", "2024-03-15", "2024-03-16"]
        assert rows[0].order_count == 0
        assert rows[0].gross_revenue == Decimal("0")
        assert rows[0].status_counts == {}

    def test_sums_components(self, engine, day_buckets, sample_events) -> None:
        """Two orders of 100 and 50 on 03-15."""
        row = engine.aggregate(sample_events, day_buckets)[1]

        assert row.order_count == 2
        assert row.gross_revenue == Decimal("150")
        assert row.tax_revenue == Decimal("9")
        assert row.fee_revenue == Decimal("15")
        assert row.platform_revenue == Decimal("15.9")
        assert row.vendor_revenue == Decimal("143.1")
        assert row.status_counts == {"completed": 1, "pending": 1}

    def test_commission_reconstructs_gross_plus_tax(
        self, engine, day_buckets, sample_events
    ) -> None:
        """Platform and vendor shares add up exactly before rounding."""
        for row in engine.aggregate(sample_events, day_buckets):
            assert row.platform_revenue + row.vendor_revenue == row.gross_with_tax

    def test_status_normalization(self, engine, day_buckets, sample_events) -> None:
        """Legacy 'delivered' counts as completed; unrecognised labels as unknown."""
        row = engine.aggregate(sample_events, day_buckets)[2]

        assert row.status_counts == {"cancelled": 1, "completed": 1, "unknown": 1}
        assert sum(row.status_counts.values()) == row.order_count

    def test_permutation_invariance(self, engine, day_buckets, sample_events) -> None:
        """Any ordering of the events yields identical rows."""
        expected = engine.aggregate(sample_events, day_buckets)
        for permutation in itertools.permutations(sample_events):
            assert engine.aggregate(list(permutation), day_buckets) == expected

    def test_out_of_range_dropped_silently(self, make_event, engine, day_buckets) -> None:
        """Events outside every bucket are neither summed nor counted as skipped."""
        events = [make_event(20, "10"), make_event(1, "10")]
        result = engine.fold(events, day_buckets)

        assert all(row.order_count == 0 for row in result.rows)
        assert result.skipped == 0

    def test_clipped_edge_bucket(self, make_event, engine, day_buckets) -> None:
        """Same day key, but before the clipped first bucket starts."""
        events = [make_event(14, "10", hour=10), make_event(14, "20", hour=19)]
        row = engine.aggregate(events, day_buckets)[0]

        assert row.order_count == 1
        assert row.gross_revenue == Decimal("20")

    def test_malformed_events_skipped_and_counted(
        self, make_event, engine, day_buckets
    ) -> None:
        """Negative amounts and missing timestamps never abort the fold."""
        events = [
            make_event(15, "10"),
            make_event(15, "-5"),
            MonetaryEvent(
                timestamp=None, gross_amount=Decimal("7"), vendor_id=None, order_id="O9"
            ),
        ]
        result = engine.fold(events, day_buckets)

        assert result.skipped == 2
        assert result.rows[1].order_count == 1
        assert result.rows[1].gross_revenue == Decimal("10")

    def test_empty_inputs(self, make_event, engine, day_buckets) -> None:
        """No events gives zero rows; no buckets gives no rows."""
        assert all(row.order_count == 0 for row in engine.aggregate([], day_buckets))
        assert engine.aggregate([make_event(15, "10")], []) == []

    def test_accepts_generator(self, engine, day_buckets, sample_events) -> None:
        """Events may be consumed lazily."""
        rows = engine.aggregate((event for event in sample_events), day_buckets)
        assert sum(row.order_count for row in rows) == len(sample_events)


class TestRounding:
    """Tests for display rounding of rows."""

    def test_rounded_row(self, make_event, engine, day_buckets) -> None:
        """19.99 at 6% tax rounds half-up only on output."""
        row = engine.aggregate([make_event(16, "19.99")], day_buckets)[2]

        assert row.tax_revenue == Decimal("1.1994")
        rounded = row.rounded()
        assert rounded.tax_revenue == Decimal("1.20")
        assert rounded.platform_revenue == Decimal("2.12")
        assert rounded.vendor_revenue == Decimal("19.07")
        assert rounded.bucket == row.bucket
        assert rounded.order_count == row.order_count


class TestRowHelpers:
    """Tests for totals and average order value."""

    def test_totals(self, engine, day_buckets, sample_events) -> None:
        """Totals sum every row and merge status counts."""
        summary = totals(engine.aggregate(sample_events, day_buckets))

        assert summary.order_count == 5
        assert summary.gross_revenue == Decimal("212.49")
        assert summary.status_counts["completed"] == 2

    def test_average_order_value(self, make_event, engine, day_buckets) -> None:
        """Gross per order across all rows."""
        events = [make_event(15, "100"), make_event(16, "50")]
        rows = engine.aggregate(events, day_buckets)
        assert average_order_value(rows) == Decimal("75")

    def test_helpers_on_empty(self) -> None:
        """No rows means zero values, never a division error."""
        assert average_order_value([]) == Decimal("0")
        assert totals([]).order_count == 0
        assert totals([]).average_order_value == Decimal("0")


class TestSummarize:
    """Tests for summing events without buckets."""

    def test_summarize_matches_totals(self, engine, day_buckets, sample_events) -> None:
        """Summing all in-range events equals the total of the bucketed rows."""
        assert engine.summarize(sample_events) == totals(
            engine.aggregate(sample_events, day_buckets)
        )

    def test_summarize_skips_malformed(self, make_event, engine) -> None:
        """A negative amount does not reach the sums."""
        summary = engine.summarize([make_event(15, "10"), make_event(15, "-1")])

        assert summary.order_count == 1
        assert summary.gross_revenue == Decimal("10")
