"""Service layer for analytics operations.

Fetches a snapshot from the record store, validates it into typed records,
attributes orders to the requested scope and hands the resulting events to
the pure aggregation, trend and rating components.

Record store calls are the only awaits. Every time window is passed in by
the caller; nothing here reads the wall clock.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Awaitable, Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TypeVar

from marketlens.core.config import get_settings
from marketlens.core.exceptions import ConfigurationError, MalformedRecordError
from marketlens.core.logging import get_logger, report_context
from marketlens.features.aggregation.engine import AggregationEngine, totals
from marketlens.features.aggregation.schemas import MONEY_FIELDS
from marketlens.features.analytics.schemas import (
    PeriodComparison,
    RevenueSeries,
    SalesSummary,
    Scope,
    StatusBreakdown,
    StatusShare,
    TopVendors,
    VendorRanking,
)
from marketlens.features.attribution.events import MonetaryEvent
from marketlens.features.attribution.resolver import VendorAttributionResolver
from marketlens.features.bucketing.bucketer import TimeWindowBucketer
from marketlens.features.bucketing.schemas import Granularity, TimeRange
from marketlens.features.ratings.engine import RatingStatisticsEngine, RatingStats
from marketlens.features.records.models import (
    LineItem,
    Order,
    OrderStatus,
    VendorAccount,
    display_name,
    parse_account,
    parse_feedback,
    parse_line_item,
    parse_order,
)
from marketlens.features.records.store import OrderFilter, RecordStore, ensure_record_store
from marketlens.features.revenue.splitter import RevenueSplitCalculator
from marketlens.features.trends.analyzer import TrendAnalyzer
from marketlens.features.trends.schemas import TrendResult
from marketlens.shared.money import ZERO, safe_ratio

logger = get_logger(__name__)

T = TypeVar("T")

HUNDRED = Decimal("100")


@dataclass
class _Snapshot:
    """Validated orders of one window and the events attributed from them."""

    orders: list[Order] = field(default_factory=list)
    events: list[MonetaryEvent] = field(default_factory=list)
    skipped: int = 0


class AnalyticsService:
    """Service for computing marketplace analytics.

    Provides revenue series, trends, rating statistics, status breakdowns,
    sales summaries, vendor rankings and period comparisons. All data access
    goes through the injected RecordStore.

    Example:
        >>> service = AnalyticsService(store)
        >>> series = await service.compute_revenue_series(
        ...     Scope.vendor("V0001"),
        ...     TimeRange.trailing(Granularity.WEEK, reference_instant),
        ...     Granularity.DAY,
        ... )
    """

    def __init__(
        self,
        store: RecordStore,
        splitter: RevenueSplitCalculator | None = None,
        bucketer: TimeWindowBucketer | None = None,
        trend_analyzer: TrendAnalyzer | None = None,
        rating_engine: RatingStatisticsEngine | None = None,
    ) -> None:
        """Initialize analytics service.

        Args:
            store: Source of order, line-item, feedback and account documents.
            splitter: Revenue split calculator (configured rates by default).
            bucketer: Time bucketer (configured bucket ceiling by default).
            trend_analyzer: Trend analyzer (configured threshold by default).
            rating_engine: Rating statistics engine.

        Raises:
            RecordStoreError: If ``store`` does not implement RecordStore.
        """
        self.settings = get_settings()
        self.store = ensure_record_store(store)
        self.splitter = splitter or RevenueSplitCalculator()
        self.bucketer = bucketer or TimeWindowBucketer()
        self.engine = AggregationEngine(splitter=self.splitter, bucketer=self.bucketer)
        self.trend_analyzer = trend_analyzer or TrendAnalyzer()
        self.rating_engine = rating_engine or RatingStatisticsEngine()

    # =========================================================================
    # Exposed operations
    # =========================================================================

    async def compute_revenue_series(
        self,
        scope: Scope,
        time_range: TimeRange,
        granularity: Granularity,
    ) -> RevenueSeries:
        """Compute revenue per time bucket.

        Args:
            scope: Platform-wide or a single vendor.
            time_range: Half-open window; an empty window gives an empty series.
            granularity: Bucket size.

        Returns:
            Gap-free series with totals and the count of skipped records.

        Raises:
            BucketLimitError: If the window holds too many buckets.
            RecordStoreError: If the store fails.
        """
        with report_context():
            buckets = self.bucketer.buckets_for(time_range, granularity)
            if not buckets:
                return RevenueSeries(scope=scope, time_range=time_range, granularity=granularity)

            snapshot = await self._snapshot(scope, time_range)
            result = self.engine.fold(snapshot.events, buckets)
            series = RevenueSeries(
                scope=scope,
                time_range=time_range,
                granularity=granularity,
                rows=result.rows,
                totals=totals(result.rows),
                skipped=snapshot.skipped + result.skipped,
            )

            logger.info(
                "analytics.revenue_series_computed",
                scope=str(scope),
                granularity=granularity.value,
                start=time_range.start.isoformat(),
                end=time_range.end.isoformat(),
                bucket_count=len(buckets),
                order_count=series.totals.order_count,
                gross_revenue=float(series.totals.gross_revenue),
                skipped=series.skipped,
            )
            return series

    def compute_trend(
        self,
        series: RevenueSeries | Sequence[Decimal | int | float],
        metric: str = "gross_revenue",
    ) -> TrendResult:
        """Classify the direction of a series.

        Args:
            series: A revenue series or plain values, oldest first.
            metric: Row field to read when ``series`` is a RevenueSeries.

        Returns:
            Direction and relative change between the two halves.

        Raises:
            ConfigurationError: If ``metric`` is not a row field.
        """
        match series:
            case RevenueSeries():
                if metric not in (*MONEY_FIELDS, "order_count"):
                    raise ConfigurationError(
                        f"Unknown series metric: {metric}",
                        details={"metric": metric},
                    )
                values: Sequence[Decimal | int | float] = series.values(metric)
            case _:
                values = series

        result = self.trend_analyzer.trend(values)
        logger.info(
            "analytics.trend_computed",
            points=len(values),
            direction=result.direction.value,
            magnitude=float(result.magnitude),
        )
        return result

    async def compute_rating_statistics(
        self,
        vendor_id: str | None,
        time_range: TimeRange,
    ) -> RatingStats:
        """Compute rating statistics of a vendor's feedback within a window.

        Args:
            vendor_id: Vendor whose feedback to summarize; None for all feedback.
            time_range: Half-open window on the feedback timestamp.

        Returns:
            Total, average, reply count/rate, the 1..5 distribution and the
            count of malformed feedback records left out.
        """
        with report_context():
            documents = await self.store.fetch_feedback(vendor_id)
            feedback = []
            skipped = 0
            for document in documents:
                try:
                    feedback.append(parse_feedback(document))
                except MalformedRecordError as e:
                    skipped += 1
                    logger.debug("records.feedback_skipped", **e.details)
            self._log_skipped("FeedbackRecord", skipped)

            stats = self.rating_engine.statistics_for_range(feedback, time_range).model_copy(
                update={"skipped": skipped}
            )
            logger.info(
                "analytics.rating_statistics_computed",
                vendor_id=vendor_id,
                total=stats.total,
                average=stats.average,
                reply_rate=stats.reply_rate,
                skipped=stats.skipped,
            )
            return stats

    async def compute_order_status_breakdown(
        self,
        scope: Scope,
        time_range: TimeRange,
    ) -> StatusBreakdown:
        """Count orders per status within a window.

        For a vendor scope only orders with a non-zero attributed subtotal count.

        Returns:
            Count and percentage per status; lifecycle statuses zero-filled.
        """
        with report_context():
            if time_range.is_empty:
                return self._status_breakdown(scope, time_range, [], 0)
            snapshot = await self._snapshot(scope, time_range)
            breakdown = self._status_breakdown(
                scope, time_range, snapshot.events, snapshot.skipped
            )
            logger.info(
                "analytics.status_breakdown_computed",
                scope=str(scope),
                total=breakdown.total,
                skipped=breakdown.skipped,
            )
            return breakdown

    async def compute_sales_summary(
        self,
        scope: Scope,
        time_range: TimeRange,
    ) -> SalesSummary:
        """Summarize sales within a window.

        Totals with and without tax, per-order averages, the platform/vendor
        split and the most recent orders (newest first).
        """
        with report_context():
            snapshot = await self._snapshot(scope, time_range)
            figures = self.engine.summarize(snapshot.events)
            count = figures.order_count
            recent = sorted(
                (event for event in snapshot.events if event.timestamp is not None),
                key=lambda event: (event.timestamp, event.order_id),
                reverse=True,
            )

            summary = SalesSummary(
                scope=scope,
                time_range=time_range,
                order_count=count,
                total_sales=figures.gross_revenue,
                total_tax=figures.tax_revenue,
                total_with_tax=figures.gross_with_tax,
                total_fees=figures.fee_revenue,
                platform_share=figures.platform_revenue,
                vendor_share=figures.vendor_revenue,
                average_order_value=safe_ratio(figures.gross_revenue, count),
                average_tax=safe_ratio(figures.tax_revenue, count),
                average_with_tax=safe_ratio(figures.gross_with_tax, count),
                status_counts=figures.status_counts,
                recent_order_ids=[
                    event.order_id for event in recent[: self.settings.recent_orders_limit]
                ],
                skipped=snapshot.skipped,
            )
            logger.info(
                "analytics.sales_summary_computed",
                scope=str(scope),
                order_count=count,
                total_sales=float(summary.total_sales),
                skipped=summary.skipped,
            )
            return summary

    async def compute_top_vendors(
        self,
        time_range: TimeRange,
        limit: int | None = None,
    ) -> TopVendors:
        """Rank vendors by attributed gross revenue within a window.

        Each order is split across the vendors of its line items, so a vendor
        is credited only with what it actually sold.

        Args:
            time_range: Half-open window on the order date.
            limit: Number of vendors to return (defaults to settings).

        Returns:
            Rankings, highest revenue first, with ties broken by vendor id.
            Also carries the number of ranked vendors and of skipped records.

        Raises:
            ConfigurationError: If ``limit`` is below 1.
        """
        if limit is None:
            limit = self.settings.top_vendors_limit
        if limit < 1:
            raise ConfigurationError(
                f"Vendor ranking limit must be at least 1, got {limit}",
                details={"limit": limit},
            )

        with report_context():
            if time_range.is_empty:
                return TopVendors(time_range=time_range)
            orders, skipped = await self._load_orders(time_range)
            line_items, item_skipped = await self._load_line_items(orders)
            resolver = await self._resolver(line_items)

            by_vendor: dict[str, list[MonetaryEvent]] = defaultdict(list)
            for order in orders:
                for event in resolver.attribute_all(order, line_items.get(order.order_id, [])):
                    if event.vendor_id is not None:
                        by_vendor[event.vendor_id].append(event)

            figures = {
                vendor_id: self.engine.summarize(events) for vendor_id, events in by_vendor.items()
            }
            overall = sum((f.gross_revenue for f in figures.values()), ZERO)
            ordered = sorted(figures.items(), key=lambda item: (-item[1].gross_revenue, item[0]))
            names = await self._vendor_names()

            rankings = [
                VendorRanking(
                    rank=position,
                    vendor_id=vendor_id,
                    vendor_name=names.get(vendor_id, vendor_id),
                    gross_revenue=vendor_figures.gross_revenue,
                    vendor_revenue=vendor_figures.vendor_revenue,
                    order_count=vendor_figures.order_count,
                    revenue_share_pct=safe_ratio(vendor_figures.gross_revenue, overall) * HUNDRED,
                )
                for position, (vendor_id, vendor_figures) in enumerate(ordered[:limit], start=1)
            ]
            result = TopVendors(
                time_range=time_range,
                rankings=rankings,
                total_vendors=len(figures),
                skipped=skipped + item_skipped,
            )
            logger.info(
                "analytics.top_vendors_computed",
                vendor_count=result.total_vendors,
                returned=len(rankings),
                skipped=result.skipped,
            )
            return result

    async def compute_period_comparison(
        self,
        scope: Scope,
        time_range: TimeRange,
    ) -> PeriodComparison:
        """Compare a window with the previous window of equal length.

        Both snapshots are fetched concurrently.

        Returns:
            Changes in gross revenue, order count and average order value.
        """
        with report_context():
            previous_range = time_range.previous()
            current, previous = await asyncio.gather(
                self._snapshot(scope, time_range),
                self._snapshot(scope, previous_range),
            )
            current_figures = self.engine.summarize(current.events)
            previous_figures = self.engine.summarize(previous.events)

            comparison = PeriodComparison(
                scope=scope,
                current_range=time_range,
                previous_range=previous_range,
                revenue=self.trend_analyzer.compare(
                    current_figures.gross_revenue, previous_figures.gross_revenue
                ),
                order_count=self.trend_analyzer.compare(
                    Decimal(current_figures.order_count), Decimal(previous_figures.order_count)
                ),
                average_order_value=self.trend_analyzer.compare(
                    current_figures.average_order_value,
                    previous_figures.average_order_value,
                ),
            )
            logger.info(
                "analytics.period_comparison_computed",
                scope=str(scope),
                revenue_change_pct=float(comparison.revenue.change_pct),
                direction=comparison.revenue.direction.value,
            )
            return comparison

    # =========================================================================
    # Snapshot loading
    # =========================================================================

    async def _snapshot(self, scope: Scope, time_range: TimeRange) -> _Snapshot:
        """Load the orders of a window and attribute them to ``scope``."""
        if time_range.is_empty:
            return _Snapshot()

        orders, skipped = await self._load_orders(time_range, scope.vendor_id)
        if scope.vendor_id is None:
            resolver = VendorAttributionResolver({})
            events = [event for order in orders for event in resolver.attribute(order, ())]
            return _Snapshot(orders=orders, events=events, skipped=skipped)

        line_items, item_skipped = await self._load_line_items(orders)
        resolver = await self._resolver(line_items)
        events = [
            event
            for order in orders
            for event in resolver.attribute(
                order, line_items.get(order.order_id, []), target_vendor_id=scope.vendor_id
            )
        ]
        return _Snapshot(orders=orders, events=events, skipped=skipped + item_skipped)

    async def _load_orders(
        self, time_range: TimeRange, vendor_id: str | None = None
    ) -> tuple[list[Order], int]:
        """Fetch and validate the orders placed within ``time_range``."""
        documents = await self.store.fetch_orders(
            OrderFilter(start=time_range.start, end=time_range.end, vendor_id=vendor_id)
        )
        orders: list[Order] = []
        skipped = 0
        for document in documents:
            try:
                order = parse_order(document)
            except MalformedRecordError as e:
                skipped += 1
                logger.debug("records.order_skipped", **e.details)
                continue
            if time_range.contains(order.order_date):
                orders.append(order)
        self._log_skipped("Order", skipped)
        return orders, skipped

    async def _load_line_items(
        self, orders: Sequence[Order]
    ) -> tuple[dict[str, list[LineItem]], int]:
        """Fetch the line items of every order, a bounded number at a time."""
        batches = await self._bounded_gather(
            self.store.fetch_line_items(order.order_id) for order in orders
        )
        line_items: dict[str, list[LineItem]] = {}
        skipped = 0
        for order, documents in zip(orders, batches, strict=True):
            items = line_items.setdefault(order.order_id, [])
            for document in documents:
                try:
                    items.append(parse_line_item(document))
                except MalformedRecordError as e:
                    skipped += 1
                    logger.debug("records.line_item_skipped", order_id=order.order_id, **e.details)
        self._log_skipped("LineItem", skipped)
        return line_items, skipped

    async def _resolver(
        self, line_items: dict[str, list[LineItem]]
    ) -> VendorAttributionResolver:
        """Look up the owner of each distinct product once."""
        product_ids = sorted({item.product_id for items in line_items.values() for item in items})
        owners = await self._bounded_gather(
            self.store.fetch_product_owner(product_id) for product_id in product_ids
        )
        return VendorAttributionResolver(
            {
                product_id: owner
                for product_id, owner in zip(product_ids, owners, strict=True)
                if owner is not None
            }
        )

    async def _bounded_gather(self, calls: Iterable[Awaitable[T]]) -> list[T]:
        """Await store calls in order, at most ``store_concurrency`` in flight."""
        semaphore = asyncio.Semaphore(self.settings.store_concurrency)

        async def bounded(call: Awaitable[T]) -> T:
            async with semaphore:
                return await call

        return list(await asyncio.gather(*(bounded(call) for call in calls)))

    async def _vendor_names(self) -> dict[str, str]:
        """Display names of vendor accounts; customer and malformed profiles ignored."""
        names: dict[str, str] = {}
        for document in await self.store.fetch_accounts():
            try:
                account = parse_account(document)
            except MalformedRecordError as e:
                logger.debug("records.account_skipped", **e.details)
                continue
            match account:
                case VendorAccount(vendor_id=vendor_id):
                    names[vendor_id] = display_name(account)
                case _:
                    pass
        return names

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _status_breakdown(
        scope: Scope,
        time_range: TimeRange,
        events: Sequence[MonetaryEvent],
        skipped: int,
    ) -> StatusBreakdown:
        counts: dict[OrderStatus, int] = dict.fromkeys(OrderStatus.canonical(), 0)
        for event in events:
            status = OrderStatus.coerce(event.status)
            counts[status] = counts.get(status, 0) + 1

        total = len(events)
        return StatusBreakdown(
            scope=scope,
            time_range=time_range,
            total=total,
            statuses={
                status.value: StatusShare(
                    count=count,
                    percentage=safe_ratio(Decimal(count), total) * HUNDRED,
                )
                for status, count in counts.items()
            },
            skipped=skipped,
        )

    @staticmethod
    def _log_skipped(record_type: str, count: int) -> None:
        if count:
            logger.warning("records.skipped", record_type=record_type, count=count)
