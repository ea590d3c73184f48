#!/usr/bin/env python
"""Demonstrate the analytics engine on an in-memory marketplace.

Usage:
    uv run python examples/revenue_report_demo.py

This script demonstrates:
1. Daily revenue series for the platform and for one vendor
2. Trend of the vendor series
3. Order status breakdown
4. Vendor ranking by attributed revenue
5. Week-over-week comparison
"""

import asyncio
from datetime import UTC, datetime

from marketlens.core.logging import configure_logging
from marketlens.features.analytics import AnalyticsService, Scope
from marketlens.features.bucketing import Granularity, TimeRange
from marketlens.features.records import InMemoryRecordStore
from marketlens.shared.money import format_money

REFERENCE_INSTANT = datetime(2024, 3, 17, tzinfo=UTC)


def print_section(title: str) -> None:
    """Print a section header."""
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}\n")


def build_store() -> InMemoryRecordStore:
    """A week of orders from two vendors, one of them sharing an order."""
    orders = [
        {"orderId": "O1", "totalPrice": 80, "status": "completed",
         "orderDate": "2024-03-10T09:00:00Z", "vendorIds": ["V0001", "V0002"]},
        {"orderId": "O2", "totalPrice": 50, "status": "delivered",
         "orderDate": "2024-03-11T15:00:00Z", "vendorIds": ["V0001"]},
        {"orderId": "O3", "totalPrice": 20, "status": "cancelled",
         "orderDate": "2024-03-12T20:00:00Z", "vendorIds": ["V0002"]},
        {"orderId": "O4", "totalPrice": 25, "status": "preparing",
         "orderDate": "2024-03-15T10:00:00Z", "vendorIds": ["V0001"]},
        {"orderId": "O5", "totalPrice": 40, "status": "completed",
         "orderDate": "2024-03-05T12:00:00Z", "vendorIds": ["V0001"]},
    ]
    line_items = [
        {"orderId": "O1", "productId": "P1", "productName": "Nasi Lemak", "subtotal": 30},
        {"orderId": "O1", "productId": "P3", "productName": "Teh Tarik", "subtotal": 40},
        {"orderId": "O2", "productId": "P2", "productName": "Roti Canai", "subtotal": 50},
        {"orderId": "O3", "productId": "P3", "productName": "Teh Tarik", "subtotal": 20},
        {"orderId": "O4", "productId": "P1", "productName": "Nasi Lemak", "subtotal": 25},
        {"orderId": "O5", "productId": "P2", "productName": "Roti Canai", "subtotal": 40},
    ]
    accounts = [
        {"kind": "vendor", "vendorId": "V0001", "vendorName": "Kedai Ali"},
        {"kind": "vendor", "vendorId": "V0002", "vendorName": "Warung Mei"},
    ]
    return InMemoryRecordStore(
        orders=orders,
        line_items=line_items,
        product_owners={"P1": "V0001", "P2": "V0001", "P3": "V0002"},
        accounts=accounts,
    )


async def main() -> int:
    """Run the revenue report demo."""
    configure_logging()
    service = AnalyticsService(build_store())
    last_week = TimeRange.trailing(Granularity.WEEK, REFERENCE_INSTANT)

    print_section("MarketLens - Platform revenue (daily)")
    platform = await service.compute_revenue_series(Scope.platform(), last_week, Granularity.DAY)
    for row in platform.rounded().rows:
        revenue = format_money(row.gross_revenue)
        print(f"  {row.bucket.label}  {revenue:>12}  orders={row.order_count}")
    print(f"\n  Total: {format_money(platform.totals.gross_revenue)}")

    print_section("Vendor V0001 revenue (daily) and trend")
    vendor = await service.compute_revenue_series(Scope.vendor("V0001"), last_week, Granularity.DAY)
    for row in vendor.rounded().rows:
        print(f"  {row.bucket.label}  {format_money(row.vendor_revenue):>12}")
    trend = service.compute_trend(vendor)
    print(f"\n  Trend: {trend.direction.value} ({float(trend.magnitude):+.1%})")

    print_section("Order status breakdown")
    breakdown = await service.compute_order_status_breakdown(Scope.platform(), last_week)
    for status, share in breakdown.statuses.items():
        print(f"  {status:<10} {share.count:>3}  {float(share.percentage):5.1f}%")

    print_section("Top vendors")
    for ranking in (await service.compute_top_vendors(last_week)).rankings:
        print(
            f"  #{ranking.rank} {ranking.vendor_name:<12} "
            f"{format_money(ranking.gross_revenue):>12}  {float(ranking.revenue_share_pct):.1f}%"
        )

    print_section("Week over week")
    comparison = await service.compute_period_comparison(Scope.platform(), last_week)
    print(f"  Revenue: {format_money(comparison.revenue.current)} "
          f"vs {format_money(comparison.revenue.previous)} "
          f"({float(comparison.revenue.change_pct):+.1f}%)")

    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
