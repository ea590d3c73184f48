"""Pydantic schemas for analytics reports.

These schemas are the engine's outputs: revenue series, status breakdowns,
sales summaries, vendor rankings and period comparisons. Monetary values are
unrounded Decimals; use ``rounded()`` where offered before display.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from marketlens.features.aggregation.schemas import AggregateRow, RevenueFigures
from marketlens.features.bucketing.schemas import Granularity, TimeRange
from marketlens.features.trends.schemas import PeriodChange
from marketlens.shared.money import quantize_money

# =============================================================================
# Scope
# =============================================================================


class Scope(BaseModel):
    """Who a report is about: the whole platform or a single vendor."""

    model_config = ConfigDict(frozen=True)

    vendor_id: str | None = Field(
        None,
        min_length=1,
        description="Vendor to report on. Null means platform-wide.",
    )

    @classmethod
    def platform(cls) -> Scope:
        """Platform-wide scope (whole orders, no vendor split)."""
        return cls()

    @classmethod
    def vendor(cls, vendor_id: str) -> Scope:
        """Single-vendor scope (attributed line-item subtotals)."""
        return cls(vendor_id=vendor_id)

    @property
    def is_platform(self) -> bool:
        return self.vendor_id is None

    def __str__(self) -> str:
        return "platform" if self.vendor_id is None else f"vendor:{self.vendor_id}"


# =============================================================================
# Revenue Series
# =============================================================================


class RevenueSeries(BaseModel):
    """Revenue aggregated per time bucket.

    Use this to chart revenue over a range; every bucket is present, so the
    series has no gaps.
    """

    model_config = ConfigDict(frozen=True)

    scope: Scope = Field(..., description="Platform or vendor the series covers.")
    time_range: TimeRange = Field(..., description="Requested half-open window.")
    granularity: Granularity = Field(..., description="Bucket size.")
    rows: list[AggregateRow] = Field(
        default_factory=list,
        description="One row per bucket, oldest first.",
    )
    totals: RevenueFigures = Field(
        default_factory=RevenueFigures,
        description="All rows collapsed into one summary.",
    )
    skipped: int = Field(
        default=0,
        ge=0,
        description="Malformed records left out of the sums.",
    )

    def values(self, metric: str = "gross_revenue") -> list[Decimal]:
        """One value per bucket of the given row field, for trend analysis."""
        return [Decimal(getattr(row, metric)) for row in self.rows]

    def rounded(self) -> RevenueSeries:
        """Copy with rows and totals rounded for display."""
        return self.model_copy(
            update={
                "rows": [row.rounded() for row in self.rows],
                "totals": self.totals.rounded(),
            }
        )


# =============================================================================
# Order Status Breakdown
# =============================================================================


class StatusShare(BaseModel):
    """Count and share of one order status."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(..., ge=0, description="Orders with this status.")
    percentage: Decimal = Field(
        ...,
        ge=0,
        le=100,
        description="count / total * 100, 0 when there are no orders.",
    )


class StatusBreakdown(BaseModel):
    """Orders per status within a window.

    The five lifecycle statuses are always present (zero-filled); 'unknown'
    appears only when some order carried an unrecognised label.
    """

    model_config = ConfigDict(frozen=True)

    scope: Scope
    time_range: TimeRange
    total: int = Field(default=0, ge=0, description="Orders counted.")
    statuses: dict[str, StatusShare] = Field(default_factory=dict)
    skipped: int = Field(default=0, ge=0)


# =============================================================================
# Sales Summary
# =============================================================================


class SalesSummary(BaseModel):
    """Sales report for a window: totals, per-order averages and recent orders."""

    model_config = ConfigDict(frozen=True)

    scope: Scope
    time_range: TimeRange
    order_count: int = Field(default=0, ge=0)
    total_sales: Decimal = Field(..., description="Gross sales before tax and fee.")
    total_tax: Decimal = Field(..., description="Tax on the gross sales.")
    total_with_tax: Decimal = Field(..., description="Gross sales plus tax.")
    total_fees: Decimal = Field(..., description="Service fee on the gross sales.")
    platform_share: Decimal = Field(..., description="Platform commission.")
    vendor_share: Decimal = Field(..., description="What vendors keep after commission.")
    average_order_value: Decimal = Field(..., description="total_sales / order_count, 0 if none.")
    average_tax: Decimal = Field(..., description="total_tax / order_count, 0 if none.")
    average_with_tax: Decimal = Field(..., description="total_with_tax / order_count, 0 if none.")
    status_counts: dict[str, int] = Field(default_factory=dict)
    recent_order_ids: list[str] = Field(
        default_factory=list,
        description="Most recent order ids, newest first.",
    )
    skipped: int = Field(default=0, ge=0)

    def rounded(self) -> SalesSummary:
        """Copy with every monetary field rounded for display."""
        money = (
            "total_sales",
            "total_tax",
            "total_with_tax",
            "total_fees",
            "platform_share",
            "vendor_share",
            "average_order_value",
            "average_tax",
            "average_with_tax",
        )
        return self.model_copy(update={name: quantize_money(getattr(self, name)) for name in money})


# =============================================================================
# Vendor Ranking
# =============================================================================


class VendorRanking(BaseModel):
    """A vendor's position among all vendors by attributed revenue."""

    model_config = ConfigDict(frozen=True)

    rank: int = Field(..., ge=1, description="Rank by gross revenue (1 = highest).")
    vendor_id: str
    vendor_name: str = Field(default="", description="Display name, falls back to the id.")
    gross_revenue: Decimal = Field(..., description="Sum of the vendor's line-item subtotals.")
    vendor_revenue: Decimal = Field(..., description="Vendor share after commission.")
    order_count: int = Field(..., ge=0)
    revenue_share_pct: Decimal = Field(
        ...,
        ge=0,
        le=100,
        description="Share of all attributed gross revenue in the window.",
    )


class TopVendors(BaseModel):
    """Vendor rankings of a window, highest revenue first."""

    model_config = ConfigDict(frozen=True)

    time_range: TimeRange
    rankings: list[VendorRanking] = Field(
        default_factory=list,
        description="Top vendors ordered by gross revenue. Limited to the requested count.",
    )
    total_vendors: int = Field(
        default=0,
        ge=0,
        description="Vendors with attributed revenue in the window. "
        "May be larger than len(rankings) if results are limited.",
    )
    skipped: int = Field(default=0, ge=0, description="Malformed records left out.")


# =============================================================================
# Period Comparison
# =============================================================================


class PeriodComparison(BaseModel):
    """A window compared with the previous window of equal length."""

    model_config = ConfigDict(frozen=True)

    scope: Scope
    current_range: TimeRange
    previous_range: TimeRange
    revenue: PeriodChange = Field(..., description="Gross revenue change.")
    order_count: PeriodChange = Field(..., description="Order count change.")
    average_order_value: PeriodChange = Field(..., description="Average order value change.")
