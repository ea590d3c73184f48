"""Pydantic schemas for aggregated revenue figures.

Rows are read-only snapshots. All monetary values are unrounded Decimals;
call ``rounded()`` when a row leaves the engine for display.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Self

from pydantic import BaseModel, ConfigDict, Field

from marketlens.features.bucketing.schemas import TimeBucket
from marketlens.shared.money import ZERO, quantize_money, safe_ratio

MONEY_FIELDS = (
    "gross_revenue",
    "tax_revenue",
    "fee_revenue",
    "platform_revenue",
    "vendor_revenue",
)


class RevenueFigures(BaseModel):
    """Summed revenue components and order counts.

    ``platform_revenue + vendor_revenue == gross_revenue + tax_revenue``
    holds exactly before rounding.
    """

    model_config = ConfigDict(frozen=True)

    gross_revenue: Decimal = Field(
        default=ZERO,
        description="Sum of attributed gross amounts (before tax and fee).",
    )
    tax_revenue: Decimal = Field(
        default=ZERO,
        description="Tax on the gross amounts.",
    )
    fee_revenue: Decimal = Field(
        default=ZERO,
        description="Service fee on the gross amounts. Not split by commission.",
    )
    platform_revenue: Decimal = Field(
        default=ZERO,
        description="Platform commission taken from gross + tax.",
    )
    vendor_revenue: Decimal = Field(
        default=ZERO,
        description="Vendor share of gross + tax after commission.",
    )
    order_count: int = Field(
        default=0,
        ge=0,
        description="Number of attributed events (orders) summed.",
    )
    status_counts: dict[str, int] = Field(
        default_factory=dict,
        description="Order count per canonical status value, 'unknown' for anything else.",
    )

    @property
    def gross_with_tax(self) -> Decimal:
        """Gross plus tax (the base the commission is taken from)."""
        return self.gross_revenue + self.tax_revenue

    @property
    def average_order_value(self) -> Decimal:
        """Gross per order; 0 when there are no orders."""
        return safe_ratio(self.gross_revenue, self.order_count)

    def rounded(self) -> Self:
        """Copy with every monetary field rounded half-up for display."""
        return self.model_copy(
            update={name: quantize_money(getattr(self, name)) for name in MONEY_FIELDS}
        )


class AggregateRow(RevenueFigures):
    """One bucket's accumulated totals."""

    bucket: TimeBucket = Field(..., description="The time bucket these figures belong to.")


class AggregationResult(BaseModel):
    """Rows of one fold together with the number of events it had to skip."""

    model_config = ConfigDict(frozen=True)

    rows: list[AggregateRow] = Field(
        default_factory=list,
        description="One row per input bucket, in bucket order.",
    )
    skipped: int = Field(
        default=0,
        ge=0,
        description="Malformed events excluded from the sums.",
    )
