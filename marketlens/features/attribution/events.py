"""The unit the aggregation engine folds over."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from marketlens.features.records.models import OrderStatus


@dataclass(frozen=True)
class MonetaryEvent:
    """An attributed, time-stamped amount.

    Tax, fee, commission and vendor share are derived from ``gross_amount``
    by the revenue split calculator and never stored here.

    Attributes:
        timestamp: When the order was placed (UTC). None marks an event that
            cannot be bucketed.
        gross_amount: Subtotal before tax, fee and commission.
        vendor_id: Vendor the amount belongs to; None for the platform aggregate.
        order_id: Source order.
        status: Order status; labels outside the closed set count as unknown.
    """

    timestamp: datetime | None
    gross_amount: Decimal
    vendor_id: str | None
    order_id: str
    status: OrderStatus | str = OrderStatus.PENDING

    @property
    def is_platform_event(self) -> bool:
        """True for whole-order events of the platform-wide view."""
        return self.vendor_id is None
