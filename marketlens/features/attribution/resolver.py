"""Vendor attribution for multi-vendor orders.

An order can contain products of several vendors. The vendor's share of an
order is the sum of the subtotals of its own line items, never an even split
of the order total across vendors.

Platform view:  one event per order, gross = order.total_price, vendor_id = None
Vendor view:    one event per order with a non-zero vendor subtotal
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal

from marketlens.core.logging import get_logger
from marketlens.features.attribution.events import MonetaryEvent
from marketlens.features.records.models import LineItem, Order

logger = get_logger(__name__)


class VendorAttributionResolver:
    """Turn orders and their line items into attributed MonetaryEvents.

    Example:
        >>> resolver = VendorAttributionResolver({"P1": "V0001", "P2": "V0002"})
        >>> events = resolver.attribute(order, items, target_vendor_id="V0001")
    """

    def __init__(self, product_owners: Mapping[str, str]) -> None:
        """Initialize resolver.

        Args:
            product_owners: Mapping of product id to owning vendor id.
        """
        self.product_owners = dict(product_owners)

    def owner_of(self, product_id: str) -> str | None:
        """Vendor owning a product, or None if unknown."""
        return self.product_owners.get(product_id)

    def vendor_subtotals(self, line_items: Iterable[LineItem]) -> dict[str, Decimal]:
        """Sum line-item subtotals per owning vendor.

        Items whose product has no known owner are left out.
        """
        subtotals: dict[str, Decimal] = {}
        for item in line_items:
            vendor_id = self.owner_of(item.product_id)
            if vendor_id is None:
                logger.debug("attribution.unowned_product", product_id=item.product_id)
                continue
            subtotals[vendor_id] = subtotals.get(vendor_id, Decimal("0")) + item.subtotal
        return subtotals

    def attribute(
        self,
        order: Order,
        line_items: Iterable[LineItem],
        target_vendor_id: str | None = None,
    ) -> list[MonetaryEvent]:
        """Attribute one order to the platform or to a single vendor.

        Args:
            order: Validated order.
            line_items: The order's line items.
            target_vendor_id: Vendor to attribute to; None for the platform view.

        Returns:
            Zero or one events. Vendors with no (or only zero-value) items in
            the order get no event at all, so they do not inflate order counts.
        """
        if target_vendor_id is None:
            return [self._event(order, order.total_price, None)]

        subtotal = self.vendor_subtotals(line_items).get(target_vendor_id, Decimal("0"))
        if subtotal == 0:
            return []
        return [self._event(order, subtotal, target_vendor_id)]

    def attribute_all(self, order: Order, line_items: Iterable[LineItem]) -> list[MonetaryEvent]:
        """Attribute one order to every vendor present in it.

        The gross amounts of the returned events sum to the subtotal of the
        order's owned line items.

        Returns:
            One event per vendor with a non-zero subtotal, ordered by vendor id.
        """
        subtotals = self.vendor_subtotals(line_items)
        return [
            self._event(order, subtotal, vendor_id)
            for vendor_id, subtotal in sorted(subtotals.items())
            if subtotal != 0
        ]

    @staticmethod
    def _event(order: Order, gross: Decimal, vendor_id: str | None) -> MonetaryEvent:
        return MonetaryEvent(
            timestamp=order.order_date,
            gross_amount=gross,
            vendor_id=vendor_id,
            order_id=order.order_id,
            status=order.status,
        )
