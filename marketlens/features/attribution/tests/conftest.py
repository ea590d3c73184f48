"""Test fixtures for the attribution module."""

import pytest

from marketlens.features.attribution.resolver import VendorAttributionResolver
from marketlens.features.records.models import LineItem, Order, parse_line_item, parse_order


@pytest.fixture
def resolver() -> VendorAttributionResolver:
    """Resolver knowing two vendors' products."""
    return VendorAttributionResolver({"P1": "V0001", "P2": "V0001", "P3": "V0002"})


@pytest.fixture
def shared_order() -> Order:
    """An order spanning two vendors; its stored total includes a service fee."""
    return parse_order(
        {
            "orderId": "O010",
            "totalPrice": 71.5,
            "status": "completed",
            "orderDate": "2024-03-15T12:00:00Z",
            "vendorIds": ["V0001", "V0002"],
        }
    )


@pytest.fixture
def shared_items() -> list[LineItem]:
    """Line items of ``shared_order``: 40 for V0001, 25 for V0002."""
    return [
        parse_line_item({"orderId": "O010", "productId": "P1", "quantity": 2, "subtotal": 30}),
        parse_line_item({"orderId": "O010", "productId": "P2", "quantity": 1, "subtotal": 10}),
        parse_line_item({"orderId": "O010", "productId": "P3", "quantity": 1, "subtotal": 25}),
    ]
