"""Test fixtures for the analytics module.

Week of 2024-03-10 .. 2024-03-17 (current) and the week before (previous):

    order  date              status     total  line items (owner)
    O1     03-10 09:00       completed  80     P1 30 (V0001), P3 40 (V0002)
    O2     03-11 15:00       delivered  50     P2 50 (V0001), P9 5 (unowned)
    O3     03-12 20:00       cancelled  20     P3 20 (V0002)
    O4     03-13 10:00       ready      25     P1 25 (V0001)
    O5     03-12 12:00       -          -5     malformed
    O6     03-05 12:00       completed  40     P2 40 (V0001)   previous week
    O7     04-01 12:00       completed  99     P1 99 (V0001)   out of range
"""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from marketlens.features.analytics.service import AnalyticsService
from marketlens.features.bucketing.schemas import TimeRange
from marketlens.features.records.store import InMemoryRecordStore
from marketlens.features.revenue.splitter import RevenueSplitCalculator


@pytest.fixture
def marketplace_store() -> InMemoryRecordStore:
    """Store with two vendors, seven orders, feedback and accounts."""
    orders = [
        {
            "orderId": "O1",
            "customerId": "C1",
            "totalPrice": 80,
            "status": "completed",
            "orderDate": "2024-03-10T09:00:00Z",
            "vendorIds": ["V0001", "V0002"],
        },
        {
            "orderId": "O2",
            "customerId": "C2",
            "totalPrice": 50,
            "status": "delivered",
            "orderDate": "2024-03-11T15:00:00Z",
            "vendorIds": ["V0001"],
        },
        {
            "orderId": "O3",
            "customerId": "C1",
            "totalPrice": 20,
            "status": "cancelled",
            "orderDate": "2024-03-12T20:00:00Z",
            "vendorIds": ["V0002"],
        },
        {
            "orderId": "O4",
            "customerId": "C3",
            "totalPrice": 25,
            "status": "ready",
            "orderDate": "2024-03-13T10:00:00Z",
            "vendorIds": ["V0001"],
        },
        {
            "orderId": "O5",
            "totalPrice": -5,
            "status": "pending",
            "orderDate": "2024-03-12T12:00:00Z",
            "vendorIds": ["V0002"],
        },
        {
            "orderId": "O6",
            "totalPrice": 40,
            "status": "completed",
            "orderDate": "2024-03-05T12:00:00Z",
            "vendorIds": ["V0001"],
        },
        {
            "orderId": "O7",
            "totalPrice": 99,
            "status": "completed",
            "orderDate": "2024-04-01T12:00:00Z",
            "vendorIds": ["V0001"],
        },
    ]
    line_items = [
        {"orderId": "O1", "productId": "P1", "quantity": 1, "subtotal": 30},
        {"orderId": "O1", "productId": "P3", "quantity": 2, "subtotal": 40},
        {"orderId": "O2", "productId": "P2", "quantity": 5, "subtotal": 50},
        {"orderId": "O2", "productId": "P9", "quantity": 1, "subtotal": 5},
        {"orderId": "O3", "productId": "P3", "quantity": 1, "subtotal": 20},
        {"orderId": "O4", "productId": "P1", "quantity": 1, "subtotal": 25},
        {"orderId": "O6", "productId": "P2", "quantity": 4, "subtotal": 40},
        {"orderId": "O7", "productId": "P1", "quantity": 3, "subtotal": 99},
    ]
    feedback = [
        {
            "feedbackId": "F1",
            "vendorId": "V0001",
            "rating": 5,
            "feedbackDate": "2024-03-11T18:00:00Z",
            "isReplied": True,
        },
        {"feedbackId": "F2", "vendorId": "V0001", "rating": 4, "timestamp": "2024-03-12T09:00:00Z"},
        {"feedbackId": "F3", "vendorId": "V0002", "rating": 2, "timestamp": "2024-03-12T10:00:00Z"},
        {
            "feedbackId": "F4",
            "vendorId": "V0001",
            "rating": "abc",
            "timestamp": "2024-03-12T11:00:00Z",
        },
        {"feedbackId": "F5", "vendorId": "V0001", "rating": 1, "timestamp": "2024-02-01T00:00:00Z"},
    ]
    accounts = [
        {"kind": "vendor", "vendorId": "V0001", "vendorName": "Kedai Ali"},
        {"kind": "vendor", "vendorId": "V0002"},
        {"kind": "customer", "customerId": "C1", "name": "Siti"},
        {"kind": "robot", "id": "X"},
    ]
    return InMemoryRecordStore(
        orders=orders,
        line_items=line_items,
        product_owners={"P1": "V0001", "P2": "V0001", "P3": "V0002"},
        feedback=feedback,
        accounts=accounts,
    )


@pytest.fixture
def service(marketplace_store) -> AnalyticsService:
    """Service with explicit 10% commission, 6% tax and 10% service fee."""
    splitter = RevenueSplitCalculator(
        commission_rate=Decimal("0.10"),
        tax_rate=Decimal("0.06"),
        service_fee_rate=Decimal("0.10"),
    )
    return AnalyticsService(marketplace_store, splitter=splitter)


@pytest.fixture
def current_week() -> TimeRange:
    """[2024-03-10, 2024-03-17)."""
    return TimeRange(
        start=datetime(2024, 3, 10, tzinfo=UTC),
        end=datetime(2024, 3, 17, tzinfo=UTC),
    )
