"""Test fixtures for the records module."""

from typing import Any

import pytest

from marketlens.features.records.store import InMemoryRecordStore


@pytest.fixture
def order_document() -> dict[str, Any]:
    """A well-formed order document as stored (camelCase keys)."""
    return {
        "orderId": "O001",
        "customerId": "C0001",
        "totalPrice": 31.8,
        "status": "Pending",
        "orderDate": {"seconds": 1710504000, "nanoseconds": 0},  # 2024-03-15T12:00:00Z
        "paymentMethod": "cash",
        "vendorIds": ["V0001", "V0002"],
    }


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    """A small store with three orders, one of them undated."""
    return InMemoryRecordStore(
        orders=[
            {"orderId": "O001", "totalPrice": 10, "orderDate": "2024-03-01T10:00:00Z",
             "vendorIds": ["V0001"]},
            {"orderId": "O002", "totalPrice": 20, "orderDate": "2024-03-05T10:00:00Z",
             "vendorIds": ["V0002"]},
            {"orderId": "O003", "totalPrice": 30, "orderDate": "not a date"},
        ],
        line_items=[
            {"orderId": "O001", "productId": "P1", "subtotal": 10},
            {"orderId": "O002", "productId": "P2", "subtotal": 20},
        ],
        product_owners={"P1": "V0001", "P2": "V0002"},
        feedback=[
            {"feedbackId": "F1", "vendorId": "V0001", "rating": 5,
             "feedbackDate": "2024-03-02T00:00:00Z"},
            {"feedbackId": "F2", "vendorId": "V0002", "rating": 3,
             "feedbackDate": "2024-03-03T00:00:00Z"},
        ],
        accounts=[
            {"kind": "vendor", "vendorId": "V0001", "vendorName": "Nasi Lemak Corner"},
            {"kind": "customer", "customerId": "C0001", "name": "Aina"},
        ],
    )
