"""Record boundary: typed snapshots of orders, line items, feedback and accounts."""

from marketlens.features.records.models import (
    CustomerAccount,
    FeedbackRecord,
    LineItem,
    Order,
    OrderStatus,
    UserAccount,
    VendorAccount,
    account_id,
    display_name,
    normalize_status,
    parse_account,
    parse_feedback,
    parse_line_item,
    parse_order,
)
from marketlens.features.records.store import (
    Document,
    InMemoryRecordStore,
    OrderFilter,
    RecordStore,
    ensure_record_store,
)

__all__ = [
    "CustomerAccount",
    "Document",
    "FeedbackRecord",
    "InMemoryRecordStore",
    "LineItem",
    "Order",
    "OrderFilter",
    "OrderStatus",
    "RecordStore",
    "UserAccount",
    "VendorAccount",
    "account_id",
    "display_name",
    "ensure_record_store",
    "normalize_status",
    "parse_account",
    "parse_feedback",
    "parse_line_item",
    "parse_order",
]
