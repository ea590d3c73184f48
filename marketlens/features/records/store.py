"""Record store interface and in-memory implementation.

The record store is the engine's only source of data. Implementations wrap
a remote document store and own retries, timeouts and network fault
handling; the engine simply awaits them and propagates RecordStoreError.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from marketlens.core.exceptions import RecordStoreError
from marketlens.core.logging import get_logger
from marketlens.features.records.models import as_utc, coerce_timestamp

logger = get_logger(__name__)

Document = Mapping[str, Any]


class OrderFilter(BaseModel):
    """Optional pre-filter passed to ``fetch_orders``.

    Stores may ignore fields they cannot index; the engine always re-checks
    timestamps against bucket boundaries itself.
    """

    model_config = ConfigDict(frozen=True)

    start: datetime | None = Field(None, description="Inclusive lower bound on order date")
    end: datetime | None = Field(None, description="Exclusive upper bound on order date")
    vendor_id: str | None = Field(None, description="Only orders touching this vendor")


@runtime_checkable
class RecordStore(Protocol):
    """Read-only snapshot access to marketplace records.

    All methods return raw documents; validation happens in the engine.
    """

    async def fetch_orders(self, order_filter: OrderFilter | None = None) -> list[Document]:
        """Fetch order documents, optionally pre-filtered."""
        ...

    async def fetch_line_items(self, order_id: str) -> list[Document]:
        """Fetch the order-detail documents of one order."""
        ...

    async def fetch_product_owner(self, product_id: str) -> str | None:
        """Return the vendor id owning a product, or None if unknown."""
        ...

    async def fetch_feedback(self, vendor_id: str | None = None) -> list[Document]:
        """Fetch feedback documents, optionally for one vendor."""
        ...

    async def fetch_accounts(self) -> list[Document]:
        """Fetch customer and vendor profile documents tagged with ``kind``."""
        ...


def _document_timestamp(document: Document, *keys: str) -> datetime | None:
    for key in keys:
        if key in document and document[key] is not None:
            value = coerce_timestamp(document[key])
            if isinstance(value, str):
                try:
                    value = datetime.fromisoformat(value)
                except ValueError:
                    return None
            if isinstance(value, datetime):
                return as_utc(value)
            return None
    return None


class InMemoryRecordStore:
    """RecordStore backed by lists of documents.

    Used by tests and demos. Documents are returned as shallow copies so
    callers cannot mutate the stored snapshot.

    Example:
        >>> store = InMemoryRecordStore(
        ...     orders=[{"orderId": "O001", "totalPrice": 25.0, "orderDate": "2024-03-01"}],
        ...     line_items=[{"orderId": "O001", "productId": "P1", "subtotal": 25.0}],
        ...     product_owners={"P1": "V0001"},
        ... )
    """

    def __init__(
        self,
        orders: Iterable[Document] = (),
        line_items: Iterable[Document] = (),
        product_owners: Mapping[str, str] | None = None,
        feedback: Iterable[Document] = (),
        accounts: Iterable[Document] = (),
    ) -> None:
        """Initialize the store with document snapshots.

        Args:
            orders: Order documents.
            line_items: Order-detail documents; each must carry an order id.
            product_owners: Mapping of product id to vendor id.
            feedback: Feedback documents.
            accounts: Profile documents tagged with ``kind``.
        """
        self._orders = [dict(doc) for doc in orders]
        self._line_items: dict[str, list[dict[str, Any]]] = {}
        for doc in line_items:
            order_id = doc.get("order_id", doc.get("orderId"))
            if not order_id:
                raise RecordStoreError(
                    "Line item document has no order id",
                    details={"document": dict(doc)},
                )
            self._line_items.setdefault(str(order_id), []).append(dict(doc))
        self._product_owners = dict(product_owners or {})
        self._feedback = [dict(doc) for doc in feedback]
        self._accounts = [dict(doc) for doc in accounts]

    async def fetch_orders(self, order_filter: OrderFilter | None = None) -> list[Document]:
        """Fetch order documents matching the filter.

        Documents whose date cannot be read are kept, so that the engine can
        count them as malformed instead of silently losing them.
        """
        if order_filter is None:
            return [dict(doc) for doc in self._orders]

        results: list[Document] = []
        for doc in self._orders:
            if order_filter.vendor_id is not None:
                vendor_ids: Sequence[str] = doc.get("vendor_ids", doc.get("vendorIds")) or ()
                if vendor_ids and order_filter.vendor_id not in vendor_ids:
                    continue
            try:
                order_date = _document_timestamp(doc, "order_date", "orderDate")
            except ValueError:
                order_date = None
            if order_date is not None:
                if order_filter.start is not None and order_date < as_utc(order_filter.start):
                    continue
                if order_filter.end is not None and order_date >= as_utc(order_filter.end):
                    continue
            results.append(dict(doc))

        logger.debug(
            "records.orders_fetched",
            total=len(self._orders),
            matched=len(results),
        )
        return results

    async def fetch_line_items(self, order_id: str) -> list[Document]:
        """Fetch the order-detail documents of one order."""
        return [dict(doc) for doc in self._line_items.get(order_id, [])]

    async def fetch_product_owner(self, product_id: str) -> str | None:
        """Return the vendor id owning a product, or None if unknown."""
        return self._product_owners.get(product_id)

    async def fetch_feedback(self, vendor_id: str | None = None) -> list[Document]:
        """Fetch feedback documents, optionally for one vendor."""
        if vendor_id is None:
            return [dict(doc) for doc in self._feedback]
        return [
            dict(doc)
            for doc in self._feedback
            if doc.get("vendor_id", doc.get("vendorId")) == vendor_id
        ]

    async def fetch_accounts(self) -> list[Document]:
        """Fetch customer and vendor profile documents."""
        return [dict(doc) for doc in self._accounts]


def ensure_record_store(store: Any) -> RecordStore:
    """Check that an object implements the RecordStore protocol.

    Raises:
        RecordStoreError: If a required method is missing.
    """
    if not isinstance(store, RecordStore):
        raise RecordStoreError(
            f"{type(store).__name__} does not implement RecordStore",
            details={"type": type(store).__name__},
        )
    return store
