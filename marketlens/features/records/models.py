"""Typed records parsed from raw record-store documents.

The record store hands out plain mappings (document snapshots). Every
document is validated into an immutable pydantic model here, so the rest of
the engine only ever sees well-formed values:

- Amounts are Decimal and non-negative
- Timestamps are timezone-aware UTC datetimes
- Order statuses are normalized to the canonical OrderStatus enumeration

Documents that fail validation raise MalformedRecordError; callers skip and
count them.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, TypeVar

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from marketlens.core.config import get_settings
from marketlens.core.exceptions import MalformedRecordError
from marketlens.shared.money import to_decimal

# =============================================================================
# Order Status
# =============================================================================


class OrderStatus(str, Enum):
    """Canonical order lifecycle status.

    The first five members form the closed set owned by the order lifecycle.
    UNKNOWN is synthetic: it collects any label outside that set so that
    aggregation stays total-preserving.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @classmethod
    def canonical(cls) -> tuple[OrderStatus, ...]:
        """Statuses of the closed lifecycle set, in lifecycle order."""
        return (cls.PENDING, cls.CONFIRMED, cls.PREPARING, cls.COMPLETED, cls.CANCELLED)

    @classmethod
    def coerce(cls, value: Any) -> OrderStatus:
        """Return value as an OrderStatus, mapping anything unrecognised to UNKNOWN."""
        if isinstance(value, OrderStatus):
            return value
        return normalize_status(value)


def normalize_status(raw: Any, aliases: Mapping[str, str] | None = None) -> OrderStatus:
    """Map a stored status label onto the canonical enumeration.

    Labels are trimmed and lower-cased, then legacy aliases are applied
    (``delivered`` -> ``completed`` by default, see ``Settings.status_aliases``).

    Args:
        raw: Stored status value.
        aliases: Alias table; defaults to the configured one.

    Returns:
        Canonical status, or OrderStatus.UNKNOWN.
    """
    if aliases is None:
        aliases = get_settings().status_aliases
    if not isinstance(raw, str):
        return OrderStatus.UNKNOWN
    label = raw.strip().lower()
    label = aliases.get(label, label)
    try:
        return OrderStatus(label)
    except ValueError:
        return OrderStatus.UNKNOWN


# =============================================================================
# Field Types
# =============================================================================


def coerce_timestamp(value: Any) -> Any:
    """Accept the timestamp shapes found in stored documents.

    Handles ``{"seconds": ..., "nanoseconds": ...}`` mappings and epoch
    seconds. Other values (datetimes, ISO strings) pass through for pydantic
    to parse.
    """
    try:
        if isinstance(value, Mapping) and "seconds" in value:
            seconds = float(value["seconds"]) + float(value.get("nanoseconds", 0)) / 1e9
            return datetime.fromtimestamp(seconds, tz=UTC)
        if isinstance(value, int | float) and not isinstance(value, bool):
            return datetime.fromtimestamp(value, tz=UTC)
    except (TypeError, OverflowError, OSError) as e:
        raise ValueError(f"Unparseable timestamp: {value!r}") from e
    return value


def as_utc(value: datetime) -> datetime:
    """Normalize to UTC; naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _clamp_rating(value: Any) -> float:
    try:
        rating = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Rating must be a number, got {value!r}") from e
    if rating != rating:  # NaN
        raise ValueError("Rating must be a number")
    return min(max(rating, 1.0), 5.0)


UtcDatetime = Annotated[datetime, BeforeValidator(coerce_timestamp), AfterValidator(as_utc)]
Money = Annotated[Decimal, BeforeValidator(to_decimal), Field(ge=0)]
Status = Annotated[OrderStatus, BeforeValidator(OrderStatus.coerce)]
Rating = Annotated[float, BeforeValidator(_clamp_rating)]


def _field(name: str, *extra: str) -> AliasChoices:
    """Accept snake_case, camelCase and any legacy document keys."""
    return AliasChoices(name, to_camel(name), *extra)


class RecordBase(BaseModel):
    """Base for record snapshots: immutable, unknown keys ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


# =============================================================================
# Records
# =============================================================================


class Order(RecordBase):
    """An order as stored by the order lifecycle.

    ``total_price`` is the stored total, which may already include a
    platform-wide service fee. Vendor attribution works from line items instead.
    """

    order_id: str = Field(..., min_length=1, validation_alias=_field("order_id"))
    customer_id: str = Field(default="", validation_alias=_field("customer_id"))
    total_price: Money = Field(..., validation_alias=_field("total_price"))
    status: Status = Field(default=OrderStatus.PENDING, validation_alias=_field("status"))
    order_date: UtcDatetime = Field(..., validation_alias=_field("order_date"))
    payment_method: str = Field(default="", validation_alias=_field("payment_method"))
    vendor_ids: tuple[str, ...] = Field(default=(), validation_alias=_field("vendor_ids"))


class LineItem(RecordBase):
    """One product line of an order (order detail)."""

    order_id: str = Field(default="", validation_alias=_field("order_id"))
    product_id: str = Field(..., min_length=1, validation_alias=_field("product_id"))
    product_name: str = Field(default="", validation_alias=_field("product_name"))
    quantity: int = Field(default=0, ge=0, validation_alias=_field("quantity"))
    unit_price: Money = Field(
        default=Decimal("0"), validation_alias=_field("unit_price", "productPrice")
    )
    subtotal: Money = Field(..., validation_alias=_field("subtotal"))


class FeedbackRecord(RecordBase):
    """Customer feedback on an order, with the vendor's reply flag."""

    feedback_id: str = Field(default="", validation_alias=_field("feedback_id"))
    vendor_id: str = Field(default="", validation_alias=_field("vendor_id"))
    order_id: str = Field(default="", validation_alias=_field("order_id"))
    product_id: str = Field(default="", validation_alias=_field("product_id"))
    rating: Rating = Field(..., validation_alias=_field("rating"))
    timestamp: UtcDatetime = Field(..., validation_alias=_field("timestamp", "feedbackDate"))
    has_vendor_reply: bool = Field(
        default=False, validation_alias=_field("has_vendor_reply", "isReplied")
    )

    @property
    def star(self) -> int:
        """Whole-star bucket (1-5) for distribution charts."""
        return int(self.rating)


# =============================================================================
# Accounts
# =============================================================================


class CustomerAccount(RecordBase):
    """A customer profile."""

    kind: Literal["customer"] = "customer"
    customer_id: str = Field(..., min_length=1, validation_alias=_field("customer_id"))
    name: str = Field(default="", validation_alias=_field("name"))
    email: str = Field(default="", validation_alias=_field("email"))


class VendorAccount(RecordBase):
    """A vendor profile."""

    kind: Literal["vendor"] = "vendor"
    vendor_id: str = Field(..., min_length=1, validation_alias=_field("vendor_id"))
    vendor_name: str = Field(default="", validation_alias=_field("vendor_name"))
    category: str = Field(default="", validation_alias=_field("category"))


UserAccount = Annotated[CustomerAccount | VendorAccount, Field(discriminator="kind")]

_account_adapter: TypeAdapter[CustomerAccount | VendorAccount] = TypeAdapter(UserAccount)


def account_id(account: CustomerAccount | VendorAccount) -> str:
    """Return the identifier of either account kind."""
    match account:
        case CustomerAccount(customer_id=customer_id):
            return customer_id
        case VendorAccount(vendor_id=vendor_id):
            return vendor_id


def display_name(account: CustomerAccount | VendorAccount) -> str:
    """Return a human-readable name, falling back to the account id."""
    match account:
        case CustomerAccount(name=name, customer_id=customer_id):
            return name or customer_id
        case VendorAccount(vendor_name=vendor_name, vendor_id=vendor_id):
            return vendor_name or vendor_id


# =============================================================================
# Parsing
# =============================================================================


T = TypeVar("T", bound=RecordBase)


def _parse(model: type[T], document: Mapping[str, Any]) -> T:
    try:
        return model.model_validate(document)
    except PydanticValidationError as e:
        raise MalformedRecordError(
            f"Malformed {model.__name__} record",
            details={
                "record_type": model.__name__,
                "fields": [".".join(str(p) for p in err["loc"]) for err in e.errors()],
            },
        ) from e


def parse_order(document: Mapping[str, Any]) -> Order:
    """Validate a raw order document.

    Raises:
        MalformedRecordError: On negative totals or missing/unparseable dates.
    """
    return _parse(Order, document)


def parse_line_item(document: Mapping[str, Any]) -> LineItem:
    """Validate a raw order-detail document."""
    return _parse(LineItem, document)


def parse_feedback(document: Mapping[str, Any]) -> FeedbackRecord:
    """Validate a raw feedback document."""
    return _parse(FeedbackRecord, document)


def parse_account(document: Mapping[str, Any]) -> CustomerAccount | VendorAccount:
    """Validate a raw profile document tagged with ``kind``."""
    try:
        return _account_adapter.validate_python(document)
    except PydanticValidationError as e:
        raise MalformedRecordError(
            "Malformed account record",
            details={"record_type": "UserAccount", "kind": document.get("kind")},
        ) from e
