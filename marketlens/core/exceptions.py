"""Custom exceptions for MarketLens.

Data-shape problems degrade to zero/empty results; only programmer errors
(bad configuration, absurd requests) and store failures are raised to callers.
"""

from typing import Any

# =============================================================================
# Exception Classes
# =============================================================================


class MarketLensError(Exception):
    """Base exception for MarketLens errors.

    All application-specific exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application error.

        Args:
            message: Human-readable error message.
            code: Machine-readable error code.
            details: Additional error context.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class ConfigurationError(MarketLensError):
    """Invalid engine configuration.

    Raised for programmer errors such as a negative tax rate. Never raised
    for the shape of the data being aggregated.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details=details,
        )


class BucketLimitError(ConfigurationError):
    """Requested range would produce more buckets than allowed."""

    def __init__(
        self,
        message: str = "Too many buckets requested",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, details=details)
        self.code = "BUCKET_LIMIT_EXCEEDED"


class MalformedRecordError(MarketLensError):
    """A record cannot take part in aggregation.

    Use for negative amounts or missing/unparseable timestamps. Callers skip
    the record and count it; the computation is never aborted.
    """

    def __init__(
        self,
        message: str = "Malformed record",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="MALFORMED_RECORD",
            details=details,
        )


class RecordStoreError(MarketLensError):
    """Record store operation error.

    Raised by store implementations when fetching fails. Retries belong to
    the store, so the engine propagates this unchanged.
    """

    def __init__(
        self,
        message: str = "Record store operation failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="RECORD_STORE_ERROR",
            details=details,
        )
