"""Core infrastructure: config, logging, exceptions."""

from marketlens.core.config import Settings, get_settings
from marketlens.core.exceptions import (
    BucketLimitError,
    ConfigurationError,
    MalformedRecordError,
    MarketLensError,
    RecordStoreError,
)
from marketlens.core.logging import configure_logging, get_logger, report_context, report_id_ctx

__all__ = [
    "BucketLimitError",
    "ConfigurationError",
    "MalformedRecordError",
    "MarketLensError",
    "RecordStoreError",
    "Settings",
    "configure_logging",
    "get_logger",
    "get_settings",
    "report_context",
    "report_id_ctx",
]
