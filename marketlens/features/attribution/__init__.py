"""Vendor attribution: split multi-vendor orders into per-vendor MonetaryEvents."""

from marketlens.features.attribution.events import MonetaryEvent
from marketlens.features.attribution.resolver import VendorAttributionResolver

__all__ = [
    "MonetaryEvent",
    "VendorAttributionResolver",
]
