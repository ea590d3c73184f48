"""Analytics: the exposed report operations over a record store."""

from marketlens.features.analytics.schemas import (
    PeriodComparison,
    RevenueSeries,
    SalesSummary,
    Scope,
    StatusBreakdown,
    StatusShare,
    TopVendors,
    VendorRanking,
)
from marketlens.features.analytics.service import AnalyticsService

__all__ = [
    "AnalyticsService",
    "PeriodComparison",
    "RevenueSeries",
    "SalesSummary",
    "Scope",
    "StatusBreakdown",
    "StatusShare",
    "TopVendors",
    "VendorRanking",
]
