"""Pydantic schemas for trend classification and period comparison."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Enums
# =============================================================================


class TrendDirection(str, Enum):
    """Classified direction of change."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


# =============================================================================
# Results
# =============================================================================


class TrendResult(BaseModel):
    """Direction and relative change between the two halves of a series."""

    model_config = ConfigDict(frozen=True)

    direction: TrendDirection = Field(
        ...,
        description="increasing / decreasing when the change exceeds the threshold.",
    )
    magnitude: Decimal = Field(
        ...,
        description="Signed relative change (second_avg - first_avg) / first_avg. "
        "0 for series shorter than 2 or a zero first half.",
    )


class PeriodChange(BaseModel):
    """A value compared with the same value over the previous period."""

    model_config = ConfigDict(frozen=True)

    current: Decimal = Field(..., description="Value for the current period.")
    previous: Decimal = Field(..., description="Value for the previous period.")
    change_pct: Decimal = Field(
        ...,
        description="Percentage change vs previous. 0 when previous is 0.",
    )
    direction: TrendDirection = Field(..., description="Classified direction of the change.")
