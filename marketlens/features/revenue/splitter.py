"""Revenue split calculator.

Breaks a gross amount into tax, service fee, platform commission and vendor
share:

    tax            = gross * tax_rate
    fee            = gross * service_fee_rate
    platform_share = (gross + tax) * commission_rate
    vendor_share   = (gross + tax) - platform_share
    total          = gross + tax + fee

Tax and service fee are independent rates applied to the same base (no
fee-on-tax compounding). The commission is taken from gross + tax; the
service fee is reported on its own and is not split.

CRITICAL: No rounding here. ``platform_share + vendor_share == gross + tax``
holds exactly in Decimal arithmetic; rounding happens at display time.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from marketlens.core.config import get_settings
from marketlens.core.exceptions import ConfigurationError, MalformedRecordError
from marketlens.shared.money import quantize_money


@dataclass(frozen=True)
class RevenueSplit:
    """Breakdown of one gross amount.

    Attributes:
        gross: Amount before tax, fee and commission.
        tax: Tax on the gross amount.
        fee: Service fee on the gross amount.
        platform_share: Platform commission on gross + tax.
        vendor_share: What the vendor keeps of gross + tax.
        total: gross + tax + fee (what the customer pays).
    """

    gross: Decimal
    tax: Decimal
    fee: Decimal
    platform_share: Decimal
    vendor_share: Decimal
    total: Decimal

    @property
    def gross_with_tax(self) -> Decimal:
        """The amount the commission is taken from."""
        return self.gross + self.tax

    def rounded(self) -> RevenueSplit:
        """Copy with every field rounded for display."""
        return RevenueSplit(
            gross=quantize_money(self.gross),
            tax=quantize_money(self.tax),
            fee=quantize_money(self.fee),
            platform_share=quantize_money(self.platform_share),
            vendor_share=quantize_money(self.vendor_share),
            total=quantize_money(self.total),
        )


def _check_rate(name: str, rate: Decimal) -> Decimal:
    if rate < 0 or rate > 1:
        raise ConfigurationError(
            f"{name} must be a fraction in [0, 1], got {rate}",
            details={"rate": name, "value": str(rate)},
        )
    return rate


class RevenueSplitCalculator:
    """Apply commission, tax and service-fee rates to gross amounts.

    Rates default to the configured platform constants (10% commission,
    6% tax, 10% service fee) and can be overridden per instance or per call.
    """

    def __init__(
        self,
        commission_rate: Decimal | None = None,
        tax_rate: Decimal | None = None,
        service_fee_rate: Decimal | None = None,
    ) -> None:
        """Initialize calculator.

        Args:
            commission_rate: Platform commission rate (fraction).
            tax_rate: Tax rate (fraction).
            service_fee_rate: Service fee rate (fraction).

        Raises:
            ConfigurationError: If any rate is outside [0, 1].
        """
        settings = get_settings()
        self.commission_rate = _check_rate(
            "commission_rate",
            settings.commission_rate if commission_rate is None else commission_rate,
        )
        self.tax_rate = _check_rate("tax_rate", settings.tax_rate if tax_rate is None else tax_rate)
        self.service_fee_rate = _check_rate(
            "service_fee_rate",
            settings.service_fee_rate if service_fee_rate is None else service_fee_rate,
        )

    def split(
        self,
        gross: Decimal,
        tax_rate: Decimal | None = None,
        service_fee_rate: Decimal | None = None,
        commission_rate: Decimal | None = None,
    ) -> RevenueSplit:
        """Split a gross amount.

        Args:
            gross: Non-negative amount before tax and fee.
            tax_rate: Override of the instance tax rate.
            service_fee_rate: Override of the instance service fee rate.
            commission_rate: Override of the instance commission rate.

        Returns:
            RevenueSplit with non-negative components.

        Raises:
            MalformedRecordError: If gross is negative.
            ConfigurationError: If an override rate is outside [0, 1].
        """
        if gross < 0:
            raise MalformedRecordError(
                "Gross amount must be non-negative",
                details={"gross": str(gross)},
            )
        tax_rate = self.tax_rate if tax_rate is None else _check_rate("tax_rate", tax_rate)
        service_fee_rate = (
            self.service_fee_rate
            if service_fee_rate is None
            else _check_rate("service_fee_rate", service_fee_rate)
        )
        commission_rate = (
            self.commission_rate
            if commission_rate is None
            else _check_rate("commission_rate", commission_rate)
        )

        tax = gross * tax_rate
        fee = gross * service_fee_rate
        platform_share = (gross + tax) * commission_rate
        vendor_share = (gross + tax) - platform_share

        return RevenueSplit(
            gross=gross,
            tax=tax,
            fee=fee,
            platform_share=platform_share,
            vendor_share=vendor_share,
            total=gross + tax + fee,
        )
