"""
VAT Position Aggregator
Based on Nigeria Tax Act 2025, Section 156 (credit for input tax)

For a filing period:
  - Output VAT: VAT charged on sales (OUTPUT invoices)
  - Input VAT: VAT paid on purchases (INPUT invoices)
  - Net VAT payable = max(0, output - input), remitted by the 21st of the
    following month
  - Excess credit = max(0, input - output), carried forward

Across consecutive periods, excess credit from earlier periods is applied
against later net payable amounts, strictly in period order.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass, field, replace
from datetime import date, datetime
from typing import Any

from smetax.config import get_settings
from smetax.core.errors import InvalidInputError
from smetax.core.formatting import format_naira, format_period, parse_date
from smetax.core.tax_rules.vat import InvoiceType, VATInvoice

logger = logging.getLogger(__name__)


@dataclass
class InvoiceCount:
    output: int
    input: int
    total: int


@dataclass
class VATPosition:
    period: str
    period_start: str
    period_end: str
    output_vat: float
    input_vat: float
    net_vat_payable: float
    excess_credit: float
    invoice_count: InvoiceCount
    summary: list[str] = field(default_factory=list)
    carry_forward_applied: float = 0.0
    # Credit available to the next period once this one is settled
    carry_forward_balance: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PeriodInvoices:
    invoices: Sequence[VATInvoice | Mapping[str, Any]]
    start: date | datetime | str
    end: date | datetime | str


def _as_invoice(invoice: VATInvoice | Mapping[str, Any]) -> VATInvoice:
    if isinstance(invoice, VATInvoice):
        return invoice
    try:
        return VATInvoice.from_dict(invoice)
    except ValueError as e:
        raise InvalidInputError(f"Invalid invoice record: {e}") from e


def _iso(value: date | datetime | str) -> str:
    return value if isinstance(value, str) else parse_date(value).isoformat()


class VATPositionCalculator:
    def __init__(self, currency_symbol: str | None = None, remittance_day: int | None = None):
        settings = get_settings()
        self.currency_symbol = currency_symbol or settings.CURRENCY_SYMBOL
        self.remittance_day = remittance_day or settings.VAT_REMITTANCE_DAY

    def _money(self, amount: float) -> str:
        return format_naira(amount, self.currency_symbol)

    def compute(
        self,
        invoices: Iterable[VATInvoice | Mapping[str, Any]],
        period_start: date | datetime | str,
        period_end: date | datetime | str,
    ) -> VATPosition:
        """
        VAT position for invoices dated within [period_start, period_end],
        both ends inclusive. A period whose start falls after its end is
        rejected with InvalidInputError rather than reported as an empty
        position.
        """
        try:
            start = parse_date(period_start)
            end = parse_date(period_end)
        except ValueError as e:
            raise InvalidInputError(f"Invalid period boundary: {e}") from e
        if start > end:
            raise InvalidInputError("Period start must not be after period end")

        period_invoices = []
        for raw in invoices:
            invoice = _as_invoice(raw)
            try:
                invoice_date = parse_date(invoice.invoice_date)
            except ValueError as e:
                raise InvalidInputError(
                    f"Invoice {invoice.invoice_number} has an invalid date"
                ) from e
            if start <= invoice_date <= end:
                period_invoices.append(invoice)

        output_invoices = [i for i in period_invoices if i.invoice_type == InvoiceType.OUTPUT]
        input_invoices = [i for i in period_invoices if i.invoice_type == InvoiceType.INPUT]

        output_vat = sum(float(i.vat_amount) for i in output_invoices)
        input_vat = sum(float(i.vat_amount) for i in input_invoices)

        net_vat_payable = max(0.0, output_vat - input_vat)
        excess_credit = max(0.0, input_vat - output_vat)

        period = format_period(start, end)
        summary = [
            f"VAT Position for {period}",
            "",
            f"Output VAT (Sales): {self._money(output_vat)}",
            f"  From {len(output_invoices)} sales invoices",
            "",
            f"Input VAT (Purchases): {self._money(input_vat)}",
            f"  From {len(input_invoices)} purchase invoices",
            "",
        ]

        if net_vat_payable > 0:
            summary.append(f"Net VAT Payable: {self._money(net_vat_payable)}")
            summary.append(
                f"Action: Remit to FIRS by {self.remittance_day}{_ordinal_suffix(self.remittance_day)} of following month"
            )
        elif excess_credit > 0:
            summary.append(f"Excess Credit: {self._money(excess_credit)}")
            summary.append("Action: Carry forward to next period")
        else:
            summary.append(f"Net VAT Position: {self._money(0)} (balanced)")

        logger.debug(
            "VAT position %s: output=%s input=%s net=%s excess=%s",
            period,
            output_vat,
            input_vat,
            net_vat_payable,
            excess_credit,
        )

        return VATPosition(
            period=period,
            period_start=_iso(period_start),
            period_end=_iso(period_end),
            output_vat=output_vat,
            input_vat=input_vat,
            net_vat_payable=net_vat_payable,
            excess_credit=excess_credit,
            invoice_count=InvoiceCount(
                output=len(output_invoices),
                input=len(input_invoices),
                total=len(period_invoices),
            ),
            summary=summary,
            carry_forward_balance=excess_credit,
        )

    def compute_cumulative(
        self,
        periods: Iterable[PeriodInvoices | Mapping[str, Any]],
    ) -> list[VATPosition]:
        """
        Fold over periods in order. Credit left over from earlier periods
        reduces later net payable amounts; each period's own excess credit
        joins the pool only after that period has been settled.
        """
        positions: list[VATPosition] = []
        carry_forward_credit = 0.0

        for period in periods:
            if not isinstance(period, PeriodInvoices):
                try:
                    period = PeriodInvoices(
                        invoices=period.get("invoices") or [],
                        start=period["start"],
                        end=period["end"],
                    )
                except KeyError as e:
                    raise InvalidInputError(f"Period is missing its {e.args[0]} date") from e
            position = self.compute(period.invoices, period.start, period.end)

            if carry_forward_credit > 0:
                credit_used = min(carry_forward_credit, position.net_vat_payable)
                carry_forward_credit -= credit_used
                position = replace(
                    position,
                    net_vat_payable=position.net_vat_payable - credit_used,
                    carry_forward_applied=credit_used,
                    summary=position.summary + [
                        "",
                        f"Carry-forward credit applied: {self._money(credit_used)}",
                    ],
                )

            carry_forward_credit += position.excess_credit
            positions.append(replace(position, carry_forward_balance=carry_forward_credit))

        logger.debug(
            "Cumulative VAT position over %d periods, closing credit=%s",
            len(positions),
            carry_forward_credit,
        )
        return positions


def _ordinal_suffix(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def compute_vat_position(
    invoices: Iterable[VATInvoice | Mapping[str, Any]],
    period_start: date | datetime | str,
    period_end: date | datetime | str,
) -> VATPosition:
    return VATPositionCalculator().compute(invoices, period_start, period_end)


def compute_cumulative_vat_position(
    periods: Iterable[PeriodInvoices | Mapping[str, Any]],
) -> list[VATPosition]:
    return VATPositionCalculator().compute_cumulative(periods)
