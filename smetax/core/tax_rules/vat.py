"""
Value Added Tax (VAT) Calculator
Based on Nigeria Tax Act 2025, Chapter 6

VAT Rate (Section 148), by calendar year of supply:
  - 2025: 10%
  - 2026-2029: 12.5%
  - 2030 onwards: 15%

Key provisions:
  - Section 144: Imposition of VAT
  - Section 149: Value of taxable supplies
  - Section 156: Credit for input tax and remission of VAT
  - Section 187: Zero-rated supplies (0%), including basic food items

Basic items on an invoice can be zero-rated two ways, selected by
BasicItemMode:
  - EXPLICIT: only lines flagged is_basic_item=True are zero-rated
  - INFER: an explicit flag wins; unflagged lines are matched against the
    basic item keyword table
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from smetax.core.errors import InvalidInputError, ValidationResult, get_field, is_number
from smetax.core.formatting import parse_date
from smetax.core.tax_rules.keywords import BASIC_ITEM_KEYWORDS, KeywordTable
from smetax.core.tax_rules.rates import ZERO_RATE, get_standard_vat_rate, resolve_year

logger = logging.getLogger(__name__)

# 1 kobo
VAT_TOLERANCE = 0.01


class VATCategory(str, Enum):
    STANDARD = "standard"
    ZERO_RATED = "zero_rated"


class InvoiceType(str, Enum):
    OUTPUT = "OUTPUT"
    INPUT = "INPUT"


class BasicItemMode(str, Enum):
    EXPLICIT = "explicit"
    INFER = "infer"


@dataclass(frozen=True)
class VATLineItem:
    description: str
    quantity: float
    unit_price: float
    is_basic_item: bool | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VATLineItem":
        return cls(
            description=data.get("description", ""),
            quantity=get_field(data, "quantity") or 0,
            unit_price=get_field(data, "unit_price", "unitPrice") or 0,
            is_basic_item=get_field(data, "is_basic_item", "isBasicItem"),
        )


@dataclass(frozen=True)
class CalculatedLineItem:
    description: str
    quantity: float
    unit_price: float
    is_basic_item: bool | None
    category: VATCategory
    applied_rate: float
    line_total: float
    vat: float
    total: float


@dataclass
class VATInvoiceCalculation:
    invoice_number: str
    invoice_date: str
    customer_name: str
    subtotal: float
    vat_rate: float
    vat_amount: float
    total_amount: float
    basic_item_mode: BasicItemMode
    line_items: list[CalculatedLineItem] = field(default_factory=list)


@dataclass(frozen=True)
class VATInvoice:
    """
    Persisted form of an invoice. Never edited once created: corrections
    are issued as new invoices.
    """

    invoice_number: str
    invoice_date: str
    customer_name: str
    gross_amount: float
    vat_rate: float
    vat_amount: float
    total_amount: float
    invoice_type: InvoiceType
    customer_tin: str | None = None
    line_items: tuple[CalculatedLineItem, ...] = ()

    @classmethod
    def from_calculation(
        cls,
        calculation: VATInvoiceCalculation,
        invoice_type: InvoiceType | str,
        customer_tin: str | None = None,
    ) -> "VATInvoice":
        return cls(
            invoice_number=calculation.invoice_number,
            invoice_date=calculation.invoice_date,
            customer_name=calculation.customer_name,
            customer_tin=customer_tin,
            gross_amount=calculation.subtotal,
            vat_rate=calculation.vat_rate,
            vat_amount=calculation.vat_amount,
            total_amount=calculation.total_amount,
            invoice_type=InvoiceType(invoice_type),
            line_items=tuple(calculation.line_items),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VATInvoice":
        """Build from a stored row or API payload (snake_case or camelCase keys)."""
        vat_amount = float(get_field(data, "vat_amount", "vatAmount") or 0)
        gross_amount = float(get_field(data, "gross_amount", "grossAmount") or 0)
        total_amount = get_field(data, "total_amount", "totalAmount")
        return cls(
            invoice_number=get_field(data, "invoice_number", "invoiceNumber") or "",
            invoice_date=str(get_field(data, "invoice_date", "invoiceDate") or ""),
            customer_name=get_field(data, "customer_name", "customerName") or "",
            customer_tin=get_field(data, "customer_tin", "customerTIN"),
            gross_amount=gross_amount,
            vat_rate=float(get_field(data, "vat_rate", "vatRate") or 0),
            vat_amount=vat_amount,
            total_amount=float(total_amount) if total_amount is not None else gross_amount + vat_amount,
            invoice_type=InvoiceType(get_field(data, "invoice_type", "invoiceType")),
        )

    def to_dict(self) -> dict:
        return asdict(self)


class VATCalculator:
    """
    Deterministic VAT calculator for Nigerian businesses.
    No rounding is applied; callers round at storage or display boundaries.
    """

    def __init__(self, basic_item_keywords: KeywordTable = BASIC_ITEM_KEYWORDS):
        self.basic_item_keywords = basic_item_keywords

    def get_vat_rate(self, on: date | datetime | str | int | None = None) -> float:
        return get_standard_vat_rate(resolve_year(on))

    def is_basic_item(self, description: str) -> bool:
        return self.basic_item_keywords.matches(description)

    def get_applicable_vat_rate(
        self,
        description: str,
        on: date | datetime | str | int | None = None,
    ) -> float:
        if self.is_basic_item(description):
            return ZERO_RATE
        return self.get_vat_rate(on)

    def calculate_simple_vat(
        self,
        gross_amount: float,
        on: date | datetime | str | int | None = None,
        is_basic_item: bool = False,
    ) -> float:
        if gross_amount < 0:
            raise InvalidInputError("Gross amount cannot be negative")
        if is_basic_item:
            return 0.0
        return gross_amount * self.get_vat_rate(on)

    def _is_zero_rated(self, item: VATLineItem, mode: BasicItemMode) -> bool:
        if item.is_basic_item is not None:
            return item.is_basic_item is True
        if mode == BasicItemMode.INFER:
            return self.is_basic_item(item.description)
        return False

    def calculate_invoice(
        self,
        invoice_number: str,
        invoice_date: date | datetime | str,
        customer_name: str,
        line_items: Iterable[VATLineItem | Mapping[str, Any]],
        mode: BasicItemMode = BasicItemMode.EXPLICIT,
    ) -> VATInvoiceCalculation:
        try:
            parsed_date = parse_date(invoice_date)
        except ValueError as e:
            raise InvalidInputError(f"Invalid invoice date: {invoice_date!r}") from e

        standard_rate = self.get_vat_rate(parsed_date)
        mode = BasicItemMode(mode)

        subtotal = 0.0
        total_vat = 0.0
        calculated: list[CalculatedLineItem] = []

        for raw in line_items:
            item = raw if isinstance(raw, VATLineItem) else VATLineItem.from_dict(raw)
            if item.quantity < 0 or item.unit_price < 0:
                raise InvalidInputError(
                    f"Line item '{item.description}' has a negative quantity or unit price"
                )

            zero_rated = self._is_zero_rated(item, mode)
            applied_rate = ZERO_RATE if zero_rated else standard_rate
            line_total = item.quantity * item.unit_price
            line_vat = line_total * applied_rate

            subtotal += line_total
            total_vat += line_vat

            calculated.append(CalculatedLineItem(
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                is_basic_item=item.is_basic_item,
                category=VATCategory.ZERO_RATED if zero_rated else VATCategory.STANDARD,
                applied_rate=applied_rate,
                line_total=line_total,
                vat=line_vat,
                total=line_total + line_vat,
            ))

        logger.debug(
            "Calculated invoice %s: %d lines, subtotal=%s, vat=%s (mode=%s)",
            invoice_number,
            len(calculated),
            subtotal,
            total_vat,
            mode.value,
        )

        return VATInvoiceCalculation(
            invoice_number=invoice_number,
            invoice_date=invoice_date if isinstance(invoice_date, str) else parsed_date.isoformat(),
            customer_name=customer_name,
            subtotal=subtotal,
            vat_rate=standard_rate,
            vat_amount=total_vat,
            total_amount=subtotal + total_vat,
            basic_item_mode=mode,
            line_items=calculated,
        )

    def validate_invoice(self, invoice: VATInvoice | Mapping[str, Any]) -> ValidationResult:
        data = invoice.to_dict() if isinstance(invoice, VATInvoice) else invoice
        errors: list[str] = []

        if not get_field(data, "invoice_number", "invoiceNumber"):
            errors.append("Invoice number is required")

        invoice_date = get_field(data, "invoice_date", "invoiceDate")
        if not invoice_date:
            errors.append("Invoice date is required")
        else:
            try:
                parse_date(invoice_date)
            except (ValueError, TypeError):
                errors.append("Invalid invoice date format")

        if not get_field(data, "customer_name", "customerName"):
            errors.append("Customer name is required")

        gross_amount = get_field(data, "gross_amount", "grossAmount")
        if not is_number(gross_amount) or gross_amount < 0:
            errors.append("Valid gross amount is required")
            gross_amount = None

        invoice_type = get_field(data, "invoice_type", "invoiceType")
        if invoice_type not in (InvoiceType.OUTPUT.value, InvoiceType.INPUT.value):
            errors.append("Invoice type must be OUTPUT or INPUT")

        vat_rate = get_field(data, "vat_rate", "vatRate")
        if gross_amount is not None and is_number(vat_rate):
            vat_amount = get_field(data, "vat_amount", "vatAmount") or 0
            expected_vat = self._expected_vat(data, gross_amount, vat_rate)
            if not is_number(vat_amount) or abs(vat_amount - expected_vat) > VAT_TOLERANCE:
                errors.append("VAT amount does not match gross amount × VAT rate")

        for line in _line_items(data):
            line_total = _line_value(line, "line_total")
            applied_rate = _line_value(line, "applied_rate")
            line_vat = _line_value(line, "vat")
            if not all(is_number(v) for v in (line_total, applied_rate, line_vat)):
                continue
            if abs(line_vat - line_total * applied_rate) > VAT_TOLERANCE:
                description = _line_value(line, "description") or "unnamed"
                errors.append(f"Line item '{description}' VAT does not match line total × applied rate")

        return ValidationResult.from_errors(errors)

    def _expected_vat(self, data: Mapping[str, Any], gross_amount: float, vat_rate: float) -> float:
        # Zero-rated lines pay no VAT, so a line breakdown overrides gross × rate
        line_items = _line_items(data)
        if line_items:
            line_vats = [_line_value(line, "vat") for line in line_items]
            if all(is_number(v) for v in line_vats):
                return sum(line_vats)
        return gross_amount * vat_rate


def _line_items(data: Mapping[str, Any]) -> list:
    line_items = get_field(data, "line_items", "lineItems")
    if isinstance(line_items, (list, tuple)):
        return list(line_items)
    return []


def _line_value(line: Any, name: str) -> Any:
    """Read a field from a line given as a mapping or as a line item object."""
    if isinstance(line, Mapping):
        return line.get(name)
    return getattr(line, name, None)


_default_calculator = VATCalculator()


def get_vat_rate(on: date | datetime | str | int | None = None) -> float:
    """Standard VAT rate in force on `on` (defaults to today)."""
    return _default_calculator.get_vat_rate(on)


def is_basic_item(description: str, keywords: KeywordTable = BASIC_ITEM_KEYWORDS) -> bool:
    return keywords.matches(description)


def get_applicable_vat_rate(
    description: str,
    on: date | datetime | str | int | None = None,
    keywords: KeywordTable = BASIC_ITEM_KEYWORDS,
) -> float:
    if is_basic_item(description, keywords):
        return ZERO_RATE
    return get_vat_rate(on)


def calculate_simple_vat(
    gross_amount: float,
    on: date | datetime | str | int | None = None,
    is_basic_item: bool = False,
) -> float:
    return _default_calculator.calculate_simple_vat(gross_amount, on, is_basic_item)


def calculate_invoice_vat(
    invoice_number: str,
    invoice_date: date | datetime | str,
    customer_name: str,
    line_items: Iterable[VATLineItem | Mapping[str, Any]],
    mode: BasicItemMode = BasicItemMode.EXPLICIT,
    keywords: KeywordTable = BASIC_ITEM_KEYWORDS,
) -> VATInvoiceCalculation:
    calculator = _default_calculator if keywords is BASIC_ITEM_KEYWORDS else VATCalculator(keywords)
    return calculator.calculate_invoice(invoice_number, invoice_date, customer_name, line_items, mode)


def validate_vat_invoice(invoice: VATInvoice | Mapping[str, Any]) -> ValidationResult:
    return _default_calculator.validate_invoice(invoice)
