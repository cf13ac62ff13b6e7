"""
Tax calculation API routes.
Exposes the classification and VAT engines via REST endpoints.
Stateless: nothing is persisted here; callers store the returned records.
"""

import logging
from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, HTTPException

from smetax.config import get_settings
from smetax.schemas.schemas import (
    ClassifyRequest,
    CumulativeVATPositionRequest,
    InvoiceCalculateRequest,
    InvoiceRecord,
    VATPositionRequest,
)
from smetax.core.tax_rules.classification import ClassificationInput, EntityClassifier
from smetax.core.tax_rules.position import PeriodInvoices, VATPositionCalculator
from smetax.core.tax_rules.rates import get_cit_rate, get_development_levy_rate, resolve_year
from smetax.core.tax_rules.vat import VATCalculator, VATInvoice, VATLineItem

logger = logging.getLogger(__name__)

router = APIRouter()

settings = get_settings()

classifier = EntityClassifier(currency_symbol=settings.CURRENCY_SYMBOL)
vat_calc = VATCalculator()
position_calc = VATPositionCalculator()


def _to_invoice(record: InvoiceRecord) -> VATInvoice:
    return VATInvoice.from_dict(record.model_dump())


@router.post("/classify")
async def classify_entity(data: ClassifyRequest):
    """Classify a business as SMALL or STANDARD (Section 56)."""
    validation = classifier.validate(data.model_dump())
    if not validation.valid:
        raise HTTPException(
            status_code=400,
            detail={"error": "Validation failed", "errors": validation.errors},
        )

    try:
        result = classifier.classify(
            ClassificationInput(
                turnover=data.turnover,
                fixed_assets=data.fixed_assets,
                is_professional_services=data.is_professional_services,
                industry_code=data.industry_code,
            ),
            as_of=data.as_of,
        )
        return asdict(result)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/vat/invoices/calculate")
async def calculate_invoice(data: InvoiceCalculateRequest):
    """Calculate VAT for an invoice and return the record ready to be stored."""
    try:
        calculation = vat_calc.calculate_invoice(
            invoice_number=data.invoice_number,
            invoice_date=data.invoice_date.isoformat(),
            customer_name=data.customer_name,
            line_items=[VATLineItem(**item.model_dump()) for item in data.line_items],
            mode=data.basic_item_mode,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    invoice = VATInvoice.from_calculation(
        calculation,
        invoice_type=data.invoice_type,
        customer_tin=data.customer_tin,
    )

    validation = vat_calc.validate_invoice(invoice)
    if not validation.valid:
        logger.info("Invoice %s failed validation: %s", data.invoice_number, validation.errors)
        raise HTTPException(
            status_code=400,
            detail={"error": "Validation failed", "errors": validation.errors},
        )

    return {
        "calculation": asdict(calculation),
        "invoice": invoice.to_dict(),
    }


@router.post("/vat/position")
async def compute_vat_position(data: VATPositionRequest):
    """Compute the VAT position for one filing period."""
    try:
        position = position_calc.compute(
            [_to_invoice(record) for record in data.invoices],
            data.period_start,
            data.period_end,
        )
        return position.to_dict()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/vat/position/cumulative")
async def compute_cumulative_vat_position(data: CumulativeVATPositionRequest):
    """Compute positions for consecutive periods with excess credit carried forward."""
    try:
        positions = position_calc.compute_cumulative([
            PeriodInvoices(
                invoices=[_to_invoice(record) for record in period.invoices],
                start=period.start,
                end=period.end,
            )
            for period in data.periods
        ])
        return {
            "positions": [p.to_dict() for p in positions],
            "closing_credit": positions[-1].carry_forward_balance if positions else 0.0,
        }
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/rates")
async def get_rates(on: date | None = None):
    """Rates in force for the tax year of `on` (defaults to today)."""
    year = resolve_year(on)
    return {
        "year": year,
        "vat_rate": vat_calc.get_vat_rate(year),
        "cit_rate": get_cit_rate(year),
        "development_levy_rate": get_development_levy_rate(year),
    }
