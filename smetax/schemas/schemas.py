"""
Pydantic schemas for API request validation.
"""

from datetime import date

from pydantic import BaseModel, Field

from smetax.core.tax_rules.vat import BasicItemMode, InvoiceType


# ── Classification Schemas ──

class ClassifyRequest(BaseModel):
    turnover: float | None = Field(None, description="Annual turnover in Naira")
    fixed_assets: float | None = Field(None, description="Total fixed assets value in Naira")
    is_professional_services: bool | None = None
    industry_code: str | None = None
    as_of: date | None = Field(None, description="Date whose tax year sets the CIT and levy rates")


# ── VAT Schemas ──

class LineItemRequest(BaseModel):
    description: str
    quantity: float = Field(..., ge=0)
    unit_price: float = Field(..., ge=0)
    is_basic_item: bool | None = None


class InvoiceCalculateRequest(BaseModel):
    invoice_number: str = Field(..., min_length=1)
    invoice_date: date
    customer_name: str = Field(..., min_length=1)
    customer_tin: str | None = None
    invoice_type: InvoiceType
    line_items: list[LineItemRequest] = []
    basic_item_mode: BasicItemMode = BasicItemMode.EXPLICIT


class InvoiceRecord(BaseModel):
    invoice_number: str
    invoice_date: date
    customer_name: str
    customer_tin: str | None = None
    gross_amount: float = Field(..., ge=0)
    vat_rate: float = Field(..., ge=0)
    vat_amount: float = Field(..., ge=0)
    total_amount: float | None = None
    invoice_type: InvoiceType


class VATPositionRequest(BaseModel):
    invoices: list[InvoiceRecord] = []
    period_start: date
    period_end: date


class PeriodRequest(BaseModel):
    invoices: list[InvoiceRecord] = []
    start: date
    end: date


class CumulativeVATPositionRequest(BaseModel):
    periods: list[PeriodRequest] = Field(..., min_length=1)
