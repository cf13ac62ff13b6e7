"""
Tests for the VAT Calculator.
Section 148 rates by year: 10% (2025), 12.5% (2026-2029), 15% (2030+).
Basic food items are zero-rated.
"""

from dataclasses import replace
from datetime import date

import pytest

from smetax.core.errors import InvalidInputError
from smetax.core.tax_rules.keywords import BASIC_ITEM_KEYWORDS, KeywordTable
from smetax.core.tax_rules.vat import (
    BasicItemMode,
    InvoiceType,
    VATCalculator,
    VATCategory,
    VATInvoice,
    VATLineItem,
    calculate_invoice_vat,
    calculate_simple_vat,
    get_applicable_vat_rate,
    get_vat_rate,
    is_basic_item,
    validate_vat_invoice,
)


@pytest.fixture
def vat_calc():
    return VATCalculator()


@pytest.fixture
def mixed_lines():
    return [
        VATLineItem(description="Laptop", quantity=1, unit_price=500_000),
        VATLineItem(description="Rice 50kg", quantity=2, unit_price=50_000, is_basic_item=True),
    ]


class TestVATRate:
    @pytest.mark.parametrize("on,rate", [
        (date(2025, 1, 1), 0.10),
        (date(2025, 12, 31), 0.10),
        (date(2026, 1, 1), 0.125),
        (date(2029, 12, 31), 0.125),
        (date(2030, 1, 1), 0.15),
        ("2035-06-01", 0.15),
    ])
    def test_rate_by_year(self, on, rate):
        assert get_vat_rate(on) == rate

    def test_timestamp_uses_date_part(self):
        assert get_vat_rate("2025-12-31T23:59:59Z") == 0.10


class TestBasicItems:
    def test_keyword_match_is_case_insensitive(self):
        assert is_basic_item("FRESH FISH") is True

    def test_substring_match_without_negation(self):
        assert is_basic_item("fried rice cooker") is True

    def test_non_basic_item(self):
        assert is_basic_item("Laptop computer") is False

    def test_applicable_rate_zero_for_basic(self):
        assert get_applicable_vat_rate("Palm oil 25L", date(2027, 1, 1)) == 0

    def test_applicable_rate_standard_otherwise(self):
        assert get_applicable_vat_rate("Office chair", date(2027, 1, 1)) == 0.125

    def test_replaceable_keyword_table(self):
        table = KeywordTable(name="custom", keywords=("sugar",))
        assert is_basic_item("Sugar 1kg", keywords=table) is True
        assert is_basic_item("Rice 1kg", keywords=table) is False

    def test_mixed_case_keywords_match(self):
        table = KeywordTable(name="custom", keywords=("Sugar", "PALM OIL"))
        assert table.keywords == ("sugar", "palm oil")
        assert is_basic_item("sugar 1kg", keywords=table) is True
        assert is_basic_item("Palm Oil 5L", keywords=table) is True

    def test_extended_table_keeps_defaults(self):
        table = BASIC_ITEM_KEYWORDS.extend("Sugar")
        assert table.matches("sugar cubes")
        assert table.matches("bread")


class TestSimpleVAT:
    def test_standard_supply(self):
        assert calculate_simple_vat(100_000, date(2026, 5, 1)) == 12_500

    def test_basic_item(self):
        assert calculate_simple_vat(100_000, date(2026, 5, 1), is_basic_item=True) == 0

    def test_negative_amount_raises(self, vat_calc):
        with pytest.raises(InvalidInputError):
            vat_calc.calculate_simple_vat(-1)


class TestInvoiceCalculation:
    def test_mixed_invoice_2025(self, mixed_lines):
        calc = calculate_invoice_vat("INV-001", "2025-06-01", "Customer Ltd", mixed_lines)
        assert calc.subtotal == 600_000
        assert calc.vat_rate == 0.10
        assert calc.vat_amount == 50_000
        assert calc.total_amount == 650_000

    def test_line_breakdown(self, mixed_lines):
        calc = calculate_invoice_vat("INV-001", "2025-06-01", "Customer Ltd", mixed_lines)
        laptop, rice = calc.line_items
        assert laptop.line_total == 500_000
        assert laptop.vat == 50_000
        assert laptop.total == 550_000
        assert laptop.category == VATCategory.STANDARD
        assert rice.line_total == 100_000
        assert rice.vat == 0
        assert rice.category == VATCategory.ZERO_RATED

    def test_totals_are_consistent(self):
        lines = [
            VATLineItem(description="Widget", quantity=3, unit_price=1_234.57),
            VATLineItem(description="Gadget", quantity=7, unit_price=99.99),
            VATLineItem(description="Bread", quantity=5, unit_price=800, is_basic_item=True),
        ]
        calc = calculate_invoice_vat("INV-002", "2027-03-15", "Buyer", lines)
        assert calc.total_amount == calc.subtotal + calc.vat_amount
        assert calc.vat_amount == sum(line.vat for line in calc.line_items)

    @pytest.mark.parametrize("invoice_date", ["2025-01-01", "2028-01-01", "2031-01-01"])
    def test_basic_line_never_taxed(self, invoice_date):
        lines = [VATLineItem(description="Garri", quantity=10, unit_price=3_000, is_basic_item=True)]
        calc = calculate_invoice_vat("INV-003", invoice_date, "Buyer", lines)
        assert calc.vat_amount == 0
        assert calc.total_amount == 30_000

    def test_explicit_mode_ignores_keywords(self):
        lines = [VATLineItem(description="Rice 50kg", quantity=1, unit_price=10_000)]
        calc = calculate_invoice_vat("INV-004", "2026-02-01", "Buyer", lines)
        assert calc.vat_amount == 1_250
        assert calc.basic_item_mode == BasicItemMode.EXPLICIT

    def test_infer_mode_uses_keywords(self):
        lines = [
            VATLineItem(description="Rice 50kg", quantity=1, unit_price=10_000),
            VATLineItem(description="Printer", quantity=1, unit_price=10_000),
        ]
        calc = calculate_invoice_vat("INV-005", "2026-02-01", "Buyer", lines, mode=BasicItemMode.INFER)
        assert calc.vat_amount == 1_250
        assert calc.line_items[0].vat == 0

    def test_infer_mode_respects_explicit_false(self):
        lines = [VATLineItem(description="Fish pie (restaurant)", quantity=1, unit_price=8_000, is_basic_item=False)]
        calc = calculate_invoice_vat("INV-006", "2026-02-01", "Buyer", lines, mode=BasicItemMode.INFER)
        assert calc.vat_amount == 1_000

    def test_dict_line_items(self):
        calc = calculate_invoice_vat(
            "INV-007",
            "2025-06-01",
            "Buyer",
            [
                {"description": "Laptop", "quantity": 1, "unitPrice": 500_000},
                {"description": "Rice", "quantity": 2, "unit_price": 50_000, "isBasicItem": True},
            ],
        )
        assert calc.vat_amount == 50_000
        assert calc.total_amount == 650_000

    def test_empty_invoice(self):
        calc = calculate_invoice_vat("INV-008", "2025-06-01", "Buyer", [])
        assert calc.subtotal == 0
        assert calc.total_amount == 0

    def test_date_object_recorded_as_iso(self, mixed_lines):
        calc = calculate_invoice_vat("INV-009", date(2026, 1, 5), "Buyer", mixed_lines)
        assert calc.invoice_date == "2026-01-05"
        assert calc.vat_rate == 0.125

    def test_invalid_date_raises(self, mixed_lines):
        with pytest.raises(InvalidInputError):
            calculate_invoice_vat("INV-010", "not-a-date", "Buyer", mixed_lines)

    def test_negative_quantity_raises(self):
        with pytest.raises(InvalidInputError):
            calculate_invoice_vat(
                "INV-011", "2025-06-01", "Buyer",
                [VATLineItem(description="Laptop", quantity=-1, unit_price=100)],
            )


class TestVATInvoiceRecord:
    def test_from_calculation(self, mixed_lines):
        calc = calculate_invoice_vat("INV-001", "2025-06-01", "Customer Ltd", mixed_lines)
        invoice = VATInvoice.from_calculation(calc, "OUTPUT", customer_tin="12345678-0001")
        assert invoice.invoice_type == InvoiceType.OUTPUT
        assert invoice.gross_amount == 600_000
        assert invoice.vat_amount == 50_000
        assert invoice.customer_tin == "12345678-0001"
        assert len(invoice.line_items) == 2

    def test_record_is_immutable(self, mixed_lines):
        calc = calculate_invoice_vat("INV-001", "2025-06-01", "Customer Ltd", mixed_lines)
        invoice = VATInvoice.from_calculation(calc, InvoiceType.INPUT)
        with pytest.raises(AttributeError):
            invoice.vat_amount = 0

    def test_from_dict_camel_case(self):
        invoice = VATInvoice.from_dict({
            "invoiceNumber": "INV-100",
            "invoiceDate": "2025-06-10",
            "customerName": "Supplier",
            "grossAmount": 1_000,
            "vatRate": 0.1,
            "vatAmount": 100,
            "invoiceType": "INPUT",
        })
        assert invoice.invoice_type == InvoiceType.INPUT
        assert invoice.total_amount == 1_100


class TestInvoiceValidation:
    def valid_invoice(self, **overrides):
        data = {
            "invoice_number": "INV-001",
            "invoice_date": "2025-06-01",
            "customer_name": "Customer Ltd",
            "gross_amount": 100_000,
            "vat_rate": 0.10,
            "vat_amount": 10_000,
            "invoice_type": "OUTPUT",
        }
        data.update(overrides)
        return data

    def test_valid(self):
        result = validate_vat_invoice(self.valid_invoice())
        assert result.valid is True

    def test_zero_gross_amount_is_valid(self):
        result = validate_vat_invoice(self.valid_invoice(gross_amount=0, vat_amount=0))
        assert result.valid is True

    def test_missing_fields_all_reported(self):
        result = validate_vat_invoice({})
        assert result.valid is False
        assert result.errors == [
            "Invoice number is required",
            "Invoice date is required",
            "Customer name is required",
            "Valid gross amount is required",
            "Invoice type must be OUTPUT or INPUT",
        ]

    def test_bad_date(self):
        result = validate_vat_invoice(self.valid_invoice(invoice_date="01/06/2025"))
        assert result.errors == ["Invalid invoice date format"]

    def test_negative_gross(self):
        result = validate_vat_invoice(self.valid_invoice(gross_amount=-5))
        assert "Valid gross amount is required" in result.errors

    def test_bad_invoice_type(self):
        result = validate_vat_invoice(self.valid_invoice(invoice_type="SALES"))
        assert result.errors == ["Invoice type must be OUTPUT or INPUT"]

    def test_vat_within_tolerance(self):
        result = validate_vat_invoice(self.valid_invoice(vat_amount=10_000.005))
        assert result.valid is True

    def test_vat_mismatch(self):
        result = validate_vat_invoice(self.valid_invoice(vat_amount=10_000.02))
        assert result.errors == ["VAT amount does not match gross amount × VAT rate"]

    def test_calculated_mixed_invoice_validates(self, mixed_lines):
        calc = calculate_invoice_vat("INV-001", "2025-06-01", "Customer Ltd", mixed_lines)
        invoice = VATInvoice.from_calculation(calc, InvoiceType.OUTPUT)
        result = validate_vat_invoice(invoice)
        assert result.valid is True
        assert result.errors == []

    def test_plain_line_items_use_gross_times_rate(self):
        lines = [VATLineItem(description="Laptop", quantity=1, unit_price=100_000)]
        assert validate_vat_invoice(self.valid_invoice(lineItems=lines)).valid is True

        result = validate_vat_invoice(self.valid_invoice(lineItems=lines, vat_amount=0))
        assert result.errors == ["VAT amount does not match gross amount × VAT rate"]

    def test_line_vat_checked_against_applied_rate(self, mixed_lines):
        calc = calculate_invoice_vat("INV-001", "2025-06-01", "Customer Ltd", mixed_lines)
        laptop, rice = calc.line_items
        invoice = replace(
            VATInvoice.from_calculation(calc, InvoiceType.OUTPUT),
            vat_amount=55_000,
            line_items=(laptop, replace(rice, vat=5_000)),
        )

        result = validate_vat_invoice(invoice)
        assert result.valid is False
        assert result.errors == ["Line item 'Rice 50kg' VAT does not match line total × applied rate"]

    def test_line_vat_checked_in_dict_records(self, mixed_lines):
        calc = calculate_invoice_vat("INV-001", "2025-06-01", "Customer Ltd", mixed_lines)
        data = VATInvoice.from_calculation(calc, InvoiceType.OUTPUT).to_dict()
        data["line_items"][0]["vat"] = 40_000
        data["vat_amount"] = 40_000

        result = validate_vat_invoice(data)
        assert result.errors == ["Line item 'Laptop' VAT does not match line total × applied rate"]
