"""
Tests for the dated rate schedules.
CIT 27.5% (2025) / 25% (2026+); Development Levy 4% / 3% / 2%; VAT 10% / 12.5% / 15%.
"""

from datetime import date, datetime

import pytest

from smetax.core.tax_rules.rates import (
    RateBand,
    get_cit_rate,
    get_current_tax_year,
    get_development_levy_rate,
    get_standard_vat_rate,
    resolve_year,
)


class TestCITRate:
    def test_2025(self):
        assert get_cit_rate(2025) == 0.275

    @pytest.mark.parametrize("year", [2026, 2029, 2030, 2040])
    def test_2026_onwards(self, year):
        assert get_cit_rate(year) == 0.25


class TestDevelopmentLevyRate:
    @pytest.mark.parametrize("year,rate", [
        (2025, 0.04),
        (2026, 0.04),
        (2027, 0.03),
        (2029, 0.03),
        (2030, 0.02),
        (2045, 0.02),
    ])
    def test_bands(self, year, rate):
        assert get_development_levy_rate(year) == rate

    def test_year_before_schedule_takes_final_band(self):
        assert get_development_levy_rate(2024) == 0.02


class TestVATRateSchedule:
    def test_bands(self):
        assert get_standard_vat_rate(2025) == 0.10
        assert get_standard_vat_rate(2027) == 0.125
        assert get_standard_vat_rate(2033) == 0.15


class TestResolveYear:
    def test_int(self):
        assert resolve_year(2027) == 2027

    def test_date(self):
        assert resolve_year(date(2026, 12, 31)) == 2026

    def test_datetime(self):
        assert resolve_year(datetime(2030, 1, 1, 0, 0)) == 2030

    def test_iso_string(self):
        assert resolve_year("2029-07-15") == 2029

    def test_defaults_to_today(self):
        assert resolve_year() == get_current_tax_year() == date.today().year

    def test_bool_rejected(self):
        with pytest.raises(ValueError):
            resolve_year(True)


class TestRateBand:
    def test_closed_band(self):
        band = RateBand(2027, 2029, 0.03)
        assert band.covers(2027)
        assert band.covers(2029)
        assert not band.covers(2030)
        assert not band.covers(2026)

    def test_open_band(self):
        assert RateBand(2030, None, 0.02).covers(2100)
