"""
Dated Rate Schedules
Based on Nigeria Tax Act 2025

Every rate that changes over time lives here as a small table of year bands.
Calculators ask for the rate of an explicit year; nothing reads a global
"current rate".

CIT (Section 56):
  - 2025: 27.5%
  - 2026 onwards: 25%

Development Levy (Section 59):
  - 2025-2026: 4%
  - 2027-2029: 3%
  - 2030 onwards: 2%

VAT (Section 148):
  - 2025: 10%
  - 2026-2029: 12.5%
  - 2030 onwards: 15%

A year outside every closed band (including years before 2025) falls to the
open-ended final band of its table.
"""

from dataclasses import dataclass
from datetime import date, datetime

from smetax.core.formatting import parse_date


@dataclass(frozen=True)
class RateBand:
    start_year: int
    end_year: int | None
    rate: float

    def covers(self, year: int) -> bool:
        if year < self.start_year:
            return False
        return self.end_year is None or year <= self.end_year


CIT_RATE_SCHEDULE: tuple[RateBand, ...] = (
    RateBand(2025, 2025, 0.275),
    RateBand(2026, None, 0.25),
)

DEVELOPMENT_LEVY_SCHEDULE: tuple[RateBand, ...] = (
    RateBand(2025, 2026, 0.04),
    RateBand(2027, 2029, 0.03),
    RateBand(2030, None, 0.02),
)

VAT_RATE_SCHEDULE: tuple[RateBand, ...] = (
    RateBand(2025, 2025, 0.10),
    RateBand(2026, 2029, 0.125),
    RateBand(2030, None, 0.15),
)

ZERO_RATE = 0.0


def get_current_tax_year() -> int:
    return date.today().year


def resolve_year(on: date | datetime | str | int | None = None) -> int:
    """Year of an as-of value: a year, a date/datetime, an ISO string, or today."""
    if on is None:
        return get_current_tax_year()
    if isinstance(on, bool):
        raise ValueError(f"Unsupported as-of value: {on!r}")
    if isinstance(on, int):
        return on
    return parse_date(on).year


def rate_for_year(schedule: tuple[RateBand, ...], year: int) -> float:
    for band in schedule:
        if band.covers(year):
            return band.rate
    return schedule[-1].rate


def get_cit_rate(year: int | None = None) -> float:
    return rate_for_year(CIT_RATE_SCHEDULE, resolve_year(year))


def get_development_levy_rate(year: int | None = None) -> float:
    return rate_for_year(DEVELOPMENT_LEVY_SCHEDULE, resolve_year(year))


def get_standard_vat_rate(year: int | None = None) -> float:
    return rate_for_year(VAT_RATE_SCHEDULE, resolve_year(year))
