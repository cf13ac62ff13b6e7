"""
Display helpers for reasoning and summary strings.

Amounts are rendered the Nigerian way: grouping commas and exactly two
decimal places (45,000,000.00). Dates use the short month form (Jun 1, 2025).
"""

from datetime import date, datetime

MONTH_ABBREVIATIONS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def format_currency(amount: float) -> str:
    return f"{amount:,.2f}"


def format_naira(amount: float, symbol: str = "₦") -> str:
    return f"{symbol}{format_currency(amount)}"


def parse_date(value: date | datetime | str) -> date:
    """
    Coerce an ISO date string, date or datetime into a calendar date.
    Datetimes are truncated to their date component; no timezone handling.
    Raises ValueError for strings that are not ISO dates.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        # Accept full timestamps ("2025-06-01T10:00:00Z") by keeping the date part
        if "T" in text:
            text = text.split("T", 1)[0]
        return date.fromisoformat(text)
    raise ValueError(f"Unsupported date value: {value!r}")


def format_date(value: date | datetime | str) -> str:
    d = parse_date(value)
    return f"{MONTH_ABBREVIATIONS[d.month - 1]} {d.day}, {d.year}"


def format_period(start: date | datetime | str, end: date | datetime | str) -> str:
    return f"{format_date(start)} to {format_date(end)}"
