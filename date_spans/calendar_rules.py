"""Calendar validity, Japanese era conversion and implicit-year resolution.

Every recognizer funnels its year/month/day through ``is_valid_date`` so
that only real calendar dates ever leave the recognizer layer.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime
from types import MappingProxyType

# Gregorian year in which year 1 of each era falls.
ERA_TABLE = MappingProxyType({
    "令和": 2019,
    "平成": 1989,
    "昭和": 1926,
    "大正": 1912,
    "明治": 1868,
})

FIRST_YEAR_TOKEN = "元"

# Search window for the next occurrence of Feb 29.
_LEAP_SEARCH_YEARS = 8


def is_valid_date(year: int, month: int, day: int) -> bool:
    """Return True when (year, month, day) names an actual calendar day."""
    if year < 1 or year > 9999:
        return False
    if month < 1 or month > 12:
        return False
    if day < 1:
        return False
    return day <= calendar.monthrange(year, month)[1]


def is_valid_iso_date(value: str) -> bool:
    try:
        year, month, day = (int(part) for part in value.split("-"))
    except ValueError:
        return False
    return is_valid_date(year, month, day)


def format_iso_date(year: int, month: int, day: int) -> str:
    return f"{year:04d}-{month:02d}-{day:02d}"


def reference_day(reference: date | datetime) -> date:
    """Collapse a reference instant to its calendar day."""
    if isinstance(reference, datetime):
        return reference.date()
    return reference


def convert_era_year(era_name: str, era_year_token: str) -> int | None:
    """Convert an era name plus era-year token to a Gregorian year.

    ``元`` denotes the first year of the era. Returns None for unknown eras
    or tokens that are not positive integers.
    """
    base = ERA_TABLE.get(era_name)
    if base is None:
        return None

    token = (era_year_token or "").strip()
    if token == FIRST_YEAR_TOKEN:
        era_year = 1
    elif token.isdigit():
        era_year = int(token)
    else:
        return None

    if era_year < 1:
        return None
    return base + (era_year - 1)


def resolve_year_for_month_day(month: int, day: int, reference: date | datetime) -> date | None:
    """Pick the year for a month/day written without one.

    The reference year is used when that date is on or after the reference
    day, otherwise the following year. Feb 29 resolves to its next leap-year
    occurrence. Returns None when the month/day exists in no year.
    """
    ref = reference_day(reference)

    if is_valid_date(ref.year, month, day):
        candidate = date(ref.year, month, day)
        if candidate < ref:
            year = ref.year + 1
            while not is_valid_date(year, month, day) and year - ref.year <= _LEAP_SEARCH_YEARS:
                year += 1
            if not is_valid_date(year, month, day):
                return None
            return date(year, month, day)
        return candidate

    for year in range(ref.year + 1, ref.year + 1 + _LEAP_SEARCH_YEARS):
        if is_valid_date(year, month, day):
            return date(year, month, day)
    return None
