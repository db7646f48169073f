"""Recognizer for English month-name dates."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterator

from date_spans.span import TemporalSpan
from date_spans.strategy import SpanRecognizer

MONTHS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}


class EnglishDateParser(SpanRecognizer):
    """Parses "Month D, YYYY" with an optional 12- or 24-hour time.

    Example: August 27, 2025 / Aug. 27 2025 / Aug 27, 2025 6pm / Aug 27, 2025 at 6:30 p.m.
    """

    recognizer_id = "english"

    _PATTERN = re.compile(
        r"\b(?P<month>" + "|".join(sorted(MONTHS, key=len, reverse=True)) + r")\.?\s+"
        r"(?P<day>\d{1,2})(?:st|nd|rd|th)?,?\s+(?P<year>\d{4})(?!\d)"
        r"(?:,?\s*(?:at\s+)?(?P<hour12>\d{1,2})(?::(?P<minute12>[0-5]\d))?\s*(?P<meridiem>[ap])\.?m\b\.?"
        r"|,?\s+(?:at\s+)?(?P<hour>[01]?\d|2[0-3]):(?P<minute>[0-5]\d)(?!\d))?",
        re.IGNORECASE,
    )

    @staticmethod
    def month_name_to_number(name: str) -> int | None:
        return MONTHS.get(name.lower().rstrip("."))

    @staticmethod
    def to_24_hour(hour: int, meridiem: str) -> int | None:
        """6 pm -> 18, 12 am -> 0; None for hours outside 1-12."""
        if not 1 <= hour <= 12:
            return None
        hour %= 12
        return hour + 12 if meridiem.lower() == "p" else hour

    def find_spans(self, text: str, reference: date | datetime) -> Iterator[TemporalSpan]:
        for m in self._PATTERN.finditer(text):
            month = self.month_name_to_number(m.group("month"))
            if month is None:
                continue

            hour, minute = self._optional_time(m)
            if m.group("meridiem"):
                hour = self.to_24_hour(int(m.group("hour12")), m.group("meridiem"))
                minute = int(m.group("minute12") or 0) if hour is not None else None

            span = self._date_span(m, int(m.group("year")), month, int(m.group("day")), hour, minute)
            if span is not None:
                yield span
