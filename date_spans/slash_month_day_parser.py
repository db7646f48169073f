"""Recognizer for slash month/day dates without a year."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterator

from date_spans.calendar_rules import resolve_year_for_month_day
from date_spans.span import TemporalSpan
from date_spans.strategy import SpanRecognizer


class SlashMonthDayParser(SpanRecognizer):
    """Parses M/D; the year is the next occurrence on or after the reference day.

    Example: 8/27, 8/27(水) 18:00
    """

    recognizer_id = "slash-month-day"

    # Neighbouring digits or slashes mean the text is part of a longer date.
    _PATTERN = re.compile(
        r"(?<![\d/])(?P<month>\d{1,2})/(?P<day>\d{1,2})(?![\d/])"
        r"(?:\s*[(（][月火水木金土日祝・]{1,3}[)）])?"
        r"(?:\s+(?P<hour>[01]?\d|2[0-3]):(?P<minute>[0-5]\d)(?!\d))?"
    )

    def find_spans(self, text: str, reference: date | datetime) -> Iterator[TemporalSpan]:
        for m in self._PATTERN.finditer(text):
            resolved = resolve_year_for_month_day(int(m.group("month")), int(m.group("day")), reference)
            if resolved is None:
                continue

            hour, minute = self._optional_time(m)
            span = self._date_span(m, resolved.year, resolved.month, resolved.day, hour, minute)
            if span is not None:
                yield span
