"""Recognizer for Japanese month/day dates without a year."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterator

from date_spans.calendar_rules import resolve_year_for_month_day
from date_spans.span import TemporalSpan
from date_spans.strategy import SpanRecognizer


class MonthDayParser(SpanRecognizer):
    """Parses M月D日; the year is the next occurrence on or after the reference day.

    Example: 2月14日, 8月27日 18:00, 8月27日19時30分
    """

    recognizer_id = "month-day"

    _PATTERN = re.compile(
        r"(?<!\d)(?P<month>\d{1,2})月(?P<day>\d{1,2})日"
        r"(?:\s*[(（][月火水木金土日祝・]{1,3}[)）])?"
        r"(?:\s*(?P<hour>[01]?\d|2[0-3]):(?P<minute>[0-5]\d)(?!\d)"
        r"|\s*(?P<jp_hour>[01]?\d|2[0-3])時(?:(?P<jp_minute>[0-5]?\d)分)?)?"
    )

    def find_spans(self, text: str, reference: date | datetime) -> Iterator[TemporalSpan]:
        for m in self._PATTERN.finditer(text):
            resolved = resolve_year_for_month_day(int(m.group("month")), int(m.group("day")), reference)
            if resolved is None:
                continue

            hour, minute = self._optional_time(m)
            if hour is None and m.group("jp_hour") is not None:
                hour = int(m.group("jp_hour"))
                minute = int(m.group("jp_minute") or 0)

            span = self._date_span(m, resolved.year, resolved.month, resolved.day, hour, minute)
            if span is not None:
                yield span
