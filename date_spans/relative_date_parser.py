"""Recognizer for relative day expressions such as 明日 or "next week"."""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Iterator

from date_spans.calendar_rules import reference_day
from date_spans.span import TemporalSpan
from date_spans.strategy import SpanRecognizer


def _add_months_first_day(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    return date(day.year + month_index // 12, month_index % 12 + 1, 1)


def _end_of_month(day: date) -> date:
    return date(day.year, day.month, calendar.monthrange(day.year, day.month)[1])


# Each term maps to a function of the reference day.
_RESOLVERS = {
    "今日": lambda d: d,
    "today": lambda d: d,
    "明日": lambda d: d + timedelta(days=1),
    "tomorrow": lambda d: d + timedelta(days=1),
    "昨日": lambda d: d - timedelta(days=1),
    "yesterday": lambda d: d - timedelta(days=1),
    "来週": lambda d: d + timedelta(days=7),
    "next week": lambda d: d + timedelta(days=7),
    "先週": lambda d: d - timedelta(days=7),
    "last week": lambda d: d - timedelta(days=7),
    "今月末": _end_of_month,
    "end of month": _end_of_month,
    "end of the month": _end_of_month,
    "来月": lambda d: _add_months_first_day(d, 1),
    "next month": lambda d: _add_months_first_day(d, 1),
    "先月": lambda d: _add_months_first_day(d, -1),
    "last month": lambda d: _add_months_first_day(d, -1),
}


class RelativeDateParser(SpanRecognizer):
    """Recognizes relative dates and resolves them against the reference day.

    Example: 明日, 来週, 今月末, next week
    """

    recognizer_id = "relative"

    _PATTERN = re.compile(
        r"今月末|今日|明日|昨日|来週|先週|来月|先月"
        r"|\b(?:end\s+of\s+(?:the\s+)?month|next\s+week|last\s+week|next\s+month|last\s+month"
        r"|today|tomorrow|yesterday)\b",
        re.IGNORECASE,
    )

    def find_spans(self, text: str, reference: date | datetime) -> Iterator[TemporalSpan]:
        ref = reference_day(reference)
        for m in self._PATTERN.finditer(text):
            term = re.sub(r"\s+", " ", m.group(0).lower())
            resolver = _RESOLVERS.get(term)
            if resolver is None:
                continue
            resolved = resolver(ref)
            span = self._date_span(m, resolved.year, resolved.month, resolved.day)
            if span is not None:
                yield span
