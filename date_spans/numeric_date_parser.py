"""Recognizer for ISO-like numeric dates."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterator

from date_spans.span import TemporalSpan
from date_spans.strategy import TIME_SUFFIX, SpanRecognizer


class NumericDateParser(SpanRecognizer):
    """Parses YYYY-MM-DD and YYYY/MM/DD, optionally followed by a time.

    Example: 2025/01/01, 2025-08-27 18:30
    """

    recognizer_id = "numeric"

    # The separator must repeat, so 2025-01/01 is not a date.
    _PATTERN = re.compile(
        r"(?<![0-9A-Za-z_])(?P<year>\d{4})(?P<sep>[-/])(?P<month>0[1-9]|1[0-2])(?P=sep)"
        r"(?P<day>0[1-9]|[12]\d|3[01])(?!\d)" + TIME_SUFFIX
    )

    def find_spans(self, text: str, reference: date | datetime) -> Iterator[TemporalSpan]:
        for m in self._PATTERN.finditer(text):
            hour, minute = self._optional_time(m)
            span = self._date_span(
                m, int(m.group("year")), int(m.group("month")), int(m.group("day")), hour, minute
            )
            if span is not None:
                yield span
