"""Recognizer for numeric dates with single-digit month or day."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterator

from date_spans.span import TemporalSpan
from date_spans.strategy import TIME_SUFFIX, SpanRecognizer


class LooseNumericDateParser(SpanRecognizer):
    """Parses YYYY/M/D and YYYY-M-D, optionally followed by a time.

    Only used for user selections; page scanning keeps to the two-digit form.

    Example: 2025/8/27, 2025-9-5 18:00
    """

    recognizer_id = "loose-numeric"

    _PATTERN = re.compile(
        r"(?<![0-9A-Za-z_/-])(?P<year>\d{4})(?P<sep>[-/])(?P<month>\d{1,2})(?P=sep)"
        r"(?P<day>\d{1,2})(?![\d/-])" + TIME_SUFFIX
    )

    def find_spans(self, text: str, reference: date | datetime) -> Iterator[TemporalSpan]:
        for m in self._PATTERN.finditer(text):
            hour, minute = self._optional_time(m)
            span = self._date_span(
                m, int(m.group("year")), int(m.group("month")), int(m.group("day")), hour, minute
            )
            if span is not None:
                yield span
