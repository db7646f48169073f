"""Recognizer for Japanese long-form dates with an explicit year."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterator

from date_spans.span import TemporalSpan
from date_spans.strategy import TIME_SUFFIX, SpanRecognizer


class LongFormDateParser(SpanRecognizer):
    """Parses YYYY年M月D日 with an optional weekday and start time.

    Example: 2025年8月27日, 2025年8月27日(水) 18:30
    """

    recognizer_id = "long-form"

    _PATTERN = re.compile(
        r"(?<!\d)(?P<year>\d{4})年(?P<month>\d{1,2})月(?P<day>\d{1,2})日"
        r"(?:\s*[(（][月火水木金土日祝・]{1,3}[)）])?" + TIME_SUFFIX
    )

    def find_spans(self, text: str, reference: date | datetime) -> Iterator[TemporalSpan]:
        for m in self._PATTERN.finditer(text):
            hour, minute = self._optional_time(m)
            span = self._date_span(
                m, int(m.group("year")), int(m.group("month")), int(m.group("day")), hour, minute
            )
            if span is not None:
                yield span
