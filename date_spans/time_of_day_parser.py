"""Recognizer for bare HH:MM times."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterator

from date_spans.span import SpanKind, TemporalSpan
from date_spans.strategy import SpanRecognizer


class TimeOfDayParser(SpanRecognizer):
    """Parses 24-hour clock times.

    Example: 18:30, 9:05
    """

    recognizer_id = "time"

    _PATTERN = re.compile(r"(?<![\d:])(?P<hour>[01]?\d|2[0-3]):(?P<minute>[0-5]\d)(?![\d:])")

    def find_spans(self, text: str, reference: date | datetime) -> Iterator[TemporalSpan]:
        for m in self._PATTERN.finditer(text):
            span = TemporalSpan(
                start_offset=m.start(),
                end_offset=m.end(),
                raw_text=m.group(0),
                recognizer_id=self.recognizer_id,
                kind=SpanKind.TIME,
                normalized_time=f"{int(m.group('hour')):02d}:{m.group('minute')}",
            )
            span = self._return_none_if_invalid(span)
            if span is not None:
                yield span
