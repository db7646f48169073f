"""Recognizer for Japanese era (wareki) dates."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterator

from date_spans.calendar_rules import ERA_TABLE, FIRST_YEAR_TOKEN, convert_era_year
from date_spans.span import TemporalSpan
from date_spans.strategy import SpanRecognizer


class EraDateParser(SpanRecognizer):
    """Parses <era><N|元>年M月D日.

    Example: 令和6年12月25日, 平成元年1月8日
    """

    recognizer_id = "era"

    _PATTERN = re.compile(
        r"(?P<era>" + "|".join(ERA_TABLE) + r")(?P<era_year>" + FIRST_YEAR_TOKEN + r"|\d{1,2})年"
        r"(?P<month>\d{1,2})月(?P<day>\d{1,2})日"
    )

    def find_spans(self, text: str, reference: date | datetime) -> Iterator[TemporalSpan]:
        for m in self._PATTERN.finditer(text):
            year = convert_era_year(m.group("era"), m.group("era_year"))
            if year is None:
                continue
            span = self._date_span(m, year, int(m.group("month")), int(m.group("day")))
            if span is not None:
                yield span
