"""Abstract base class for temporal span recognizers."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Iterator

from date_spans.calendar_rules import format_iso_date, is_valid_date
from date_spans.span import SpanKind, TemporalSpan

# Optional trailing time shared by the date recognizers, e.g. "2025-08-27 18:30".
TIME_SUFFIX = r"(?:(?:T|\s*)(?P<hour>[01]?\d|2[0-3]):(?P<minute>[0-5]\d)(?!\d))?"


class SpanRecognizer(ABC):
    """Interface for span recognizers.

    A recognizer is a pure function of (text, reference): it keeps no state
    between calls and yields spans lazily in text order.
    """

    recognizer_id: str = ""

    @abstractmethod
    def find_spans(self, text: str, reference: date | datetime) -> Iterator[TemporalSpan]:
        """Yield every span this recognizer finds in ``text``.

        Args:
            text: One text unit (a text node's content)
            reference: The instant relative and implicit-year dates resolve against

        Returns:
            An iterator of spans, each already validated
        """
        pass

    def _date_span(
        self,
        match: re.Match,
        year: int,
        month: int,
        day: int,
        hour: int | None = None,
        minute: int | None = None,
    ) -> TemporalSpan | None:
        """Build a date (or datetime) span for ``match``, or None if the date is not real."""
        if not is_valid_date(year, month, day):
            return None

        normalized_time = None
        kind = SpanKind.DATE
        if hour is not None:
            normalized_time = f"{hour:02d}:{(minute or 0):02d}"
            kind = SpanKind.DATETIME

        span = TemporalSpan(
            start_offset=match.start(),
            end_offset=match.end(),
            raw_text=match.group(0),
            recognizer_id=self.recognizer_id,
            kind=kind,
            normalized_date=format_iso_date(year, month, day),
            normalized_time=normalized_time,
        )
        return self._return_none_if_invalid(span)

    @staticmethod
    def _optional_time(match: re.Match) -> tuple[int | None, int | None]:
        groups = match.groupdict()
        if groups.get("hour") is None:
            return None, None
        minute = groups.get("minute")
        return int(groups["hour"]), int(minute) if minute else 0

    @staticmethod
    def _return_none_if_invalid(span: TemporalSpan | None) -> TemporalSpan | None:
        if span is None:
            return None
        if not span.is_valid():
            return None
        return span
