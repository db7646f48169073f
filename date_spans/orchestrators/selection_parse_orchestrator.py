"""First-match date parsing for user selections."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List

from date_spans.date_info import ResolvedDateInfo, date_info_from_span
from date_spans.factory import SpanRecognizerFactory, SpanRecognizers
from date_spans.orchestrators.span_orchestrator import SpanOrchestrator
from date_spans.span import SpanKind


class SelectionParseOrchestrator(SpanOrchestrator):
    """Turns a short piece of text into a single calendar-ready date.

    Explicit dates outrank relative words here: a selection such as
    "明日 2025/09/01 開催" means the explicit date. Selections also accept
    looser forms than page scanning (2025/8/27, 8/27).
    """

    def __init__(self, tzinfo, duration: timedelta, max_text_length: int | None = None):
        super().__init__(max_text_length)
        self.tzinfo = tzinfo
        self.duration = duration

    def get_recognizer_steps(self) -> List[SpanRecognizers]:
        return [
            SpanRecognizers.NUMERIC_DATE,
            SpanRecognizers.LOOSE_NUMERIC_DATE,
            SpanRecognizers.LONG_FORM_DATE,
            SpanRecognizers.ERA_DATE,
            SpanRecognizers.MONTH_DAY,
            SpanRecognizers.SLASH_MONTH_DAY,
            SpanRecognizers.ENGLISH_DATE,
            SpanRecognizers.RELATIVE,
            SpanRecognizers.TIME_OF_DAY,
        ]

    def parse_date(self, text: str, reference: date | datetime) -> ResolvedDateInfo | None:
        """Return the first date found by recognizer priority, or None.

        A date without its own time picks up the first bare time that follows it.
        """
        spans = self.detect_spans(text, reference)
        dated = [s for s in spans if s.has_date]
        if not dated:
            return None

        priority = {
            SpanRecognizerFactory.get_recognizer(step).recognizer_id: i
            for i, step in enumerate(self.get_recognizer_steps())
        }
        best = min(dated, key=lambda s: (priority.get(s.recognizer_id, len(priority)), s.start_offset))

        following_time = next(
            (s for s in spans if s.kind == SpanKind.TIME and s.start_offset >= best.end_offset),
            None,
        )
        return date_info_from_span(
            best, tzinfo=self.tzinfo, duration=self.duration, time_span=following_time
        )
