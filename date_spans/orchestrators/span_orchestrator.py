"""Base class for orchestrators that run several recognizers over one text unit."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Iterable, List

from date_spans.factory import SpanRecognizerFactory, SpanRecognizers
from date_spans.span import SpanKind, TemporalSpan


class SpanOrchestrator(ABC):
    """Runs recognizers in priority order and resolves their overlaps.

    Subclasses choose which recognizers run and in what order. The order is
    the tie-breaker when two spans start at the same offset.
    """

    def __init__(self, max_text_length: int | None = None):
        self.max_text_length = max_text_length

    @abstractmethod
    def get_recognizer_steps(self) -> List[SpanRecognizers]:
        """Return the recognizers to run, highest priority first."""
        pass

    def collect_spans(self, text: str, reference: date | datetime) -> list[TemporalSpan]:
        """Gather raw spans from every recognizer, in recognizer order.

        Bare times are only kept when they do not overlap a date already found.
        """
        date_spans: list[TemporalSpan] = []
        time_spans: list[TemporalSpan] = []
        for step in self.get_recognizer_steps():
            recognizer = SpanRecognizerFactory.get_recognizer(step)
            for span in recognizer.find_spans(text, reference):
                if span.kind == SpanKind.TIME:
                    time_spans.append(span)
                else:
                    date_spans.append(span)

        for span in time_spans:
            if not any(span.overlaps(found) for found in date_spans):
                date_spans.append(span)
        return date_spans

    @staticmethod
    def resolve_overlaps(spans: Iterable[TemporalSpan]) -> list[TemporalSpan]:
        """Greedy left-to-right selection: earliest start wins, ties keep input order."""
        ordered = sorted(spans, key=lambda s: s.start_offset)  # sorted() is stable
        kept: list[TemporalSpan] = []
        last_end = 0
        for span in ordered:
            if span.start_offset >= last_end:
                kept.append(span)
                last_end = span.end_offset
        return kept

    def detect_spans(self, text: str, reference: date | datetime) -> list[TemporalSpan]:
        """Return the ordered, non-overlapping spans found in ``text``."""
        if not text or not text.strip():
            return []
        if self.max_text_length is not None and len(text) > self.max_text_length:
            return []
        return self.resolve_overlaps(self.collect_spans(text, reference))
