"""Temporal span recognition for page text.

Recognizers find absolute, relative, era-based and month/day dates plus bare
times; orchestrators combine them into ordered, non-overlapping spans or a
single calendar-ready date for a user selection.
"""

from __future__ import annotations

from datetime import date, datetime

from date_spans.calendar_rules import (
    ERA_TABLE,
    convert_era_year,
    is_valid_date,
    resolve_year_for_month_day,
)
from date_spans.date_info import ResolvedDateInfo
from date_spans.factory import SpanRecognizerFactory, SpanRecognizers
from date_spans.span import SpanKind, TemporalSpan
from date_spans.strategy import SpanRecognizer


def detect_spans(text: str, reference: date | datetime, config=None) -> list[TemporalSpan]:
    """Ordered, non-overlapping temporal spans found in ``text``."""
    from date_spans.orchestrators.orchestrator_factory import SpanOrchestratorFactory, SpanOrchestratorTypes

    orchestrator = SpanOrchestratorFactory.get_orchestrator(SpanOrchestratorTypes.PAGE_SCAN, config)
    return orchestrator.detect_spans(text, reference)


def parse_date(text: str, reference: date | datetime, config=None) -> ResolvedDateInfo | None:
    """The single best date in ``text`` as an all-day or timed pair."""
    from date_spans.orchestrators.orchestrator_factory import SpanOrchestratorFactory, SpanOrchestratorTypes

    orchestrator = SpanOrchestratorFactory.get_orchestrator(SpanOrchestratorTypes.SELECTION, config)
    return orchestrator.parse_date(text, reference)


__all__ = [
    "ERA_TABLE",
    "ResolvedDateInfo",
    "SpanKind",
    "SpanRecognizer",
    "SpanRecognizerFactory",
    "SpanRecognizers",
    "TemporalSpan",
    "convert_era_year",
    "detect_spans",
    "is_valid_date",
    "parse_date",
    "resolve_year_for_month_day",
]
