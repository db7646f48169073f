"""Tests for page-scan span detection and selection date parsing."""

from datetime import date, timedelta
from zoneinfo import ZoneInfo

import pytest

from date_spans import detect_spans, parse_date
from date_spans.orchestrators.orchestrator_factory import SpanOrchestratorFactory, SpanOrchestratorTypes
from date_spans.orchestrators.page_scan_orchestrator import PageScanOrchestrator
from date_spans.orchestrators.selection_parse_orchestrator import SelectionParseOrchestrator
from date_spans.orchestrators.span_orchestrator import SpanOrchestrator
from date_spans.span import SpanKind, TemporalSpan
from extraction_config import ExtractionConfig

REFERENCE = date(2025, 4, 1)


def _span(start, end, recognizer_id="numeric"):
    return TemporalSpan(
        start_offset=start,
        end_offset=end,
        raw_text="x" * (end - start),
        recognizer_id=recognizer_id,
        kind=SpanKind.DATE,
        normalized_date="2025-01-01",
    )


class TestDetectSpans:

    def test_mixed_japanese_text(self):
        text = "令和6年12月25日、2025/01/01、そして2月14日です。"
        spans = detect_spans(text, REFERENCE)
        assert [s.normalized_date for s in spans] == ["2024-12-25", "2025-01-01", "2026-02-14"]
        assert [s.recognizer_id for s in spans] == ["era", "numeric", "month-day"]

    def test_no_pattern_returns_empty(self):
        assert detect_spans("日付のない文章です", REFERENCE) == []

    @pytest.mark.parametrize("text", ["", "   "])
    def test_blank_text_returns_empty(self, text):
        assert detect_spans(text, REFERENCE) == []

    def test_time_inside_datetime_not_reported_twice(self):
        spans = detect_spans("2025-08-27 18:30 開場", REFERENCE)
        assert len(spans) == 1
        assert spans[0].kind == SpanKind.DATETIME

    def test_bare_time_kept_when_separate(self):
        spans = detect_spans("8月27日 開場17:30", REFERENCE)
        assert [s.kind for s in spans] == [SpanKind.DATE, SpanKind.TIME]

    def test_page_scan_ignores_loose_and_yearless_slash_dates(self):
        assert detect_spans("2025/8/27 と 8/27", REFERENCE) == []

    def test_long_text_is_skipped(self):
        config = ExtractionConfig(max_text_length=10)
        assert detect_spans("2025/01/01 から 2025/01/02 まで", REFERENCE, config) == []

    @pytest.mark.parametrize(
        "text",
        [
            "2025年8月27日(水) 18:30〜 8月28日",
            "令和元年5月1日 / May 1, 2019 / 明日 10:00",
            "2025/01/01 2025-01-02 1月3日 今日 23:59",
        ],
    )
    def test_spans_sorted_and_non_overlapping(self, text):
        spans = detect_spans(text, REFERENCE)
        assert spans
        for earlier, later in zip(spans, spans[1:]):
            assert earlier.end_offset <= later.start_offset


class TestResolveOverlaps:

    def test_earliest_start_wins(self):
        kept = SpanOrchestrator.resolve_overlaps([_span(4, 10), _span(0, 6), _span(10, 12)])
        assert [(s.start_offset, s.end_offset) for s in kept] == [(0, 6), (10, 12)]

    def test_tie_keeps_first_in_input_order(self):
        first = _span(0, 5, "era")
        second = _span(0, 8, "month-day")
        assert SpanOrchestrator.resolve_overlaps([first, second]) == [first]


class TestSelectionParse:

    def setup_method(self):
        self.orchestrator = SelectionParseOrchestrator(
            tzinfo=ZoneInfo("Asia/Tokyo"), duration=timedelta(minutes=180)
        )

    def test_explicit_date_beats_relative_word(self):
        info = self.orchestrator.parse_date("明日 2025/09/01 開催", REFERENCE)
        assert info.all_day is True
        assert info.start_date == "2025-09-01"
        assert info.source == "regex-numeric"

    def test_date_combined_with_following_time(self):
        info = self.orchestrator.parse_date("8月27日 開場17:30", REFERENCE)
        assert info.all_day is False
        assert info.start_datetime == "2025-08-27T17:30:00+09:00"
        assert info.end_datetime == "2025-08-27T20:30:00+09:00"
        assert info.time_zone == "Asia/Tokyo"

    def test_relative_only(self):
        info = self.orchestrator.parse_date("明日やります", REFERENCE)
        assert info.start_date == "2025-04-02"

    def test_time_without_date_is_not_a_date(self):
        assert self.orchestrator.parse_date("18:30 開演", REFERENCE) is None

    def test_slash_month_day_with_time(self):
        info = self.orchestrator.parse_date("8/27 18:00", REFERENCE)
        assert info.start_datetime == "2025-08-27T18:00:00+09:00"
        assert info.source == "regex-slash-month-day"

    @pytest.mark.parametrize("text", ["2025/8/27", "2025-8-27"])
    def test_loose_numeric_dates(self, text):
        info = self.orchestrator.parse_date(text, REFERENCE)
        assert info.all_day is True
        assert info.start_date == "2025-08-27"
        assert info.source == "regex-loose-numeric"

    def test_two_digit_numeric_date_keeps_strict_recognizer(self):
        assert self.orchestrator.parse_date("2025/08/27", REFERENCE).source == "regex-numeric"

    def test_english_date_with_twelve_hour_time(self):
        info = self.orchestrator.parse_date("Aug 27, 2025 6pm", REFERENCE)
        assert info.all_day is False
        assert info.start_datetime == "2025-08-27T18:00:00+09:00"

    def test_module_level_parse_date_uses_config(self):
        config = ExtractionConfig(default_timezone="UTC", default_duration_minutes=60)
        info = parse_date("2025-08-27 09:00", REFERENCE, config)
        assert info.start_datetime == "2025-08-27T09:00:00+00:00"
        assert info.end_datetime == "2025-08-27T10:00:00+00:00"


class TestSpanOrchestratorFactory:

    def test_page_scan(self):
        orchestrator = SpanOrchestratorFactory.get_orchestrator(SpanOrchestratorTypes.PAGE_SCAN)
        assert isinstance(orchestrator, PageScanOrchestrator)
        assert orchestrator.max_text_length == ExtractionConfig().max_text_length

    def test_selection(self):
        orchestrator = SpanOrchestratorFactory.get_orchestrator(SpanOrchestratorTypes.SELECTION)
        assert isinstance(orchestrator, SelectionParseOrchestrator)

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError):
            SpanOrchestratorFactory.get_orchestrator("bogus")
