"""Tests for extract_event_context."""

from unittest.mock import patch

import pytest
from bs4 import BeautifulSoup

from event_context.context_extractor import extract_event_context
from extraction_config import ExtractionConfig

FESTIVAL_HTML = """
<html><head><title>夏祭り2025 - サンプル市</title></head><body>
<article class="event">
  <h2>サンプル市 夏祭り花火大会</h2>
  <p id="when">2025年8月27日(水) 18:30 開始</p>
  <p id="where">会場は中央公園です。雨天の場合は翌日に順延します。</p>
</article>
</body></html>
"""


class TestExtractEventContext:

    def setup_method(self):
        self.soup = BeautifulSoup(FESTIVAL_HTML, "html.parser")
        self.anchor = self.soup.find(id="when")

    def test_title_and_description(self):
        context = extract_event_context(self.anchor, page_url="https://example.com/fes")
        assert context.title == "サンプル市 夏祭り花火大会"
        assert "会場は中央公園です" in context.description
        assert context.description.endswith("\nURL: https://example.com/fes")
        assert context.sources == ["h2", "context-paragraphs"]
        assert 0.0 < context.confidence <= 1.0

    def test_url_omitted_when_disabled(self):
        options = ExtractionConfig(include_url=False)
        context = extract_event_context(self.anchor, options, page_url="https://example.com/fes")
        assert "URL:" not in context.description

    def test_description_respects_cap(self):
        options = ExtractionConfig(max_description_length=40)
        context = extract_event_context(self.anchor, options, page_url="https://example.com/fes")
        assert len(context.description) <= 40

    def test_title_respects_cap(self):
        options = ExtractionConfig(max_title_length=5)
        context = extract_event_context(self.anchor, options)
        assert context.title == "サンプル市"

    def test_failure_falls_back_to_page_title(self):
        with patch(
            "event_context.context_extractor.ContextScanner.title_candidates",
            side_effect=RuntimeError("boom"),
        ):
            context = extract_event_context(self.anchor, page_url="https://example.com/fes")

        assert context.title == "夏祭り2025"
        assert context.description == "Could not extract event details.\nURL: https://example.com/fes"
        assert context.confidence == pytest.approx(0.1)
        assert context.sources == ["error-fallback"]
