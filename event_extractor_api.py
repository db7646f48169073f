"""Unified entry points for extracting events from a selection, an element or a page.

Every call builds an ExtractionContext and hands it to the StrategyRegistry.
When no registry is configured a small built-in fallback answers instead.
None of the public methods raise; failures come back as an
ExtractionResult with ``strategy_used == "error"``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from urllib.parse import urlparse

from bs4 import Tag

from content_tree import as_element, is_inside, node_text, select_all
from date_spans import detect_spans, parse_date
from event_context.context_scanner import ContextScanner
from extraction_config import ExtractionConfig
from extraction_result import ExtractionResult
from extraction_strategies.extraction_strategy_factory import StrategyRegistry
from extraction_strategies.strategy_base import ExtractionContext

logger = logging.getLogger(__name__)

PAGE_SCAN_EXCLUDE_SELECTOR = ", ".join((
    "script",
    "style",
    "noscript",
    "textarea",
    "input",
    "select",
    "button",
    "[contenteditable]",
    ".chronoclip-date",
    ".chronoclip-ignore",
))
PAGE_SCAN_INCLUDE_SELECTORS = ("p", "div", "span", "li", "td", "h1", "h2", "h3", "h4", "h5", "h6")
_MIN_SCAN_TEXT_LENGTH = 5

SELECTION_FALLBACK_CONFIDENCE = 0.5
ELEMENT_FALLBACK_CONFIDENCE = 0.3
_MAX_FALLBACK_TITLE_LENGTH = 100
_MIN_FALLBACK_PARAGRAPH_LENGTH = 10

_LEADING_BULLET_RE = re.compile(r"^\s*[-•·]\s*")
_PIPE_SUFFIX_RE = re.compile(r"\s*[|｜]\s*.*$")
_DASH_SUFFIX_RE = re.compile(r"\s*[-–—]\s*.*$")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class SelectionInfo:
    """What the user selected: the text and the element it sits in."""
    text: str
    element: Tag | None = None
    url: str | None = None
    domain: str | None = None


def clean_title(title: str | None) -> str:
    """Strip bullets and "| site" / "- site" suffixes from a fallback title."""
    if not title:
        return ""
    title = _LEADING_BULLET_RE.sub("", title)
    title = _PIPE_SUFFIX_RE.sub("", title)
    title = _DASH_SUFFIX_RE.sub("", title)
    return _WHITESPACE_RE.sub(" ", title).strip()[:_MAX_FALLBACK_TITLE_LENGTH]


def domain_of(url: str | None) -> str:
    if not url:
        return ""
    return urlparse(url).hostname or ""


class EventExtractorAPI:
    """Facade shared by selection clipping and whole-page scanning."""

    def __init__(self, registry: StrategyRegistry | None = None, config: ExtractionConfig | None = None):
        self.registry = registry
        self.config = config or ExtractionConfig()
        self._scanner = ContextScanner(self.config)

    async def extract_from_selection(self, selection: SelectionInfo, reference: date | datetime) -> ExtractionResult:
        try:
            if self.registry is None:
                return self.fallback_from_selection(selection, reference)

            target = as_element(selection.element)
            if target is None:
                return self.fallback_from_selection(selection, reference)

            domain = selection.domain or domain_of(selection.url)
            context = ExtractionContext(
                target=target,
                reference=reference,
                url=selection.url,
                domain=domain,
                selection_text=selection.text,
                config=self.config,
            )
            return await self.registry.extract(context, domain)
        except Exception as e:
            logger.exception("Selection extraction failed")
            return ExtractionResult.failure(str(e))

    async def extract_from_element(
        self,
        element: Tag,
        reference: date | datetime,
        *,
        url: str | None = None,
        domain: str | None = None,
    ) -> ExtractionResult:
        try:
            if self.registry is None:
                return self.fallback_from_element(element, reference)

            domain = domain or domain_of(url)
            context = ExtractionContext(
                target=element,
                reference=reference,
                url=url,
                domain=domain,
                config=self.config,
            )
            return await self.registry.extract(context, domain)
        except Exception as e:
            logger.exception("Element extraction failed")
            return ExtractionResult.failure(str(e))

    async def extract_from_page(
        self,
        root: Tag,
        reference: date | datetime,
        *,
        url: str | None = None,
        domain: str | None = None,
        max_results: int | None = None,
    ) -> list[ExtractionResult]:
        """Scan the page for elements containing dates and extract an event for each.

        Elements are visited by tag (paragraphs first, headings last); an
        element nested in, or containing, one that already produced an event
        is skipped so each date block yields one event.
        """
        max_results = max_results or self.config.max_page_results
        results: list[ExtractionResult] = []
        processed: list[Tag] = []

        try:
            for element in self.scan_candidates(root, reference):
                if len(results) >= max_results:
                    break
                if any(_related(element, done) for done in processed):
                    continue

                result = await self.extract_from_element(element, reference, url=url, domain=domain)
                if result.date_info is None:
                    continue
                results.append(result)
                processed.append(element)
        except Exception:
            logger.exception("Page scan stopped after %d events", len(results))

        logger.info("Page scan found %d events", len(results))
        return results

    def scan_candidates(self, root: Tag, reference: date | datetime):
        """Elements whose text contains at least one temporal span, outside excluded regions."""
        for selector in PAGE_SCAN_INCLUDE_SELECTORS:
            for element in select_all(root, selector):
                if is_inside(element, PAGE_SCAN_EXCLUDE_SELECTOR):
                    continue
                text = node_text(element)
                if len(text) < _MIN_SCAN_TEXT_LENGTH:
                    continue
                if any(span.has_date for span in detect_spans(text, reference, self.config)):
                    yield element

    # Fallbacks

    def fallback_from_selection(self, selection: SelectionInfo, reference: date | datetime) -> ExtractionResult:
        element = as_element(selection.element)
        heading = self._scanner.find_nearest_heading(element) if element is not None else None
        paragraphs = self._scanner.collect_sibling_paragraphs(element) if element is not None else []

        texts = [selection.text, node_text(heading) if heading is not None else ""]
        texts += paragraphs
        if element is not None:
            texts.append(node_text(element))

        date_info = None
        for text in texts:
            if text:
                date_info = parse_date(text, reference, self.config)
                if date_info is not None:
                    break

        if heading is not None:
            title = clean_title(node_text(heading))
        elif selection.text and len(selection.text) <= _MAX_FALLBACK_TITLE_LENGTH:
            title = clean_title(selection.text)
        else:
            title = ""

        parts = [p for p in paragraphs if len(p) > _MIN_FALLBACK_PARAGRAPH_LENGTH]
        return ExtractionResult(
            title=title or None,
            description="\n\n".join(parts) or None,
            date_info=date_info,
            confidence=SELECTION_FALLBACK_CONFIDENCE,
            strategy_used="fallback",
            url=selection.url,
            sources=["fallback-selection"],
        )

    def fallback_from_element(self, element: Tag, reference: date | datetime) -> ExtractionResult:
        text = node_text(element)
        date_info = parse_date(text, reference, self.config) if text else None
        heading = self._scanner.find_nearest_heading(element)
        title = clean_title(node_text(heading)) if heading is not None else ""

        return ExtractionResult(
            title=title or None,
            date_info=date_info,
            confidence=ELEMENT_FALLBACK_CONFIDENCE,
            strategy_used="fallback",
            sources=["fallback-element"],
        )


def _related(a: Tag, b: Tag) -> bool:
    """True when one element is the other or contains it."""
    if a is b:
        return True
    return any(parent is b for parent in a.parents) or any(parent is a for parent in b.parents)

