"""Generic extraction for pages without a dedicated strategy.

The title and description come from the context heuristics around the
anchor; structured page data (headings, meta tags, microdata, JSON-LD) and
the matched rule's selectors fill whatever the heuristics leave empty.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace

from bs4 import Tag

from content_tree import (
    class_names,
    document_root,
    element_parent,
    meta_content,
    next_elements,
    node_text,
    page_title,
    previous_elements,
)
from date_spans.date_info import ResolvedDateInfo
from event_context.context_extractor import extract_event_context
from event_context.text_filters import strip_site_suffix
from extraction_result import ExtractionResult
from extraction_strategies.selector_rule_strategy import (
    DESCRIPTION_SEPARATOR,
    FIELD_COUNT,
    MAX_DESCRIPTION_ELEMENTS,
    SelectorRuleStrategy,
    is_valid_description,
    is_valid_title,
)
from extraction_strategies.strategy_base import ExtractionContext

logger = logging.getLogger(__name__)

_TITLE_SELECTOR_STEPS = (
    "h1, h2",
    ".title, .event-title, .product-title",
    "article h1, article h2, article .title",
)
_DESCRIPTION_SELECTOR_STEPS = (
    ".description, .summary, .content",
    "article p, article .content",
)
_DATE_SELECTOR_STEPS = (
    "time[datetime]",
    ".date, .datetime, .event-date",
)
_MICRODATA_DATE_SELECTOR = '[itemprop="startDate"], [itemprop="dateTime"], [itemprop="date"]'
_NEARBY_PARAGRAPH_RANGE = 2


def score_structured_title(text: str, element: Tag) -> float:
    """Score a heading-ish element found by selector rather than by proximity."""
    score = 0.5
    if element.name == "h1":
        score += 0.3
    elif element.name == "h2":
        score += 0.2

    class_name = " ".join(class_names(element)).lower()
    if "title" in class_name:
        score += 0.2
    if "event" in class_name:
        score += 0.1

    if 10 <= len(text) <= 60:
        score += 0.1
    elif len(text) > 100:
        score -= 0.2
    return min(1.0, max(0.0, score))


def find_structured_event_date(data) -> str | None:
    """Depth-first search of JSON-LD data for an Event's startDate."""
    if isinstance(data, list):
        for item in data:
            found = find_structured_event_date(item)
            if found:
                return found
        return None
    if not isinstance(data, dict):
        return None

    types = data.get("@type")
    if types == "Event" or (isinstance(types, list) and "Event" in types):
        if data.get("startDate"):
            return str(data["startDate"])

    for value in data.values():
        if isinstance(value, (dict, list)):
            found = find_structured_event_date(value)
            if found:
                return found
    return None


class GeneralStrategy(SelectorRuleStrategy):
    """Heuristic extraction usable on any page."""

    def name(self) -> str:
        return "general"

    def extract_all(self, context: ExtractionContext) -> ExtractionResult:
        options = replace(context.config, include_url=context.include_url)
        event_context = extract_event_context(context.target, options, page_url=context.url)

        title = event_context.title or self._settled("title", self.extract_title, context)
        description = event_context.description or self._settled("description", self.extract_description, context)
        date_info = self._settled("date", self.extract_date, context)
        location = event_context.location or self._settled("location", self.extract_location, context)
        price = self._settled("price", self.extract_price, context)

        if event_context.title:
            confidence = event_context.confidence
        else:
            found = sum(1 for value in (title, description, date_info, location, price) if value)
            confidence = found / FIELD_COUNT

        return ExtractionResult(
            title=title,
            description=description,
            location=location,
            date_info=date_info,
            confidence=confidence,
            strategy_used=self.name(),
            price=price,
            url=context.url,
            sources=list(event_context.sources),
            rule_used=self.rule.domain if self.rule else None,
        )

    # Title

    def extract_title(self, context: ExtractionContext) -> str | None:
        for selector in _TITLE_SELECTOR_STEPS:
            title = self._best_title(context, selector)
            if title:
                return title[: self.config.max_title_length]

        title = self._title_from_meta(context)
        if title:
            return title[: self.config.max_title_length]
        return super().extract_title(context)

    def _best_title(self, context: ExtractionContext, selector: str) -> str | None:
        best_text, best_score = None, -1.0
        for element in self.find_elements(context, selector):
            text = node_text(element)
            if not is_valid_title(text):
                continue
            score = score_structured_title(text, element)
            if score > best_score:
                best_text, best_score = text, score
        return best_text

    def _title_from_meta(self, context: ExtractionContext) -> str | None:
        og_title = meta_content(context.target, prop="og:title")
        if is_valid_title(og_title):
            return og_title
        title = page_title(context.target)
        if is_valid_title(title):
            return strip_site_suffix(title) or None
        return None

    # Description

    def extract_description(self, context: ExtractionContext) -> str | None:
        for selector in _DESCRIPTION_SELECTOR_STEPS:
            elements = self.find_elements(context, selector)
            texts = [
                text for text in (node_text(e) for e in elements[:MAX_DESCRIPTION_ELEMENTS])
                if is_valid_description(text)
            ]
            if texts:
                return DESCRIPTION_SEPARATOR.join(texts)

        nearby = self._nearby_paragraphs(context.target)
        if nearby:
            return nearby

        for meta in (meta_content(context.target, prop="og:description"),
                     meta_content(context.target, name="description")):
            if is_valid_description(meta):
                return meta
        return super().extract_description(context)

    @staticmethod
    def _nearby_paragraphs(target: Tag) -> str | None:
        if element_parent(target) is None:
            return None
        nearby = list(reversed(previous_elements(target, _NEARBY_PARAGRAPH_RANGE)))
        nearby += next_elements(target, _NEARBY_PARAGRAPH_RANGE)

        texts = []
        for element in nearby:
            if element.name == "p" or "description" in class_names(element):
                text = node_text(element)
                if is_valid_description(text):
                    texts.append(text)
        return DESCRIPTION_SEPARATOR.join(texts) if texts else None

    # Date

    def extract_date(self, context: ExtractionContext) -> ResolvedDateInfo | None:
        # What the user pointed at beats anything elsewhere on the page
        date_info = self.parse_date_text(context.selection_text or node_text(context.target), context)
        if date_info is not None:
            return date_info

        for selector in _DATE_SELECTOR_STEPS:
            for element in self.find_elements(context, selector):
                date_info = self.parse_datetime_attribute(element.get("datetime"), context)
                if date_info is None:
                    date_info = self.parse_date_text(node_text(element), context)
                if date_info is not None:
                    return date_info

        date_info = self._microdata_date(context) or self._structured_data_date(context)
        if date_info is not None:
            return date_info
        return super().extract_date(context)

    def _microdata_date(self, context: ExtractionContext) -> ResolvedDateInfo | None:
        for element in context.target.select(_MICRODATA_DATE_SELECTOR):
            value = element.get("datetime") or element.get("content")
            date_info = self.parse_datetime_attribute(value, context)
            if date_info is not None:
                return date_info
        return None

    def _structured_data_date(self, context: ExtractionContext) -> ResolvedDateInfo | None:
        root = document_root(context.target)
        if root is None:
            return None
        for script in root.find_all("script", attrs={"type": "application/ld+json"}):
            try:
                data = json.loads(script.string or "")
            except ValueError:
                logger.debug("Skipping malformed JSON-LD block")
                continue
            start_date = find_structured_event_date(data)
            date_info = self.parse_datetime_attribute(start_date, context)
            if date_info is not None:
                return date_info
        return None
