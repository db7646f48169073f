"""Eventbrite event pages."""

from __future__ import annotations

from content_tree import node_text
from date_spans.date_info import ResolvedDateInfo
from extraction_strategies.selector_rule_strategy import (
    SelectorRuleStrategy,
    is_valid_location,
    is_valid_title,
)
from extraction_strategies.strategy_base import ExtractionContext

_TITLE_SELECTORS = (
    'h1[data-automation-id="event-title"]',
    ".event-title",
    ".event-card__title",
    "h1",
)
_DATE_SELECTORS = (
    '[data-automation-id="event-start-date"]',
    ".event-details__data time",
    ".date-info",
    "time[datetime]",
)
_LOCATION_SELECTORS = (
    ".venue-info",
    ".event-details__data--location",
    '[data-automation-id="event-venue"]',
)


class EventbriteStrategy(SelectorRuleStrategy):
    """Eventbrite markup first, then the site rule's selectors."""

    def name(self) -> str:
        return "eventbrite"

    def extract_title(self, context: ExtractionContext) -> str | None:
        for selector in _TITLE_SELECTORS:
            for element in context.target.select(selector):
                text = node_text(element)
                if is_valid_title(text):
                    return text[: self.config.max_title_length]
        return super().extract_title(context)

    def extract_date(self, context: ExtractionContext) -> ResolvedDateInfo | None:
        for selector in _DATE_SELECTORS:
            for element in context.target.select(selector):
                date_info = self.parse_datetime_attribute(element.get("datetime"), context)
                if date_info is None:
                    date_info = self.parse_date_text(node_text(element), context)
                if date_info is not None:
                    return date_info
        return super().extract_date(context)

    def extract_location(self, context: ExtractionContext) -> str | None:
        for selector in _LOCATION_SELECTORS:
            for element in context.target.select(selector):
                text = node_text(element)
                if is_valid_location(text):
                    return text
        return super().extract_location(context)
