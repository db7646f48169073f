"""New Japan Pro-Wrestling schedule pages (njpw.co.jp/schedule)."""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from urllib.parse import urljoin

from bs4 import Tag

from content_tree import closest, document_root, node_text
from date_spans.date_info import ResolvedDateInfo
from extraction_result import ExtractionResult
from extraction_strategies.strategy_base import ExtractionContext, ExtractionStrategy

logger = logging.getLogger(__name__)

SITE_ROOT = "https://www.njpw.co.jp"
SCHEDULE_URL_RE = re.compile(r"https://www\.njpw\.co\.jp/schedule")

EVENT_CONTAINERS = (".card", ".schedule-item", "article", "li")
PAGE_EVENT_SELECTORS = (".card", ".schedule-item", "article", ".event-item")
TITLE_SELECTORS = (
    "h2", "h3", ".title", ".event-title", ".card-title", ".schedule-title",
    "a[href*='/tornament/']", "a[href*='/event/']",
)
DATE_SELECTORS = (".date", ".event-date", ".schedule-date", "time", "[datetime]", ".card-date")
LOCATION_SELECTORS = (".venue", ".location", ".event-venue", ".place", ".arena")
LINK_SELECTORS = ("a[href*='/tornament/']", "a[href*='/event/']", "a[href]")

VENUE_PATTERNS = (
    re.compile(r"会場[：:]\s*([^\n]+)"),
    re.compile(r"場所[：:]\s*([^\n]+)"),
    re.compile(r"(東京ドーム|両国国技館|大阪城ホール|後楽園ホール|横浜アリーナ)"),
)

EVENT_CONFIDENCE = 0.9


class NjpwScheduleStrategy(ExtractionStrategy):
    """One schedule card per event: title, date, venue and detail link."""

    def name(self) -> str:
        return "njpw_schedule"

    def extract_all(self, context: ExtractionContext) -> ExtractionResult:
        if context.url and not SCHEDULE_URL_RE.match(context.url):
            return ExtractionResult(strategy_used=self.name(), url=context.url)

        card = None
        for selector in EVENT_CONTAINERS:
            card = closest(context.target, selector)
            if card is not None:
                break

        if card is None:
            return self._schedule_result(context)

        event = self.extract_card(card, context)
        if event is None:
            logger.debug("No NJPW schedule card around %s", context.target.name)
            return ExtractionResult(strategy_used=self.name(), url=context.url)
        return event

    def _schedule_result(self, context: ExtractionContext) -> ExtractionResult:
        """First dated card on the page, with the whole listing attached."""
        events = self.extract_schedule(context)
        logger.debug("NJPW schedule: %d dated cards for %s", len(events), context.url or "page")
        if not events:
            return ExtractionResult(strategy_used=self.name(), url=context.url)

        first = events[0]
        return replace(first, events=events if len(events) > 1 else [])

    def extract_schedule(self, context: ExtractionContext) -> list[ExtractionResult]:
        """All cards on the schedule page that have both a title and a date."""
        root = document_root(context.target)
        if root is None:
            return []
        cards: list[Tag] = []
        for selector in PAGE_EVENT_SELECTORS:
            cards = root.select(selector)
            if cards:
                break

        events = []
        for card in cards:
            event = self.extract_card(card, context)
            if event is not None and event.date_info is not None:
                events.append(event)
        return events

    def extract_card(self, card: Tag, context: ExtractionContext) -> ExtractionResult | None:
        title = self.extract_title(card)
        if not title:
            return None

        location = self.extract_location(card)
        event_url = self.extract_event_url(card, context) or context.url
        date_info = self.extract_date_info(card, context)

        lines = []
        if location:
            lines.append(f"会場: {location}")
        if event_url:
            lines.append(f"詳細情報: {event_url}")

        return ExtractionResult(
            title=title[: self.config.max_title_length],
            description="\n".join(lines) or None,
            location=location,
            date_info=date_info,
            confidence=EVENT_CONFIDENCE,
            strategy_used=self.name(),
            url=event_url,
            sources=["njpw-schedule"],
        )

    @staticmethod
    def extract_title(card: Tag) -> str | None:
        for selector in TITLE_SELECTORS + ("strong",):
            element = card.select_one(selector)
            if element is not None and node_text(element):
                return node_text(element)
        return None

    def extract_date_info(self, card: Tag, context: ExtractionContext) -> ResolvedDateInfo | None:
        date_text, date_attr = "", None
        for selector in DATE_SELECTORS:
            element = card.select_one(selector)
            if element is not None:
                date_text = node_text(element)
                date_attr = element.get("datetime")
                if date_text or date_attr:
                    break

        date_info = self.parse_datetime_attribute(date_attr, context)
        if date_info is None:
            date_info = self.parse_date_text(date_text, context)
        return date_info

    @staticmethod
    def extract_location(card: Tag) -> str | None:
        for selector in LOCATION_SELECTORS:
            element = card.select_one(selector)
            if element is not None and node_text(element):
                return node_text(element)

        text = card.get_text("\n")
        for pattern in VENUE_PATTERNS:
            m = pattern.search(text)
            if m:
                return (m.group(1) or m.group(0)).strip()
        return None

    @staticmethod
    def extract_event_url(card: Tag, context: ExtractionContext) -> str | None:
        for selector in LINK_SELECTORS:
            link = card.select_one(selector)
            if link is not None and link.get("href"):
                href = link["href"]
                if href.startswith("/"):
                    return urljoin(SITE_ROOT, href)
                return href
        return None
