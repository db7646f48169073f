"""STARDOM event detail pages (wwr-stardom.com/schedule/YYYYMMDD...)."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta

from bs4 import Tag

from content_tree import closest, document_root, node_text
from date_spans.calendar_rules import is_valid_date
from date_spans.date_info import ResolvedDateInfo
from extraction_result import ExtractionResult
from extraction_strategies.strategy_base import ExtractionContext, ExtractionStrategy

logger = logging.getLogger(__name__)

DETAIL_PAGE_RE = re.compile(r"https://wwr-stardom\.com/schedule/\d{8}")

TITLE_SELECTOR = "h2.tickets_title"
PRIMARY_LABEL_SELECTOR = ".data.data_bg1 p"
SECONDARY_LABEL_SELECTOR = ".data.data_bg2 p"
DATE_VALUE_SELECTOR = ".item p.date"
TIME_VALUE_SELECTOR = ".item .text .time"
VENUE_VALUE_SELECTOR = ".item .text a.place"

DATE_LABEL = "日時"
START_TIME_LABEL = "本戦開始時間"
VENUE_LABEL = "会場"
MATCH_CARD_LINK_TEXT = "対戦カードを見る"

_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2})")

EVENT_CONFIDENCE = 0.9


class StardomDetailStrategy(ExtractionStrategy):
    """One event per page; fields sit in labelled ``li`` rows."""

    def name(self) -> str:
        return "stardom_detail"

    def extract_all(self, context: ExtractionContext) -> ExtractionResult:
        empty = ExtractionResult(strategy_used=self.name(), url=context.url)
        if context.url and not DETAIL_PAGE_RE.match(context.url):
            return empty

        root = document_root(context.target)
        if root is None:
            return empty

        title = self.extract_title(root)
        if not title:
            logger.debug("No ticket title on STARDOM detail page %s", context.url)
            return empty

        date_info = self.extract_date_info(root, context)
        if date_info is None:
            logger.debug("No event date on STARDOM detail page %s", context.url)
            return empty

        venue = self.extract_venue(root)
        match_card_url = self.extract_match_card_url(root)

        lines = []
        if venue:
            lines.append(f"会場: {venue}")
        if context.url:
            lines.append(f"詳細情報: {context.url}")
        if match_card_url:
            lines.append(f"対戦カード: {match_card_url}")

        return ExtractionResult(
            title=title[: self.config.max_title_length],
            description="\n".join(lines) or None,
            location=venue,
            date_info=date_info,
            confidence=EVENT_CONFIDENCE,
            strategy_used=self.name(),
            url=context.url,
            sources=["stardom-detail"],
        )

    @staticmethod
    def extract_title(root: Tag) -> str | None:
        element = root.select_one(TITLE_SELECTOR)
        if element is None:
            return None
        return node_text(element) or None

    @staticmethod
    def labelled_row(root: Tag, label_selector: str, label: str) -> Tag | None:
        """The ``li`` holding the label paragraph whose text contains ``label``."""
        for paragraph in root.select(label_selector):
            if label in node_text(paragraph):
                return closest(paragraph, "li")
        return None

    def extract_date_info(self, root: Tag, context: ExtractionContext) -> ResolvedDateInfo | None:
        """Date from ``<span>2025</span>年<span>9</span>月<span>6</span>日``, timed when a start time is listed."""
        row = self.labelled_row(root, PRIMARY_LABEL_SELECTOR, DATE_LABEL)
        date_element = row.select_one(DATE_VALUE_SELECTOR) if row is not None else None
        if date_element is None:
            return None

        parts = [node_text(span) for span in date_element.find_all("span")]
        if len(parts) < 3 or not all(part.isdigit() for part in parts[:3]):
            # Some pages write the date as plain text
            return self.parse_date_text(node_text(date_element), context)

        year, month, day = (int(part) for part in parts[:3])
        if not is_valid_date(year, month, day):
            return None

        source = f"detail-{self.name()}"
        clock = self.extract_start_time(root)
        if clock is None:
            return ResolvedDateInfo.all_day_event(datetime(year, month, day).date(), source, EVENT_CONFIDENCE)

        hour, minute = clock
        start = datetime(year, month, day, hour, minute, tzinfo=context.config.tzinfo)
        return ResolvedDateInfo.timed_event(
            start,
            timedelta(minutes=context.config.default_duration_minutes),
            source,
            EVENT_CONFIDENCE,
        )

    def extract_start_time(self, root: Tag) -> tuple[int, int] | None:
        row = self.labelled_row(root, SECONDARY_LABEL_SELECTOR, START_TIME_LABEL)
        element = row.select_one(TIME_VALUE_SELECTOR) if row is not None else None
        if element is None:
            return None

        m = _CLOCK_RE.search(node_text(element))
        if not m:
            return None
        hour, minute = int(m.group(1)), int(m.group(2))
        if hour > 23 or minute > 59:
            return None
        return hour, minute

    def extract_venue(self, root: Tag) -> str | None:
        row = self.labelled_row(root, PRIMARY_LABEL_SELECTOR, VENUE_LABEL)
        element = row.select_one(VENUE_VALUE_SELECTOR) if row is not None else None
        if element is None:
            return None
        return node_text(element) or None

    @staticmethod
    def extract_match_card_url(root: Tag) -> str | None:
        for link in root.find_all("a"):
            if MATCH_CARD_LINK_TEXT in node_text(link) and link.get("href"):
                return link["href"]
        return None
