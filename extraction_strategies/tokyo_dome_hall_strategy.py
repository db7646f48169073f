"""Tokyo Dome City Hall / Korakuen Hall event calendar (tokyo-dome.co.jp/hall/event)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from urllib.parse import urljoin

from bs4 import Tag

from content_tree import closest, document_root, node_text
from date_spans.calendar_rules import is_valid_date, reference_day
from date_spans.date_info import ResolvedDateInfo
from extraction_result import ExtractionResult
from extraction_strategies.strategy_base import ExtractionContext, ExtractionStrategy

logger = logging.getLogger(__name__)

VENUE = "後楽園ホール"
SITE_BASE_URL = "https://www.tokyo-dome.co.jp/hall/event/"
JST = timezone(timedelta(hours=9), "JST")

CALENDAR_SELECTOR = ".c-mod-calender"
ROW_SELECTOR = ".c-mod-calender__item"
EVENT_BLOCK_SELECTOR = ".c-mod-calender__detail-in"
DAY_SELECTOR = ".c-mod-calender__day"
CAPTION_SELECTOR = ".c-txt-caption-01"
LINK_SELECTOR = ".c-mod-calender__links a"
LINKS_SELECTOR = ".c-mod-calender__links"
TAG_SELECTOR = ".c-txt-tag__item"
YEAR_MONTH_SELECTOR = ".c-ttl-set-calender"
TAB_BODY_SELECTOR = ".c-mod-tab__body"

_YEAR_MONTH_RE = re.compile(r"(\d{4})年(\d{1,2})月")
_START_TIME_RE = re.compile(r"開始\s*(\d{1,2}):(\d{2})")
_DAY_RE = re.compile(r"\d{1,2}")

EVENT_CONFIDENCE = 0.9
NO_EVENT_CONFIDENCE = 0.1
DEFAULT_TITLE = "イベント"


@dataclass
class HallEvent:
    title: str
    start_time: str | None
    url: str | None
    category: str | None
    contact: str | None


class TokyoDomeHallStrategy(ExtractionStrategy):
    """Reads the monthly calendar table; one block per event, day in the row."""

    def name(self) -> str:
        return "tokyo_dome_hall"

    def extract_all(self, context: ExtractionContext) -> ExtractionResult:
        block = closest(context.target, EVENT_BLOCK_SELECTOR)
        if block is not None:
            events = [e for e in [self._event_for_block(block, context)] if e is not None]
        else:
            events = self.extract_calendar(context)

        logger.debug("Tokyo Dome Hall: %d events for %s", len(events), context.url or "page")
        if not events:
            return ExtractionResult(
                location=VENUE,
                confidence=NO_EVENT_CONFIDENCE,
                strategy_used=self.name(),
                url=context.url,
            )

        first = events[0]
        return ExtractionResult(
            title=first.title,
            description=first.description,
            location=VENUE,
            date_info=first.date_info,
            confidence=EVENT_CONFIDENCE,
            strategy_used=self.name(),
            url=first.url or context.url,
            events=events if len(events) > 1 else [],
        )

    def extract_calendar(self, context: ExtractionContext) -> list[ExtractionResult]:
        """Every event in every calendar table on the page."""
        root = document_root(context.target)
        if root is None:
            return []
        page_year_month = self.extract_year_month(root, None, context)

        events = []
        for table in root.select(CALENDAR_SELECTOR):
            year_month = self._table_year_month(table) or page_year_month
            for row in table.select(ROW_SELECTOR):
                day = self._day_of(row)
                if day is None:
                    continue
                for block in row.select(EVENT_BLOCK_SELECTOR):
                    detail = self.extract_single_event(block, context)
                    if detail is None:
                        continue
                    event = self._build_event(year_month, day, detail, context)
                    if event is not None:
                        events.append(event)
        return events

    def _event_for_block(self, block: Tag, context: ExtractionContext) -> ExtractionResult | None:
        day_element = block.select_one(DAY_SELECTOR)
        if day_element is None:
            row = closest(block, "tr")
            if row is None:
                row = closest(block, ROW_SELECTOR)
            day_element = row.select_one(DAY_SELECTOR) if row is not None else None
        day = self._parse_day(node_text(day_element)) if day_element is not None else None
        if day is None:
            return None

        detail = self.extract_single_event(block, context)
        if detail is None:
            return None
        year_month = self.extract_year_month(document_root(block), block, context)
        return self._build_event(year_month, day, detail, context)

    def extract_year_month(self, root: Tag, block: Tag | None, context: ExtractionContext) -> tuple[int, int]:
        """Year and month from the calendar heading; the reference month if absent."""
        heading = None
        if block is not None:
            tab_body = closest(block, TAB_BODY_SELECTOR)
            if tab_body is not None:
                heading = tab_body.select_one(YEAR_MONTH_SELECTOR)
        if heading is None and root is not None:
            heading = root.select_one(YEAR_MONTH_SELECTOR)

        if heading is not None:
            m = _YEAR_MONTH_RE.search(node_text(heading))
            if m:
                return int(m.group(1)), int(m.group(2))

        ref = reference_day(context.reference)
        return ref.year, ref.month

    @staticmethod
    def _table_year_month(table: Tag) -> tuple[int, int] | None:
        heading = table.select_one(YEAR_MONTH_SELECTOR)
        if heading is None:
            return None
        m = _YEAR_MONTH_RE.search(node_text(heading))
        return (int(m.group(1)), int(m.group(2))) if m else None

    def _day_of(self, row: Tag) -> int | None:
        day_element = row.select_one(DAY_SELECTOR)
        return self._parse_day(node_text(day_element)) if day_element is not None else None

    @staticmethod
    def _parse_day(text: str) -> int | None:
        m = _DAY_RE.search(text or "")
        return int(m.group(0)) if m else None

    def extract_single_event(self, block: Tag, context: ExtractionContext) -> HallEvent | None:
        link = block.select_one(LINK_SELECTOR)
        title = node_text(link) if link is not None else None
        url = urljoin(context.url or SITE_BASE_URL, link["href"]) if link is not None and link.get("href") else None

        if not title:
            links_element = block.select_one(LINKS_SELECTOR)
            if links_element is not None and links_element.find("a") is None:
                title = node_text(links_element) or None

        start_time = None
        contact = []
        for caption in block.select(CAPTION_SELECTOR):
            text = node_text(caption)
            if "開始" in text:
                m = _START_TIME_RE.search(text)
                if m:
                    start_time = f"{int(m.group(1)):02d}:{m.group(2)}"
            elif "お問い合わせ" in text:
                contact.append(text)

        tag = block.select_one(TAG_SELECTOR)
        category = node_text(tag) if tag is not None else None

        if not title and not start_time:
            lines = [line.strip() for line in block.get_text("\n").split("\n") if line.strip()]
            fallback = next((line for line in lines if "開始" not in line and "終了" not in line), None)
            if fallback is None:
                return None
            title = fallback

        return HallEvent(
            title=title or DEFAULT_TITLE,
            start_time=start_time,
            url=url,
            category=category,
            contact="\n".join(contact) or None,
        )

    def _build_event(
        self,
        year_month: tuple[int, int],
        day: int,
        detail: HallEvent,
        context: ExtractionContext,
    ) -> ExtractionResult | None:
        year, month = year_month
        if not is_valid_date(year, month, day):
            return None

        source = f"calendar-{self.name()}"
        if detail.start_time:
            hour, minute = (int(part) for part in detail.start_time.split(":"))
            start = datetime(year, month, day, hour, minute, tzinfo=JST)
            date_info = ResolvedDateInfo.timed_event(
                start, timedelta(minutes=self.config.default_duration_minutes), source, EVENT_CONFIDENCE
            )
        else:
            date_info = ResolvedDateInfo.all_day_event(date(year, month, day), source, EVENT_CONFIDENCE)

        lines = []
        if detail.category:
            lines.append(f"カテゴリ: {detail.category}")
        if detail.start_time:
            lines.append(f"開始: {detail.start_time}")
        if detail.contact:
            lines.append(detail.contact)
        if detail.url and context.include_url:
            lines.append(f"詳細情報: {detail.url}")

        return ExtractionResult(
            title=detail.title[: self.config.max_title_length],
            description="\n".join(lines) or None,
            location=VENUE,
            date_info=date_info,
            confidence=EVENT_CONFIDENCE,
            strategy_used=self.name(),
            url=detail.url,
        )
