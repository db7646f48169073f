"""STARDOM monthly schedule (wwr-stardom.com/schedule/)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date

from bs4 import Tag

from content_tree import class_names, closest, document_root, element_parent, node_text
from date_spans.calendar_rules import is_valid_date, reference_day
from date_spans.date_info import ResolvedDateInfo
from extraction_result import ExtractionResult
from extraction_strategies.strategy_base import ExtractionContext, ExtractionStrategy

logger = logging.getLogger(__name__)

MONTH_PAGE_RE = re.compile(r"https://wwr-stardom\.com/schedule/(?:\?ym=|$)")
_LIST_DATE_RE = re.compile(r"(\d{4})\.(\d{2})\.(\d{2})")
_NUMBER_RE = re.compile(r"\d+")

SCHEDULE_ITEM_SELECTOR = ".schedule_list .info_box"
GRID_LINK_SELECTOR = 'a[href*="/event/"], a[href*="/schedule/"]'

EVENT_CONFIDENCE = 0.8
DEFAULT_TITLE = "イベント"


@dataclass
class ScheduleEntry:
    title: str
    place: str
    url: str


def build_description(place: str | None, detail_url: str | None) -> str | None:
    lines = []
    if place and place.strip():
        lines.append(f"会場: {place.strip()}")
    if detail_url and detail_url.strip():
        lines.append(f"詳細情報: {detail_url.strip()}")
    return "\n".join(lines) or None


class StardomMonthStrategy(ExtractionStrategy):
    """Combines the calendar grid cell the user clicked with the schedule list below it."""

    def name(self) -> str:
        return "stardom_month"

    def extract_all(self, context: ExtractionContext) -> ExtractionResult:
        empty = ExtractionResult(strategy_used=self.name(), url=context.url)
        if context.url and not MONTH_PAGE_RE.match(context.url):
            return empty

        date_element = self.find_date_element(context.target)
        if date_element is None:
            return empty

        event_day = self.resolve_day(date_element, context)
        if event_day is None:
            return empty

        entry = self.find_schedule_entry(event_day, document_root(context.target))
        grid_url = self.find_grid_link(date_element)

        if entry is not None:
            url = entry.url or grid_url
            title, place = entry.title or DEFAULT_TITLE, entry.place
        elif grid_url:
            url, title, place = grid_url, DEFAULT_TITLE, ""
        else:
            logger.debug("No STARDOM schedule entry for %s", event_day)
            return empty

        return ExtractionResult(
            title=title[: self.config.max_title_length],
            description=build_description(place, url),
            location=place or None,
            date_info=ResolvedDateInfo.all_day_event(event_day, f"calendar-{self.name()}", EVENT_CONFIDENCE),
            confidence=EVENT_CONFIDENCE,
            strategy_used=self.name(),
            url=url or context.url,
            sources=["stardom-month"],
        )

    @staticmethod
    def find_date_element(target: Tag) -> Tag | None:
        """The ``.date`` cell for the clicked element, searching outward."""
        if target.get("data-normalized-date") or "date" in class_names(target):
            return target

        current = target
        while current is not None and element_parent(current) is not None:
            if current.get("data-normalized-date"):
                return current
            found = current.select_one(".date")
            if found is not None:
                return found
            current = element_parent(current)
            if current is not None and current.name == "li":
                found = current.select_one(".date")
                if found is not None:
                    return found
        return None

    def resolve_day(self, date_element: Tag, context: ExtractionContext) -> date | None:
        """Full date for the cell: a normalized date if known, else day number plus page year/month."""
        normalized = date_element.get("data-normalized-date")
        if normalized:
            try:
                return date.fromisoformat(normalized)
            except ValueError:
                return None

        day_match = _NUMBER_RE.search(node_text(date_element))
        if not day_match:
            return None

        root = document_root(date_element)
        ref = reference_day(context.reference)
        year, month = ref.year, ref.month
        year_element = root.select_one(".calendar_year")
        month_element = root.select_one(".calendar_month")
        if year_element is not None and _NUMBER_RE.search(node_text(year_element)):
            year = int(_NUMBER_RE.search(node_text(year_element)).group(0))
        if month_element is not None and _NUMBER_RE.search(node_text(month_element)):
            month = int(_NUMBER_RE.search(node_text(month_element)).group(0))

        day = int(day_match.group(0))
        if not is_valid_date(year, month, day):
            return None
        return date(year, month, day)

    @staticmethod
    def find_schedule_entry(event_day: date, root: Tag) -> ScheduleEntry | None:
        for item in root.select(SCHEDULE_ITEM_SELECTOR):
            date_element = item.select_one(".date")
            if date_element is None:
                continue
            m = _LIST_DATE_RE.search(node_text(date_element))
            if not m or tuple(int(g) for g in m.groups()) != (event_day.year, event_day.month, event_day.day):
                continue

            title = item.select_one(".title")
            place = item.select_one(".place")
            link = item.select_one(".info_btn a.btn")
            return ScheduleEntry(
                title=node_text(title) if title is not None else "",
                place=node_text(place) if place is not None else "",
                url=link.get("href", "") if link is not None else "",
            )
        return None

    @staticmethod
    def find_grid_link(date_element: Tag) -> str | None:
        cell = closest(date_element, "li")
        if cell is None:
            return None
        link = cell.select_one(GRID_LINK_SELECTOR)
        return link.get("href") if link is not None else None
