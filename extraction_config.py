"""Configuration loading for event extraction."""

from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from event_context.lexicon import DEFAULT_STOPWORDS


_DEFAULT_MAX_TITLE_LENGTH = 100
_DEFAULT_MAX_DESCRIPTION_LENGTH = 280
_DEFAULT_HEADING_SEARCH_DEPTH = 3
_DEFAULT_INCLUDE_URL = True
_DEFAULT_DURATION_MINUTES = 180
_DEFAULT_TIMEZONE = "Asia/Tokyo"
_DEFAULT_MAX_TEXT_LENGTH = 1000
_DEFAULT_MAX_DESCRIPTION_PARTS = 3
_DEFAULT_SIBLINGS_BEFORE = 1
_DEFAULT_SIBLINGS_AFTER = 2
_DEFAULT_MAX_PAGE_RESULTS = 50


@dataclass(frozen=True)
class ExtractionConfig:
    max_title_length: int = _DEFAULT_MAX_TITLE_LENGTH
    max_description_length: int = _DEFAULT_MAX_DESCRIPTION_LENGTH
    heading_search_depth: int = _DEFAULT_HEADING_SEARCH_DEPTH
    include_url: bool = _DEFAULT_INCLUDE_URL
    default_duration_minutes: int = _DEFAULT_DURATION_MINUTES
    default_timezone: str = _DEFAULT_TIMEZONE
    max_text_length: int = _DEFAULT_MAX_TEXT_LENGTH
    max_description_parts: int = _DEFAULT_MAX_DESCRIPTION_PARTS
    siblings_before: int = _DEFAULT_SIBLINGS_BEFORE
    siblings_after: int = _DEFAULT_SIBLINGS_AFTER
    max_page_results: int = _DEFAULT_MAX_PAGE_RESULTS
    stopwords: tuple[str, ...] = DEFAULT_STOPWORDS

    def __post_init__(self):
        for field_name in (
            "max_title_length",
            "max_description_length",
            "default_duration_minutes",
            "max_text_length",
            "max_description_parts",
            "max_page_results",
        ):
            if getattr(self, field_name) <= 0:
                raise ValueError(f"{field_name} must be positive")
        if self.heading_search_depth < 0 or self.siblings_before < 0 or self.siblings_after < 0:
            raise ValueError("search depths must not be negative")
        try:
            ZoneInfo(self.default_timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {self.default_timezone}") from e

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.default_timezone)


def _parse_int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    return int(value)


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("true", "1", "yes")


def load_extraction_config() -> ExtractionConfig:
    """Load extraction configuration from environment variables."""
    return ExtractionConfig(
        max_title_length=_parse_int(os.getenv("CLIP_MAX_TITLE_LENGTH"), _DEFAULT_MAX_TITLE_LENGTH),
        max_description_length=_parse_int(
            os.getenv("CLIP_MAX_DESCRIPTION_LENGTH"),
            _DEFAULT_MAX_DESCRIPTION_LENGTH,
        ),
        heading_search_depth=_parse_int(
            os.getenv("CLIP_HEADING_SEARCH_DEPTH"),
            _DEFAULT_HEADING_SEARCH_DEPTH,
        ),
        include_url=_parse_bool(os.getenv("CLIP_INCLUDE_URL"), _DEFAULT_INCLUDE_URL),
        default_duration_minutes=_parse_int(
            os.getenv("CLIP_DEFAULT_DURATION_MINUTES"),
            _DEFAULT_DURATION_MINUTES,
        ),
        default_timezone=os.getenv("CLIP_DEFAULT_TIMEZONE", "").strip() or _DEFAULT_TIMEZONE,
        max_text_length=_parse_int(os.getenv("CLIP_MAX_TEXT_LENGTH"), _DEFAULT_MAX_TEXT_LENGTH),
        max_description_parts=_parse_int(
            os.getenv("CLIP_MAX_DESCRIPTION_PARTS"),
            _DEFAULT_MAX_DESCRIPTION_PARTS,
        ),
        siblings_before=_parse_int(os.getenv("CLIP_SIBLINGS_BEFORE"), _DEFAULT_SIBLINGS_BEFORE),
        siblings_after=_parse_int(os.getenv("CLIP_SIBLINGS_AFTER"), _DEFAULT_SIBLINGS_AFTER),
        max_page_results=_parse_int(os.getenv("CLIP_MAX_PAGE_RESULTS"), _DEFAULT_MAX_PAGE_RESULTS),
    )
