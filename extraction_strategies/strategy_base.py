"""Base class and interfaces for extraction strategies.

A strategy turns an ExtractionContext (the anchor element plus page
metadata) into an ExtractionResult. Strategies are synchronous and
stateless between calls; the registry is the only async boundary.

A strategy that finds nothing returns a result with None fields. A strategy
that crashes raises, and the registry decides what to do about it; the two
outcomes are kept apart by ``StrategyRun``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from bs4 import Tag

from date_spans import parse_date
from date_spans.date_info import ResolvedDateInfo
from extraction_config import ExtractionConfig
from extraction_result import ExtractionResult
from site_rules import ExtractorRule

logger = logging.getLogger(__name__)

# Dates from machine-readable attributes are trusted more than regex hits.
ATTRIBUTE_DATE_CONFIDENCE = 0.9


@dataclass
class ExtractionContext:
    """Everything a strategy may look at for one extraction request."""
    target: Tag
    reference: date | datetime
    url: str | None = None
    domain: str = ""
    selection_text: str | None = None
    config: ExtractionConfig = field(default_factory=ExtractionConfig)

    @property
    def include_url(self) -> bool:
        return self.config.include_url and bool(self.url)


@dataclass
class StrategyRun:
    """Outcome of running one strategy: a result, or the exception it raised."""
    strategy_name: str
    result: ExtractionResult | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None


class ExtractionStrategy(ABC):
    """Abstract base class for extraction strategies.

    Strategies are constructed per request by the factory with the rule
    that matched the page (if any) and the active configuration.
    """

    def __init__(self, rule: ExtractorRule | None = None, config: ExtractionConfig | None = None):
        self.rule = rule
        self.config = config or ExtractionConfig()

    @abstractmethod
    def name(self) -> str:
        """Return the strategy name used in results and logs.

        Should be lowercase, underscored (e.g., "general", "tokyo_dome_hall").
        """
        pass

    @abstractmethod
    def extract_all(self, context: ExtractionContext) -> ExtractionResult:
        """Extract an event for ``context``.

        Returns:
            ExtractionResult; fields the strategy could not determine are None.

        Raises:
            Exception on unexpected page structure. The registry catches it.
        """
        pass

    def run(self, context: ExtractionContext) -> StrategyRun:
        try:
            return StrategyRun(self.name(), result=self.extract_all(context))
        except Exception as e:
            return StrategyRun(self.name(), error=e)

    # Shared date helpers

    def parse_date_text(self, text: str | None, context: ExtractionContext) -> ResolvedDateInfo | None:
        if not text:
            return None
        return parse_date(text, context.reference, context.config)

    def parse_datetime_attribute(self, value: str | None, context: ExtractionContext) -> ResolvedDateInfo | None:
        """Interpret a machine-readable date such as ``<time datetime="...">``."""
        if not value:
            return None
        value = value.strip()
        source = f"attribute-{self.name()}"

        if len(value) == 10:
            try:
                return ResolvedDateInfo.all_day_event(date.fromisoformat(value), source, ATTRIBUTE_DATE_CONFIDENCE)
            except ValueError:
                return None

        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Unparseable datetime attribute %r", value)
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=context.config.tzinfo)
        return ResolvedDateInfo.timed_event(
            parsed,
            timedelta(minutes=context.config.default_duration_minutes),
            source,
            ATTRIBUTE_DATE_CONFIDENCE,
        )
