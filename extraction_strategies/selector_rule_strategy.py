"""Rule-driven extraction: each field comes from the site rule's CSS selectors."""

from __future__ import annotations

import logging
import re
from typing import Callable

from bs4 import Tag

from content_tree import closest, document_root, node_text
from date_spans.date_info import ResolvedDateInfo
from extraction_result import ExtractionResult
from extraction_strategies.strategy_base import ExtractionContext, ExtractionStrategy

logger = logging.getLogger(__name__)

_SEARCH_SCOPE_SELECTOR = "article, section, div, main, body"
_PRICE_RE = re.compile(r"[\d,¥$€£]")

# Number of fields a strategy can fill: title, description, date, location, price.
FIELD_COUNT = 5
MAX_DESCRIPTION_ELEMENTS = 3
DESCRIPTION_SEPARATOR = "\n\n"


def is_valid_title(text: str | None) -> bool:
    return bool(text) and 3 <= len(text) <= 200


def is_valid_description(text: str | None) -> bool:
    return bool(text) and 10 <= len(text) <= 1000


def is_valid_location(text: str | None) -> bool:
    return bool(text) and 2 <= len(text) <= 100


def is_valid_price(text: str | None) -> bool:
    return bool(text) and bool(_PRICE_RE.search(text)) and len(text) <= 50


class SelectorRuleStrategy(ExtractionStrategy):
    """Reads title, description, date, location and price through rule selectors.

    Elements are looked up in the target first, then in its nearest block
    container, then in the whole document. Elements under the rule's
    ignore selector are skipped, unless the target itself sits there.
    """

    def name(self) -> str:
        return "selectors"

    def extract_all(self, context: ExtractionContext) -> ExtractionResult:
        title = self._settled("title", self.extract_title, context)
        description = self._settled("description", self.extract_description, context)
        date_info = self._settled("date", self.extract_date, context)
        location = self._settled("location", self.extract_location, context)
        price = self._settled("price", self.extract_price, context)

        found = sum(1 for value in (title, description, date_info, location, price) if value)
        return ExtractionResult(
            title=title,
            description=description,
            location=location,
            date_info=date_info,
            confidence=found / FIELD_COUNT,
            strategy_used=self.name(),
            price=price,
            url=context.url,
            rule_used=self.rule.domain if self.rule else None,
        )

    def _settled(self, field_name: str, extract: Callable, context: ExtractionContext):
        """Run one field extractor; a failing field does not sink the others."""
        try:
            return extract(context)
        except Exception as e:
            logger.warning("%s extraction failed for %s: %s", field_name, context.domain or "page", e)
            return None

    def find_elements(self, context: ExtractionContext, selector: str | None) -> list[Tag]:
        if not selector:
            return []
        target = context.target

        elements = self._without_ignored(target.select(selector), target)
        if elements:
            return elements

        scope = closest(target, _SEARCH_SCOPE_SELECTOR)
        if scope is not None and scope is not target:
            elements = self._without_ignored(scope.select(selector), target)
            if elements:
                return elements

        root = document_root(target)
        return self._without_ignored(root.select(selector), target) if root is not None else []

    def _without_ignored(self, elements: list[Tag], target: Tag) -> list[Tag]:
        ignore = self.rule.ignore_selector if self.rule else None
        if not ignore:
            return elements
        target_chain = {id(target)} | {id(p) for p in target.parents}
        kept = []
        for element in elements:
            ignored_region = closest(element, ignore)
            if ignored_region is None or id(ignored_region) in target_chain:
                kept.append(element)
        return kept

    def _rule_selector(self, attribute: str) -> str | None:
        return getattr(self.rule, attribute, None) if self.rule else None

    def extract_title(self, context: ExtractionContext) -> str | None:
        for element in self.find_elements(context, self._rule_selector("title_selector")):
            text = node_text(element)
            if is_valid_title(text):
                return text[: self.config.max_title_length]
        return None

    def extract_description(self, context: ExtractionContext) -> str | None:
        elements = self.find_elements(context, self._rule_selector("description_selector"))
        texts = [
            text for text in (node_text(e) for e in elements[:MAX_DESCRIPTION_ELEMENTS])
            if is_valid_description(text)
        ]
        return DESCRIPTION_SEPARATOR.join(texts) if texts else None

    def extract_date(self, context: ExtractionContext) -> ResolvedDateInfo | None:
        for element in self.find_elements(context, self._rule_selector("date_selector")):
            date_info = self.parse_datetime_attribute(element.get("datetime"), context)
            if date_info is not None:
                return date_info
            date_info = self.parse_date_text(node_text(element), context)
            if date_info is not None:
                return date_info
        return None

    def extract_location(self, context: ExtractionContext) -> str | None:
        for element in self.find_elements(context, self._rule_selector("location_selector")):
            text = node_text(element)
            if is_valid_location(text):
                return text
        return None

    def extract_price(self, context: ExtractionContext) -> str | None:
        for element in self.find_elements(context, self._rule_selector("price_selector")):
            text = node_text(element)
            if is_valid_price(text):
                return text
        return None
