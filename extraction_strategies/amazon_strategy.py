"""Amazon product pages: the "event" is the delivery date."""

from __future__ import annotations

from datetime import timedelta

from content_tree import document_root, node_text
from date_spans.calendar_rules import reference_day
from date_spans.date_info import ResolvedDateInfo
from extraction_strategies.selector_rule_strategy import (
    DESCRIPTION_SEPARATOR,
    MAX_DESCRIPTION_ELEMENTS,
    SelectorRuleStrategy,
    is_valid_description,
    is_valid_price,
    is_valid_title,
)
from extraction_strategies.strategy_base import ExtractionContext

_TITLE_SELECTORS = ("#productTitle", ".product-title", "h1.a-size-large")
_DESCRIPTION_SELECTORS = (
    "#feature-bullets ul li",
    ".a-unordered-list .a-list-item",
    "#bookDescription_feature_div",
    "#productDescription",
)
_DELIVERY_SELECTORS = ("#availability .a-color-success", "#delivery-block", "#mir-layout-DELIVERY_BLOCK")
_PRICE_SELECTORS = (".a-price-whole", ".a-offscreen", "#priceblock_dealprice", "#priceblock_ourprice")

_TOMORROW = "明日"


class AmazonStrategy(SelectorRuleStrategy):
    """Product title, bullet points, delivery date and price from page-wide selectors."""

    def name(self) -> str:
        return "amazon"

    def _first_on_page(self, context: ExtractionContext, selector: str):
        root = document_root(context.target)
        return root.select_one(selector) if root is not None else None

    def extract_title(self, context: ExtractionContext) -> str | None:
        for selector in _TITLE_SELECTORS:
            element = self._first_on_page(context, selector)
            if element is not None and is_valid_title(node_text(element)):
                return node_text(element)[: self.config.max_title_length]
        return super().extract_title(context)

    def extract_description(self, context: ExtractionContext) -> str | None:
        root = document_root(context.target)
        descriptions: list[str] = []
        for selector in _DESCRIPTION_SELECTORS:
            for element in root.select(selector):
                text = node_text(element)
                if is_valid_description(text) and text not in descriptions:
                    descriptions.append(text)
            if len(descriptions) >= MAX_DESCRIPTION_ELEMENTS:
                break
        if descriptions:
            return DESCRIPTION_SEPARATOR.join(descriptions)
        return super().extract_description(context)

    def extract_date(self, context: ExtractionContext) -> ResolvedDateInfo | None:
        for selector in _DELIVERY_SELECTORS:
            element = self._first_on_page(context, selector)
            if element is None:
                continue
            date_info = self.parse_delivery_date(node_text(element), context)
            if date_info is not None:
                return date_info
        return super().extract_date(context)

    def parse_delivery_date(self, text: str, context: ExtractionContext) -> ResolvedDateInfo | None:
        """"明日" wins over any explicit date in delivery text."""
        if _TOMORROW in text:
            tomorrow = reference_day(context.reference) + timedelta(days=1)
            return ResolvedDateInfo.all_day_event(tomorrow, f"delivery-{self.name()}")
        return self.parse_date_text(text, context)

    def extract_price(self, context: ExtractionContext) -> str | None:
        for selector in _PRICE_SELECTORS:
            element = self._first_on_page(context, selector)
            if element is not None and is_valid_price(node_text(element)):
                return node_text(element)
        return super().extract_price(context)
