"""Strategy selection and the registry that runs strategies with fallback."""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Optional

from extraction_config import ExtractionConfig
from extraction_result import ExtractionResult
from extraction_strategies.stardom_detail_strategy import DETAIL_PAGE_RE as STARDOM_DETAIL_PAGE_RE
from extraction_strategies.strategy_base import ExtractionContext, ExtractionStrategy, StrategyRun
from site_rules import ExtractorRule, SettingsSource, SiteRuleManager, normalize_domain

logger = logging.getLogger(__name__)


class ExtractionStrategies(Enum):
    """Available extraction strategies, keyed by the rule's extractor module name."""
    GENERAL = "general"
    SELECTORS = "selectors"
    EVENTBRITE = "eventbrite"
    AMAZON = "amazon"
    TOKYO_DOME_HALL = "tokyo_dome_hall"
    NJPW_SCHEDULE = "njpw_schedule"
    STARDOM_MONTH = "stardom_month"
    STARDOM_DETAIL = "stardom_detail"

    @classmethod
    def from_module_name(cls, module_name: str | None) -> Optional["ExtractionStrategies"]:
        if not module_name:
            return None
        try:
            return cls(module_name.strip().lower().replace("-", "_"))
        except ValueError:
            return None


# Domain substrings that imply a strategy when the rule does not name one.
_DOMAIN_HINTS = (
    ("eventbrite", ExtractionStrategies.EVENTBRITE),
    ("amazon", ExtractionStrategies.AMAZON),
    ("tokyo-dome.co.jp", ExtractionStrategies.TOKYO_DOME_HALL),
    ("njpw.co.jp", ExtractionStrategies.NJPW_SCHEDULE),
    ("wwr-stardom.com", ExtractionStrategies.STARDOM_MONTH),
)

# Page URLs that narrow a site strategy to a more specific one.
_PAGE_VARIANTS = (
    (ExtractionStrategies.STARDOM_MONTH, STARDOM_DETAIL_PAGE_RE, ExtractionStrategies.STARDOM_DETAIL),
)


class ExtractionStrategyFactory:
    """Factory for creating ExtractionStrategy instances."""

    @staticmethod
    def get_strategy(
        strategy: ExtractionStrategies,
        rule: ExtractorRule | None = None,
        config: ExtractionConfig | None = None,
    ) -> ExtractionStrategy:
        """Get a strategy instance.

        Args:
            strategy: The type of strategy to create
            rule: The site rule that matched the page, if any
            config: Active extraction configuration

        Raises:
            ValueError: If the strategy is unknown
        """
        # Import here to avoid circular dependencies
        from extraction_strategies.amazon_strategy import AmazonStrategy
        from extraction_strategies.eventbrite_strategy import EventbriteStrategy
        from extraction_strategies.general_strategy import GeneralStrategy
        from extraction_strategies.njpw_schedule_strategy import NjpwScheduleStrategy
        from extraction_strategies.selector_rule_strategy import SelectorRuleStrategy
        from extraction_strategies.stardom_detail_strategy import StardomDetailStrategy
        from extraction_strategies.stardom_month_strategy import StardomMonthStrategy
        from extraction_strategies.tokyo_dome_hall_strategy import TokyoDomeHallStrategy

        if strategy == ExtractionStrategies.GENERAL:
            return GeneralStrategy(rule, config)
        elif strategy == ExtractionStrategies.SELECTORS:
            return SelectorRuleStrategy(rule, config)
        elif strategy == ExtractionStrategies.EVENTBRITE:
            return EventbriteStrategy(rule, config)
        elif strategy == ExtractionStrategies.AMAZON:
            return AmazonStrategy(rule, config)
        elif strategy == ExtractionStrategies.TOKYO_DOME_HALL:
            return TokyoDomeHallStrategy(rule, config)
        elif strategy == ExtractionStrategies.NJPW_SCHEDULE:
            return NjpwScheduleStrategy(rule, config)
        elif strategy == ExtractionStrategies.STARDOM_MONTH:
            return StardomMonthStrategy(rule, config)
        elif strategy == ExtractionStrategies.STARDOM_DETAIL:
            return StardomDetailStrategy(rule, config)
        else:
            raise ValueError(f"Unknown extraction strategy: {strategy}")

    @staticmethod
    def choose(domain: str, rule: ExtractorRule | None, url: str | None = None) -> ExtractionStrategies:
        """The rule's extractor module if it names a strategy, else a domain hint, else general.

        A site strategy is then narrowed by the page URL, e.g. a STARDOM
        event detail page instead of the monthly schedule.
        """
        chosen = None
        if rule is not None:
            chosen = ExtractionStrategies.from_module_name(rule.extractor_module)

        if chosen is None:
            domain = normalize_domain(domain)
            chosen = next(
                (strategy for hint, strategy in _DOMAIN_HINTS if hint in domain),
                ExtractionStrategies.GENERAL,
            )

        if url:
            for site_strategy, page_re, variant in _PAGE_VARIANTS:
                if chosen == site_strategy and page_re.match(url):
                    return variant
        return chosen


class StrategyRegistry:
    """Looks up the site rule for a domain, runs the chosen strategy, and recovers from failures.

    A registry is created explicitly and passed to whoever needs it. It
    keeps no per-call state.
    """

    def __init__(
        self,
        rule_manager: SiteRuleManager | None = None,
        settings_source: SettingsSource | None = None,
    ):
        self.rule_manager = rule_manager or SiteRuleManager()
        self.settings_source = settings_source

    async def lookup(self, domain: str) -> tuple[ExtractorRule | None, bool | None]:
        """The rule for ``domain`` and any include-URL override from settings."""
        include_url = None
        if self.settings_source is not None:
            settings = await self.settings_source.get_effective_settings(normalize_domain(domain))
            include_url = settings.include_url
            if settings.rules_enabled and settings.site_rule is not None:
                return settings.site_rule, include_url
        return self.rule_manager.get_rule_for_domain(domain), include_url

    def run_strategy(
        self,
        strategy: ExtractionStrategies,
        context: ExtractionContext,
        rule: ExtractorRule | None,
    ) -> StrategyRun:
        return ExtractionStrategyFactory.get_strategy(strategy, rule, context.config).run(context)

    async def extract(self, context: ExtractionContext, domain: str | None = None) -> ExtractionResult:
        """Extract an event for ``context`` using the best strategy for ``domain``.

        A crashing specialised strategy is replaced by the general strategy
        and the result is tagged with ``fallback`` and the error message. A
        specialised strategy that simply finds nothing hands over to the
        general strategy without the tag.
        """
        domain = domain or context.domain
        rule, include_url = await self.lookup(domain)
        if include_url is not None:
            context = replace(context, config=replace(context.config, include_url=include_url))

        chosen = ExtractionStrategyFactory.choose(domain, rule, context.url)
        logger.info(
            "Extracting with %s for %s (rule: %s)",
            chosen.value, domain or "unknown domain", rule.domain if rule else "none",
        )

        run = self.run_strategy(chosen, context, rule)
        if not run.ok:
            logger.warning("Strategy %s failed for %s: %s; using general", chosen.value, domain, run.error)
            fallback = self.run_strategy(ExtractionStrategies.GENERAL, context, None)
            if not fallback.ok:
                raise fallback.error
            return fallback.result.with_fallback(str(run.error))

        result = run.result
        if result.is_empty and chosen != ExtractionStrategies.GENERAL:
            logger.info("Strategy %s found nothing for %s; trying general", chosen.value, domain)
            general = self.run_strategy(ExtractionStrategies.GENERAL, context, rule)
            if general.ok:
                result = general.result

        if rule is not None and result.rule_used is None:
            result = replace(result, rule_used=rule.domain)
        return result
