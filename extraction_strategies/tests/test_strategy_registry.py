"""Tests for strategy selection and the registry's fallback behavior."""

import asyncio
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest
from bs4 import BeautifulSoup

from extraction_strategies.eventbrite_strategy import EventbriteStrategy
from extraction_strategies.extraction_strategy_factory import (
    ExtractionStrategies,
    ExtractionStrategyFactory,
    StrategyRegistry,
)
from extraction_strategies.general_strategy import GeneralStrategy
from extraction_strategies.strategy_base import ExtractionContext
from extraction_strategies.tokyo_dome_hall_strategy import TokyoDomeHallStrategy
from site_rules import ExtractorRule, SiteRuleManager, StaticSettingsSource

REFERENCE = date(2025, 8, 27)


def _load_fixture(filename: str) -> BeautifulSoup:
    fixtures_dir = Path(__file__).parent / "fixtures"
    return BeautifulSoup((fixtures_dir / filename).read_text(encoding="utf-8"), "html.parser")


class TestExtractionStrategyFactory:

    @pytest.mark.parametrize("strategy", list(ExtractionStrategies))
    def test_every_member_builds(self, strategy):
        instance = ExtractionStrategyFactory.get_strategy(strategy)
        assert instance.name() == strategy.value

    def test_unknown_strategy_raises(self):
        with pytest.raises(ValueError):
            ExtractionStrategyFactory.get_strategy("nope")

    def test_rule_module_wins(self):
        rule = ExtractorRule(domain="example.com", extractor_module="tokyo_dome_hall")
        assert ExtractionStrategyFactory.choose("example.com", rule) == ExtractionStrategies.TOKYO_DOME_HALL

    @pytest.mark.parametrize(
        "domain, expected",
        [
            ("www.eventbrite.co.uk", ExtractionStrategies.EVENTBRITE),
            ("amazon.com", ExtractionStrategies.AMAZON),
            ("www.tokyo-dome.co.jp", ExtractionStrategies.TOKYO_DOME_HALL),
            ("www.njpw.co.jp", ExtractionStrategies.NJPW_SCHEDULE),
            ("wwr-stardom.com", ExtractionStrategies.STARDOM_MONTH),
            ("example.org", ExtractionStrategies.GENERAL),
        ],
    )
    def test_domain_hints(self, domain, expected):
        assert ExtractionStrategyFactory.choose(domain, None) == expected

    @pytest.mark.parametrize("rule", [None, ExtractorRule(domain="wwr-stardom.com", extractor_module="stardom_month")])
    def test_detail_page_url_narrows_stardom(self, rule):
        url = "https://wwr-stardom.com/schedule/20250906/"
        assert ExtractionStrategyFactory.choose("wwr-stardom.com", rule, url) == ExtractionStrategies.STARDOM_DETAIL

    def test_month_page_url_keeps_stardom_month(self):
        url = "https://wwr-stardom.com/schedule/?ym=2025-08"
        assert ExtractionStrategyFactory.choose("wwr-stardom.com", None, url) == ExtractionStrategies.STARDOM_MONTH

    def test_detail_url_does_not_override_other_strategies(self):
        rule = ExtractorRule(domain="wwr-stardom.com", extractor_module="selectors")
        url = "https://wwr-stardom.com/schedule/20250906/"
        assert ExtractionStrategyFactory.choose("wwr-stardom.com", rule, url) == ExtractionStrategies.SELECTORS

    def test_unknown_rule_module_falls_through_to_domain(self):
        rule = ExtractorRule(domain="amazon.com", extractor_module="does-not-exist")
        assert ExtractionStrategyFactory.choose("amazon.com", rule) == ExtractionStrategies.AMAZON

    def test_module_name_normalization(self):
        assert ExtractionStrategies.from_module_name("Tokyo-Dome_Hall") == ExtractionStrategies.TOKYO_DOME_HALL
        assert ExtractionStrategies.from_module_name("vimeo") is None
        assert ExtractionStrategies.from_module_name(None) is None


class TestStrategyRegistry:

    def setup_method(self):
        self.registry = StrategyRegistry(SiteRuleManager())

    def test_specialised_strategy_used_with_rule(self):
        soup = _load_fixture("tokyo_dome_hall.html")
        context = ExtractionContext(
            target=soup.find(id="pro-wrestling"),
            reference=REFERENCE,
            url="https://www.tokyo-dome.co.jp/hall/event/",
        )
        result = asyncio.run(self.registry.extract(context, "www.tokyo-dome.co.jp"))
        assert result.strategy_used == "tokyo_dome_hall"
        assert result.rule_used == "tokyo-dome.co.jp"
        assert result.fallback is False

    def test_stardom_detail_page_uses_detail_strategy(self):
        soup = _load_fixture("stardom_detail.html")
        context = ExtractionContext(
            target=soup.find(id="event-date"),
            reference=REFERENCE,
            url="https://wwr-stardom.com/schedule/20250906/",
        )
        result = asyncio.run(self.registry.extract(context, "wwr-stardom.com"))
        assert result.strategy_used == "stardom_detail"
        assert result.title == "5★STAR GRAND PRIX 2025 開幕戦"
        assert result.rule_used == "wwr-stardom.com"

    def test_crashing_strategy_falls_back_to_general(self):
        soup = _load_fixture("eventbrite.html")
        context = ExtractionContext(target=soup.find(id="start"), reference=REFERENCE)

        with patch.object(EventbriteStrategy, "extract_all", side_effect=RuntimeError("layout changed")):
            result = asyncio.run(self.registry.extract(context, "eventbrite.com"))

        assert result.fallback is True
        assert result.error == "layout changed"
        assert result.strategy_used == "general"
        assert result.rule_used is None

    def test_crash_is_logged_as_warning(self, caplog):
        soup = _load_fixture("eventbrite.html")
        context = ExtractionContext(target=soup.find(id="start"), reference=REFERENCE)

        with patch.object(EventbriteStrategy, "extract_all", side_effect=RuntimeError("layout changed")):
            with caplog.at_level("WARNING"):
                asyncio.run(self.registry.extract(context, "eventbrite.com"))

        assert any("layout changed" in record.getMessage() for record in caplog.records)

    def test_empty_specialised_result_reruns_general_without_fallback_tag(self):
        soup = _load_fixture("general_event.html")
        context = ExtractionContext(
            target=soup.find(id="when"),
            reference=REFERENCE,
            url="https://www.njpw.co.jp/news/",
        )
        result = asyncio.run(self.registry.extract(context, "njpw.co.jp"))
        assert result.strategy_used == "general"
        assert result.fallback is False
        assert result.title == "秋の音楽フェス2025"

    def test_general_crash_propagates(self):
        soup = _load_fixture("general_event.html")
        context = ExtractionContext(target=soup.find(id="when"), reference=REFERENCE)

        with patch.object(GeneralStrategy, "extract_all", side_effect=RuntimeError("broken")):
            with patch.object(TokyoDomeHallStrategy, "extract_all", side_effect=RuntimeError("first")):
                with pytest.raises(RuntimeError):
                    asyncio.run(self.registry.extract(context, "tokyo-dome.co.jp"))

    def test_settings_rule_overrides_manager(self):
        settings = StaticSettingsSource.from_dict({
            "rulesEnabled": True,
            "siteRules": {"example.com": {"extractorModule": "stardom_month"}},
        })
        registry = StrategyRegistry(SiteRuleManager(), settings)
        rule, include_url = asyncio.run(registry.lookup("blog.example.com"))
        assert rule.extractor_module == "stardom_month"
        assert include_url is None

    def test_disabled_settings_use_manager(self):
        settings = StaticSettingsSource.from_dict({
            "rulesEnabled": False,
            "siteRules": {"example.com": {"extractorModule": "stardom_month"}},
        })
        registry = StrategyRegistry(SiteRuleManager(), settings)
        rule, _ = asyncio.run(registry.lookup("example.com"))
        assert rule.domain == "*"

    def test_settings_include_url_reaches_strategy(self):
        settings = StaticSettingsSource(include_url=False)
        registry = StrategyRegistry(SiteRuleManager(), settings)
        soup = _load_fixture("general_event.html")
        context = ExtractionContext(
            target=soup.find(id="when"), reference=REFERENCE, url="https://example.com/fes"
        )
        result = asyncio.run(registry.extract(context, "example.com"))
        assert "URL:" not in result.description
