"""Tests for the individual extraction strategies against saved page fixtures."""

from datetime import date
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from extraction_config import ExtractionConfig
from extraction_strategies.amazon_strategy import AmazonStrategy
from extraction_strategies.eventbrite_strategy import EventbriteStrategy
from extraction_strategies.general_strategy import (
    GeneralStrategy,
    find_structured_event_date,
    score_structured_title,
)
from extraction_strategies.njpw_schedule_strategy import NjpwScheduleStrategy
from extraction_strategies.selector_rule_strategy import SelectorRuleStrategy
from extraction_strategies.stardom_detail_strategy import StardomDetailStrategy
from extraction_strategies.stardom_month_strategy import StardomMonthStrategy
from extraction_strategies.strategy_base import ExtractionContext
from extraction_strategies.tokyo_dome_hall_strategy import TokyoDomeHallStrategy
from site_rules import ExtractorRule, SiteRuleManager

REFERENCE = date(2025, 8, 27)


def _load_fixture(filename: str) -> BeautifulSoup:
    """Load HTML fixture content from the fixtures directory."""
    fixtures_dir = Path(__file__).parent / "fixtures"
    return BeautifulSoup((fixtures_dir / filename).read_text(encoding="utf-8"), "html.parser")


def _context(soup, target, url=None, **kwargs):
    return ExtractionContext(target=target, reference=REFERENCE, url=url, **kwargs)


class TestSelectorRuleStrategy:

    HTML = """
    <html><body>
      <nav><h2 class="headline">Site navigation headline</h2></nav>
      <section>
        <h2 class="headline">Harbour Lights Night</h2>
        <p class="when" id="when">2025-09-20</p>
        <p class="fee">¥3,000</p>
      </section>
    </body></html>
    """

    def setup_method(self):
        self.soup = BeautifulSoup(self.HTML, "html.parser")
        self.rule = ExtractorRule(
            domain="example.com",
            title_selector=".headline",
            date_selector=".when",
            price_selector=".fee",
            ignore_selector="nav",
        )
        self.strategy = SelectorRuleStrategy(self.rule)

    def test_fields_found_through_rule_selectors(self):
        result = self.strategy.extract_all(_context(self.soup, self.soup.find(id="when")))
        assert result.title == "Harbour Lights Night"
        assert result.date_info.start_date == "2025-09-20"
        assert result.price == "¥3,000"
        assert result.confidence == pytest.approx(3 / 5)
        assert result.rule_used == "example.com"

    def test_ignored_region_skipped_not_removed(self):
        context = _context(self.soup, self.soup.find(id="when"))
        elements = self.strategy.find_elements(context, ".headline")
        assert [e.get_text() for e in elements] == ["Harbour Lights Night"]
        assert self.soup.find("nav") is not None

    def test_target_inside_ignored_region_still_sees_it(self):
        nav_heading = self.soup.find("nav").h2
        elements = self.strategy.find_elements(_context(self.soup, nav_heading), ".headline")
        assert elements[0] is nav_heading

    def test_failing_field_does_not_sink_others(self, monkeypatch):
        def broken(context):
            raise RuntimeError("bad selector")

        monkeypatch.setattr(self.strategy, "extract_price", broken)
        result = self.strategy.extract_all(_context(self.soup, self.soup.find(id="when")))
        assert result.price is None
        assert result.title == "Harbour Lights Night"


class TestGeneralStrategy:

    def setup_method(self):
        self.soup = _load_fixture("general_event.html")
        self.strategy = GeneralStrategy()

    def test_context_title_and_anchor_date(self):
        result = self.strategy.extract_all(_context(self.soup, self.soup.find(id="when")))
        assert result.title == "秋の音楽フェス2025"
        assert result.strategy_used == "general"
        assert result.date_info.all_day is False
        assert result.date_info.start_datetime == "2025-10-12T13:00:00+09:00"
        assert result.date_info.source == "regex-month-day"

    def test_structured_data_date_when_anchor_has_none(self):
        result = self.strategy.extract_all(_context(self.soup, self.soup.find(id="plain")))
        assert result.date_info is not None
        assert result.date_info.start_datetime == "2025-10-12T13:00:00+09:00"
        assert result.date_info.source == "attribute-general"

    def test_selection_text_preferred_over_anchor(self):
        context = _context(self.soup, self.soup.find(id="when"), selection_text="2025/11/03")
        result = self.strategy.extract_all(context)
        assert result.date_info.start_date == "2025-11-03"

    def test_include_url_in_description(self):
        context = _context(self.soup, self.soup.find(id="when"), url="https://example.com/fes")
        result = self.strategy.extract_all(context)
        assert result.description.endswith("URL: https://example.com/fes")

    def test_include_url_disabled(self):
        context = _context(
            self.soup,
            self.soup.find(id="when"),
            url="https://example.com/fes",
            config=ExtractionConfig(include_url=False),
        )
        result = self.strategy.extract_all(context)
        assert "URL:" not in result.description

    def test_structured_title_scoring(self):
        soup = BeautifulSoup('<h1 class="event-title">Harbour Lights Night</h1><p>x</p>', "html.parser")
        assert score_structured_title("Harbour Lights Night", soup.h1) == pytest.approx(1.0)
        assert score_structured_title("Harbour Lights Night", soup.p) == pytest.approx(0.6)

    def test_find_structured_event_date(self):
        data = {"@graph": [{"@type": "Organization"}, {"@type": ["Event"], "startDate": "2025-10-12"}]}
        assert find_structured_event_date(data) == "2025-10-12"
        assert find_structured_event_date({"@type": "Organization"}) is None


class TestEventbriteStrategy:

    def test_event_page(self):
        soup = _load_fixture("eventbrite.html")
        rule = SiteRuleManager().get_rule_for_domain("www.eventbrite.com")
        strategy = EventbriteStrategy(rule)
        result = strategy.extract_all(_context(soup, soup.find(id="start"), domain="eventbrite.com"))

        assert result.title == "Tokyo Tech Meetup"
        assert result.date_info.start_datetime == "2025-09-12T19:00:00+09:00"
        assert result.date_info.source == "attribute-eventbrite"
        assert result.location == "Shibuya Hall"
        assert result.description.startswith("Join us")
        assert result.rule_used == "eventbrite.com"


class TestAmazonStrategy:

    def setup_method(self):
        self.soup = _load_fixture("amazon.html")
        self.strategy = AmazonStrategy(SiteRuleManager().get_rule_for_domain("amazon.co.jp"))

    def test_product_page(self):
        result = self.strategy.extract_all(_context(self.soup, self.soup.find(id="productTitle")))
        assert result.title == "ワイヤレスイヤホン ノイズキャンセリング"
        assert result.price == "12,800"
        assert result.description == "最大30時間の連続再生に対応しています"

    def test_tomorrow_wins_over_explicit_date(self):
        result = self.strategy.extract_all(_context(self.soup, self.soup.find(id="productTitle")))
        assert result.date_info.start_date == "2025-08-28"
        assert result.date_info.source == "delivery-amazon"

    def test_explicit_delivery_date(self):
        context = _context(self.soup, self.soup.find(id="productTitle"))
        info = self.strategy.parse_delivery_date("9月2日 にお届け予定", context)
        assert info.start_date == "2025-09-02"


class TestTokyoDomeHallStrategy:

    URL = "https://www.tokyo-dome.co.jp/hall/event/"

    def setup_method(self):
        self.soup = _load_fixture("tokyo_dome_hall.html")
        self.strategy = TokyoDomeHallStrategy()

    def test_clicked_event_block(self):
        target = self.soup.find(id="pro-wrestling")
        result = self.strategy.extract_all(_context(self.soup, target, url=self.URL))

        assert result.title == "真夏のプロレス大会"
        assert result.location == "後楽園ホール"
        assert result.confidence == pytest.approx(0.9)
        assert result.date_info.start_datetime == "2025-08-27T18:30:00+09:00"
        assert result.date_info.end_datetime == "2025-08-27T21:30:00+09:00"
        assert result.url == "https://www.tokyo-dome.co.jp/hall/event/detail/0827.html"
        assert result.description.splitlines() == [
            "カテゴリ: プロレス",
            "開始: 18:30",
            "お問い合わせ：サンプルプロモーション",
            "詳細情報: https://www.tokyo-dome.co.jp/hall/event/detail/0827.html",
        ]
        assert result.events == []

    def test_whole_calendar_when_outside_a_block(self):
        target = self.soup.find("h3")
        result = self.strategy.extract_all(_context(self.soup, target, url=self.URL))

        assert [e.title for e in result.events] == ["真夏のプロレス大会", "ボクシング東日本新人王戦"]
        second = result.events[1]
        assert second.date_info.all_day is True
        assert second.date_info.start_date == "2025-08-28"

    def test_no_events_gives_low_confidence(self):
        soup = BeautifulSoup("<html><body><p id='x'>休館日</p></body></html>", "html.parser")
        result = self.strategy.extract_all(_context(soup, soup.find(id="x"), url=self.URL))
        assert result.title is None
        assert result.location == "後楽園ホール"
        assert result.confidence == pytest.approx(0.1)

    def test_year_month_falls_back_to_reference(self):
        soup = BeautifulSoup("<html><body><p>x</p></body></html>", "html.parser")
        context = _context(soup, soup.p)
        assert self.strategy.extract_year_month(soup, None, context) == (2025, 8)


class TestNjpwScheduleStrategy:

    URL = "https://www.njpw.co.jp/schedule/"

    def setup_method(self):
        self.soup = _load_fixture("njpw_schedule.html")
        self.strategy = NjpwScheduleStrategy()

    def test_card_with_long_form_date(self):
        result = self.strategy.extract_all(_context(self.soup, self.soup.find(id="g1-date"), url=self.URL))
        assert result.title == "G1 CLIMAX 35 開幕戦"
        assert result.location == "北海道・北海きたえーる"
        assert result.url == "https://www.njpw.co.jp/tornament/12345"
        assert result.date_info.start_datetime == "2025-07-19T17:00:00+09:00"
        assert result.description == (
            "会場: 北海道・北海きたえーる\n詳細情報: https://www.njpw.co.jp/tornament/12345"
        )
        assert result.confidence == pytest.approx(0.9)

    def test_card_with_loose_slash_date_and_venue_text(self):
        result = self.strategy.extract_all(_context(self.soup, self.soup.find(id="road-date"), url=self.URL))
        assert result.date_info.start_date == "2025-09-05"
        assert result.date_info.source == "regex-loose-numeric"
        assert result.location == "後楽園ホール"
        assert result.url == self.URL

    def test_other_pages_are_not_handled(self):
        context = _context(self.soup, self.soup.find(id="g1-date"), url="https://www.njpw.co.jp/news/")
        assert self.strategy.extract_all(context).is_empty

    def test_schedule_listing(self):
        events = self.strategy.extract_schedule(_context(self.soup, self.soup.find("h3"), url=self.URL))
        assert [e.title for e in events] == ["G1 CLIMAX 35 開幕戦", "Road to DESTRUCTION"]

    def test_target_outside_cards_returns_whole_schedule(self):
        target = self.soup.find(class_="schedule")
        result = self.strategy.extract_all(_context(self.soup, target, url=self.URL))

        assert result.title == "G1 CLIMAX 35 開幕戦"
        assert result.date_info.start_datetime == "2025-07-19T17:00:00+09:00"
        assert [e.title for e in result.events] == ["G1 CLIMAX 35 開幕戦", "Road to DESTRUCTION"]
        assert result.events[1].date_info.start_date == "2025-09-05"

    def test_page_without_cards_is_empty(self):
        soup = BeautifulSoup("<html><body><p id='x'>準備中</p></body></html>", "html.parser")
        assert self.strategy.extract_all(_context(soup, soup.find(id="x"), url=self.URL)).is_empty


class TestStardomMonthStrategy:

    URL = "https://wwr-stardom.com/schedule/?ym=2025-08"

    def setup_method(self):
        self.soup = _load_fixture("stardom_month.html")
        self.strategy = StardomMonthStrategy()

    def test_day_with_schedule_entry(self):
        result = self.strategy.extract_all(_context(self.soup, self.soup.find(id="day-9"), url=self.URL))
        assert result.title == "STARDOM in 大阪"
        assert result.location == "エディオンアリーナ大阪"
        assert result.date_info.start_date == "2025-08-09"
        assert result.url == "https://wwr-stardom.com/schedule/0809/"
        assert result.confidence == pytest.approx(0.8)

    def test_day_without_entry_or_link(self):
        result = self.strategy.extract_all(_context(self.soup, self.soup.find(id="day-10"), url=self.URL))
        assert result.is_empty

    def test_other_pages_are_not_handled(self):
        context = _context(self.soup, self.soup.find(id="day-9"), url="https://wwr-stardom.com/news/")
        assert self.strategy.extract_all(context).is_empty

    def test_normalized_date_attribute(self):
        soup = BeautifulSoup('<ul><li><span data-normalized-date="2025-08-09">9</span></li></ul>', "html.parser")
        target = soup.span
        assert self.strategy.resolve_day(target, _context(soup, target)) == date(2025, 8, 9)


class TestStardomDetailStrategy:

    URL = "https://wwr-stardom.com/schedule/20250906/"

    def setup_method(self):
        self.soup = _load_fixture("stardom_detail.html")
        self.strategy = StardomDetailStrategy()

    def test_detail_page(self):
        result = self.strategy.extract_all(_context(self.soup, self.soup.find(id="event-date"), url=self.URL))

        assert result.title == "5★STAR GRAND PRIX 2025 開幕戦"
        assert result.location == "後楽園ホール"
        assert result.url == self.URL
        assert result.confidence == pytest.approx(0.9)
        assert result.sources == ["stardom-detail"]
        assert result.description.splitlines() == [
            "会場: 後楽園ホール",
            f"詳細情報: {self.URL}",
            "対戦カード: https://wwr-stardom.com/result/20250906/",
        ]

    def test_main_event_start_time_not_doors_time(self):
        result = self.strategy.extract_all(_context(self.soup, self.soup.h2, url=self.URL))
        assert result.date_info.all_day is False
        assert result.date_info.start_datetime == "2025-09-06T17:00:00+09:00"
        assert result.date_info.end_datetime == "2025-09-06T20:00:00+09:00"

    def test_all_day_without_start_time(self):
        soup = _load_fixture("stardom_detail.html")
        for row in soup.select(".data.data_bg2"):
            row.find_parent("li").decompose()
        result = self.strategy.extract_all(_context(soup, soup.h2, url=self.URL))
        assert result.date_info.all_day is True
        assert result.date_info.start_date == "2025-09-06"

    def test_plain_text_date(self):
        soup = BeautifulSoup(
            """
            <h2 class="tickets_title">STARDOM NIGHT</h2>
            <ul><li><div class="data data_bg1"><p>日時</p></div>
            <div class="item"><p class="date">2025年10月3日（金）</p></div></li></ul>
            """,
            "html.parser",
        )
        result = self.strategy.extract_all(_context(soup, soup.h2, url=self.URL))
        assert result.date_info.start_date == "2025-10-03"
        assert result.location is None

    def test_missing_title_or_date_is_empty(self):
        soup = BeautifulSoup('<h2 class="tickets_title">STARDOM NIGHT</h2>', "html.parser")
        assert self.strategy.extract_all(_context(soup, soup.h2, url=self.URL)).is_empty

    @pytest.mark.parametrize(
        "url",
        ["https://wwr-stardom.com/schedule/?ym=2025-08", "https://wwr-stardom.com/news/20250906/"],
    )
    def test_other_pages_are_not_handled(self, url):
        assert self.strategy.extract_all(_context(self.soup, self.soup.h2, url=url)).is_empty
