"""Tests for the extract_events CLI and its shared helpers."""

import json
from unittest.mock import MagicMock

import pytest
import requests

import extract_events
from extraction_common import build_http_session, fetch_html, load_settings_source, setup_run_logging

PAGE_HTML = """
<html><head><title>公演案内</title></head><body>
<section><h2>春の朗読会</h2><p>2025/09/10 19:00 開演</p></section>
<section><h2>秋の写真展</h2><p>10月5日から開催します</p></section>
</body></html>
"""


@pytest.fixture(autouse=True)
def _log_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("EXTRACT_LOG_DIR", str(tmp_path / "logs"))


class TestExtractEventsCli:

    def test_file_source_writes_artifact(self, tmp_path):
        page = tmp_path / "page.html"
        page.write_text(PAGE_HTML, encoding="utf-8")
        out = tmp_path / "events.json"

        code = extract_events.main([str(page), "--reference-date", "2025-08-27", "--output", str(out)])

        assert code == 0
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert payload["source"] == str(page)
        assert payload["event_count"] == 2
        assert payload["run_id"]
        first = payload["events"][0]
        assert first["strategyUsed"] == "general"
        assert first["dateInfo"]["start"]["dateTime"] == "2025-09-10T19:00:00+09:00"

    def test_url_source_is_fetched(self, tmp_path, monkeypatch):
        fetched = []

        def fake_fetch(url):
            fetched.append(url)
            return PAGE_HTML

        monkeypatch.setattr(extract_events, "fetch_html", fake_fetch)
        out = tmp_path / "events.json"

        code = extract_events.main([
            "https://example.com/program",
            "--reference-date", "2025-08-27",
            "--max-results", "1",
            "--output", str(out),
        ])

        assert code == 0
        assert fetched == ["https://example.com/program"]
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert payload["event_count"] == 1
        assert payload["events"][0]["url"] == "https://example.com/program"

    def test_missing_file(self, tmp_path):
        assert extract_events.main([str(tmp_path / "missing.html")]) == 1

    def test_rules_file(self, tmp_path):
        page = tmp_path / "page.html"
        page.write_text(PAGE_HTML, encoding="utf-8")
        rules = tmp_path / "rules.json"
        rules.write_text(json.dumps({"includeURL": False, "siteRules": {}}), encoding="utf-8")
        out = tmp_path / "events.json"

        code = extract_events.main([
            str(page), "--reference-date", "2025-08-27", "--rules", str(rules), "--output", str(out),
        ])
        assert code == 0

    def test_bad_reference_date(self):
        with pytest.raises(SystemExit):
            extract_events.main(["page.html", "--reference-date", "27/08/2025"])


class TestExtractionCommon:

    def test_run_logging_creates_files(self, tmp_path):
        _, _, logs_dir, run_id = setup_run_logging(str(tmp_path / "run-logs"))
        assert (tmp_path / "run-logs" / f"extract_{run_id}.info.log").exists()
        assert (tmp_path / "run-logs" / f"extract_{run_id}.error.log").exists()
        assert logs_dir == str(tmp_path / "run-logs")

    def test_session_user_agent_and_retries(self, monkeypatch):
        monkeypatch.setenv("EXTRACT_USER_AGENT", "TestAgent/1.0")
        session = build_http_session()
        assert session.headers["User-Agent"] == "TestAgent/1.0"
        assert session.get_adapter("https://example.com").max_retries.total == 5

    def test_fetch_html_ok(self):
        session = MagicMock()
        session.get.return_value = MagicMock(ok=True, text="<html></html>")
        assert fetch_html("https://example.com", session) == "<html></html>"

    def test_fetch_html_http_error(self):
        session = MagicMock()
        session.get.return_value = MagicMock(ok=False, status_code=404)
        assert fetch_html("https://example.com", session) is None

    def test_fetch_html_network_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("down")
        assert fetch_html("https://example.com", session) is None

    def test_settings_file_must_be_json(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            load_settings_source(path)

    def test_settings_file_rules(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"siteRules": {"example.com": {"titleSelector": "h1"}}}), encoding="utf-8")
        source = load_settings_source(path)
        assert source.site_rules["example.com"].title_selector == "h1"
