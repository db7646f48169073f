"""Scan a page for events and write them as a JSON artifact.

Usage:
    python extract_events.py https://www.njpw.co.jp/schedule --reference-date 2025-08-01
    python extract_events.py saved_page.html --domain tokyo-dome.co.jp --output events.json

SOURCE is either a URL (fetched with retries) or a path to a saved HTML file.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from event_extractor_api import EventExtractorAPI
from extraction_common import fetch_html, load_settings_source, log_error, log_info, setup_run_logging
from extraction_config import load_extraction_config
from extraction_strategies.extraction_strategy_factory import StrategyRegistry
from site_rules import SiteRuleManager


def _is_url(source: str) -> bool:
    return urlparse(source).scheme in {"http", "https"}


def _parse_reference_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM-DD, got {value!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract calendar events from a web page")
    parser.add_argument("source", help="URL or path to an HTML file")
    parser.add_argument("--domain", help="Domain used for site rule lookup (default: from the URL)")
    parser.add_argument(
        "--reference-date",
        type=_parse_reference_date,
        default=None,
        help="Date that relative expressions are resolved against (default: today)",
    )
    parser.add_argument("--rules", help="JSON settings file with user site rules")
    parser.add_argument("--max-results", type=int, default=None, help="Maximum number of events to keep")
    parser.add_argument("--output", "-o", help="Write the JSON artifact here instead of stdout")
    return parser


def load_source(source: str) -> str | None:
    if _is_url(source):
        return fetch_html(source)
    path = Path(source)
    if not path.exists():
        log_error(f"No such file: {source}")
        return None
    return path.read_text(encoding="utf-8")


async def extract(args: argparse.Namespace, html: str) -> list[dict]:
    config = load_extraction_config()
    settings_source = load_settings_source(args.rules) if args.rules else None
    registry = StrategyRegistry(SiteRuleManager(), settings_source)
    api = EventExtractorAPI(registry, config)

    url = args.source if _is_url(args.source) else None
    domain = args.domain or (urlparse(url).hostname if url else "") or ""
    reference = args.reference_date or date.today()

    soup = BeautifulSoup(html, "html.parser")
    results = await api.extract_from_page(
        soup, reference, url=url, domain=domain, max_results=args.max_results
    )
    return [result.to_dict() for result in results]


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _, _, _, run_id = setup_run_logging()

    try:
        html = load_source(args.source)
        if html is None:
            return 1

        events = asyncio.run(extract(args, html))
        log_info(f"Extracted {len(events)} events from {args.source}")

        payload = {
            "run_id": run_id,
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "source": args.source,
            "event_count": len(events),
            "events": events,
        }
        text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
        if args.output:
            Path(args.output).write_text(text, encoding="utf-8")
            log_info(f"Wrote events artifact: {args.output}")
        else:
            sys.stdout.write(text)
        return 0
    except Exception as e:
        log_error(f"Extraction failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
