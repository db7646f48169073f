"""Shared utilities for the extraction CLI.

This module is intentionally strategy-agnostic. It contains:
- per-run logging setup (INFO/ERROR loggers + run id)
- HTTP helpers for fetching pages to scan
- loading of user site rules from a settings JSON file
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from site_rules import StaticSettingsSource

_DEFAULT_USER_AGENT = "EventClipExtractor/0.1 (https://localhost; admin@example.com) requests"

INFO_LOG: logging.Logger | None = None
ERROR_LOG: logging.Logger | None = None


def setup_run_logging(log_dir: str | None = None) -> tuple[logging.Logger, logging.Logger, str, str]:
    """Create per-run file loggers for an extraction run."""
    global INFO_LOG, ERROR_LOG

    # Default to a writable location next to the code; EXTRACT_LOG_DIR overrides.
    default_logs_dir = str(Path(__file__).resolve().parent / "logs")
    logs_dir = Path(log_dir or os.getenv("EXTRACT_LOG_DIR", default_logs_dir))
    logs_dir.mkdir(parents=True, exist_ok=True)

    run_id = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    info_path = logs_dir / f"extract_{run_id}.info.log"
    err_path = logs_dir / f"extract_{run_id}.error.log"

    fmt = logging.Formatter("%(asctime)sZ\t%(levelname)s\t%(message)s")

    info_logger = logging.getLogger(f"extract.info.{run_id}")
    info_logger.setLevel(logging.INFO)
    info_logger.propagate = False
    ih = logging.FileHandler(info_path, encoding="utf-8")
    ih.setFormatter(fmt)
    info_logger.addHandler(ih)

    err_logger = logging.getLogger(f"extract.error.{run_id}")
    err_logger.setLevel(logging.ERROR)
    err_logger.propagate = False
    eh = logging.FileHandler(err_path, encoding="utf-8")
    eh.setFormatter(fmt)
    err_logger.addHandler(eh)

    INFO_LOG, ERROR_LOG = info_logger, err_logger

    print(f"Extraction logs: {info_path} (info), {err_path} (error)", flush=True)
    return info_logger, err_logger, str(logs_dir), run_id


def log_info(msg: str) -> None:
    print(f"ℹ️ {msg}", flush=True)
    if INFO_LOG is not None:
        INFO_LOG.info(msg)


def log_error(msg: str) -> None:
    print(f"❌ {msg}", flush=True)
    if ERROR_LOG is not None:
        ERROR_LOG.error(msg)


def build_http_session() -> requests.Session:
    """Create a requests session with retries and a proper User-Agent."""
    session = requests.Session()

    retries = Retry(
        total=5,
        connect=5,
        read=5,
        status=5,
        backoff_factor=1.0,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset(["GET"]),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    session.headers.update({"User-Agent": os.getenv("EXTRACT_USER_AGENT", _DEFAULT_USER_AGENT)})
    return session


def fetch_html(url: str, session: requests.Session | None = None, *, timeout: int = 30) -> str | None:
    """GET a page's HTML; None on network errors or non-2xx responses."""
    session = session or build_http_session()
    try:
        resp = session.get(url, timeout=timeout)
    except requests.RequestException as e:
        log_error(f"Request error ({url}): {e}")
        return None

    if not resp.ok:
        log_error(f"HTTP {resp.status_code} fetching {url}")
        return None
    return resp.text


def load_settings_source(path: str | Path) -> StaticSettingsSource:
    """Read ``{"rulesEnabled": ..., "includeURL": ..., "siteRules": {...}}`` from a JSON file.

    Raises:
        ValueError: If the file is not valid JSON or a site rule is invalid
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Settings file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")
    return StaticSettingsSource.from_dict(data)
