"""Noise filtering and title clean-up for candidate text."""

from __future__ import annotations

import re
from typing import Sequence

from content_tree import normalize_text
from event_context.lexicon import DEFAULT_STOPWORDS

_URL_RE = re.compile(r"https?://\S+")
_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
_PHONE_RE = re.compile(r"\d{2,4}-\d{2,4}-\d{4}")

# More than this many URLs, e-mails or phone numbers marks text as noise.
_MAX_CONTACT_MATCHES = 2

_LONG_PAREN_RE = re.compile(r"[（(]([^）)]{20,})[）)]")
_LONG_LENTICULAR_RE = re.compile(r"【[^】]{20,}】")
_LONG_SQUARE_RE = re.compile(r"\[[^\]]{20,}\]")
_AT_SIGN_RE = re.compile(r"^(.+?)[@＠]\s*(.+)$")
_AT_WORD_RE = re.compile(r"^(.+?)\s+at\s+(.+)$", re.IGNORECASE)

_SITE_SUFFIX_RE = re.compile(r"\s*[-|｜]\s*.+$")


def is_valid_text(text: str | None, stopwords: Sequence[str] = DEFAULT_STOPWORDS) -> bool:
    """False for text that is too short, contains a stopword, or is mostly contact details."""
    if not text or len(text) < 3:
        return False

    lowered = text.lower()
    for stopword in stopwords:
        if stopword.lower() in lowered:
            return False

    if (
        len(_URL_RE.findall(text)) > _MAX_CONTACT_MATCHES
        or len(_EMAIL_RE.findall(text)) > _MAX_CONTACT_MATCHES
        or len(_PHONE_RE.findall(text)) > _MAX_CONTACT_MATCHES
    ):
        return False
    return True


def compress_title(text: str | None) -> tuple[str, str | None]:
    """Shorten long bracketed asides and split "X @ Y" / "X at Y" into (title, location)."""
    if not text:
        return "", None

    text = _LONG_PAREN_RE.sub("(...)", text)
    text = _LONG_LENTICULAR_RE.sub("【...】", text)
    text = _LONG_SQUARE_RE.sub("[...]", text)

    for pattern in (_AT_SIGN_RE, _AT_WORD_RE):
        m = pattern.match(text)
        if m:
            return normalize_text(m.group(1)), normalize_text(m.group(2))
    return normalize_text(text), None


def strip_site_suffix(title: str | None) -> str:
    """Drop a trailing " - Site name" / " | Site name" from a page title."""
    if not title:
        return ""
    return normalize_text(_SITE_SUFFIX_RE.sub("", title))


def truncate_with_ellipsis(text: str, limit: int, marker: str = "...") -> str:
    """Cut ``text`` so that the result, marker included, is at most ``limit`` characters."""
    if len(text) <= limit:
        return text
    if limit <= len(marker):
        return text[:limit]
    return text[: limit - len(marker)] + marker
