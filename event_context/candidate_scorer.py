"""Quality scores for title and description candidates.

Scores are additive adjustments on a per-origin base and are always clamped
to [0, 1]. Given identical text, a heading candidate never scores below a
fallback candidate because only the base differs.
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from content_tree import normalize_text
from event_context.candidate import Candidate, CandidateOrigin
from event_context.lexicon import DEFAULT_STOPWORDS, EVENT_KEYWORDS, NAVIGATION_KEYWORDS
from event_context.text_filters import is_valid_text, truncate_with_ellipsis

_FULL_DATE_RE = re.compile(r"\d{4}[年/\-]\d{1,2}[月/\-]\d{1,2}")
_ASCII_ONLY_RE = re.compile(r"^[a-zA-Z0-9\s\-_]+$")
_TERMINATOR_END_RE = re.compile(r"[。.!?]$")
_TERMINATOR_RE = re.compile(r"[。.!?]")
_UPPER_RE = re.compile(r"[A-Z]")

DESCRIPTION_JOINER = "。"


def _clamp(score: float) -> float:
    return max(0.0, min(1.0, score))


def score_title_candidate(text: str | None, origin: str) -> float:
    """Score a title candidate from its text and where it was found."""
    if not text:
        return 0.0

    score = CandidateOrigin.BASE_SCORES.get(origin, 0.0)
    normalized = normalize_text(text)
    length = len(normalized)

    if 10 <= length <= 50:
        score += 0.2
    elif 5 <= length <= 100:
        score += 0.1
    elif length < 3 or length > 200:
        score -= 0.3

    if any(keyword in normalized for keyword in EVENT_KEYWORDS):
        score += 0.15

    # A title that is mostly a date is probably the date line itself
    if _FULL_DATE_RE.search(normalized):
        score -= 0.2

    if any(keyword in normalized for keyword in NAVIGATION_KEYWORDS):
        score -= 0.4

    if _ASCII_ONLY_RE.match(normalized) and length < 20:
        score -= 0.1

    if _TERMINATOR_END_RE.search(normalized):
        score += 0.1

    if len(_UPPER_RE.findall(normalized)) > length * 0.5:
        score -= 0.1

    return _clamp(score)


def score_description_candidate(text: str | None, stopwords: Sequence[str] = DEFAULT_STOPWORDS) -> float:
    if not text:
        return 0.0

    score = 0.5
    if _TERMINATOR_RE.search(text) or "・" in text:
        score += 0.2
    if not is_valid_text(text, stopwords):
        score -= 0.3
    if 20 <= len(text) <= 200:
        score += 0.1
    return _clamp(score)


def select_best_candidate(candidates: Iterable[Candidate]) -> Candidate | None:
    """Highest score wins; the earliest candidate wins a tie."""
    best = None
    for candidate in candidates:
        if best is None or candidate.score > best.score:
            best = candidate
    return best


def compose_description(
    parts: Sequence[str],
    *,
    max_parts: int,
    max_chars: int,
    url: str | None = None,
) -> str | None:
    """Join up to ``max_parts`` parts and fit the result, URL line included, within ``max_chars``.

    The URL line is dropped when it would leave no room for the text itself.
    """
    parts = [p for p in parts if p]
    if not parts:
        return None

    body = DESCRIPTION_JOINER.join(parts[:max_parts])
    url_line = f"\nURL: {url}" if url else ""
    if url_line and len(url_line) + 10 > max_chars:
        url_line = ""

    return truncate_with_ellipsis(body, max_chars - len(url_line)) + url_line


def combine_confidence(title_score: float | None, description_score: float | None) -> float:
    if title_score is None and description_score is None:
        return 0.0
    if description_score is None:
        return _clamp(title_score)
    if title_score is None:
        return _clamp(description_score / 2)
    return _clamp((title_score + description_score) / 2)
