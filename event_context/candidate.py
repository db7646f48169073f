"""Scored title/description candidates."""

from dataclasses import dataclass


class CandidateOrigin:
    """Where a title candidate came from, with its base score."""
    HEADING = "heading"
    EMPHASIS = "emphasis"
    NEARBY = "nearby"
    FALLBACK = "fallback"

    BASE_SCORES = {
        HEADING: 0.6,
        EMPHASIS: 0.4,
        NEARBY: 0.3,
        FALLBACK: 0.2,
    }


@dataclass
class Candidate:
    text: str
    score: float
    origin: str
    origin_descriptor: str
    role: str = "title"
    location_hint: str | None = None
