"""Generic event context inference for an anchor with no site-specific rules."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from content_tree import normalize_text, page_title
from event_context.candidate_scorer import (
    combine_confidence,
    compose_description,
    score_description_candidate,
    select_best_candidate,
)
from event_context.context_scanner import ContextScanner
from extraction_config import ExtractionConfig

logger = logging.getLogger(__name__)

_ERROR_CONFIDENCE = 0.1
_TITLE_SPLIT_RE = re.compile(r"[-|｜]")


@dataclass
class EventContext:
    title: str | None = None
    description: str | None = None
    confidence: float = 0.0
    sources: list[str] = field(default_factory=list)
    location: str | None = None


def extract_event_context(anchor, options: ExtractionConfig | None = None, *, page_url: str | None = None) -> EventContext:
    """Infer a title and description for the event around ``anchor``.

    Never raises: a failure during scanning yields a low-confidence result
    built from the page title.
    """
    config = options or ExtractionConfig()
    scanner = ContextScanner(config)
    result = EventContext()

    try:
        best = select_best_candidate(scanner.title_candidates(anchor))
        title_score = None
        if best is not None:
            result.title = best.text[: config.max_title_length]
            result.location = best.location_hint
            result.sources.append(best.origin_descriptor)
            title_score = best.score

        description = compose_description(
            scanner.description_parts(anchor),
            max_parts=config.max_description_parts,
            max_chars=config.max_description_length,
            url=page_url if config.include_url else None,
        )
        description_score = None
        if description is not None:
            result.description = description
            result.sources.append("context-paragraphs")
            description_score = score_description_candidate(description, config.stopwords)

        result.confidence = combine_confidence(title_score, description_score)
    except Exception as e:
        logger.warning("Context extraction failed, using page title: %s", e)
        title = page_title(anchor)
        result = EventContext(
            title=normalize_text(_TITLE_SPLIT_RE.split(title)[0]) if title else None,
            description=f"Could not extract event details.\nURL: {page_url}" if page_url else None,
            confidence=_ERROR_CONFIDENCE,
            sources=["error-fallback"],
        )

    return result
