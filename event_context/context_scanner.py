"""Structural search around an anchor node for title and description text."""

from __future__ import annotations

import logging
import re

from bs4 import Tag

from content_tree import (
    as_element,
    closest,
    css_path,
    document_root,
    element_parent,
    next_elements,
    node_text,
    page_title,
    previous_elements,
    tree_distance,
)
from event_context.candidate import Candidate, CandidateOrigin
from event_context.candidate_scorer import score_title_candidate
from event_context.lexicon import (
    CONTAINER_HEADING_SELECTOR,
    DESCRIPTION_SCOPE_SELECTOR,
    EMPHASIS_SCOPE_SELECTOR,
    EMPHASIS_SELECTORS,
    EVENT_CONTAINER_SELECTORS,
    GENERIC_HEADING_SELECTOR,
    HEADING_SELECTORS,
    MAX_HEADING_LENGTH,
    MIN_HEADING_LENGTH,
)
from event_context.text_filters import compress_title, is_valid_text, strip_site_suffix

logger = logging.getLogger(__name__)

_SENTENCE_END_RE = re.compile(r"[。.!?]")

# Sibling block text outside (10, 500) characters is not paragraph-like.
_MIN_SIBLING_LENGTH = 10
_MAX_SIBLING_LENGTH = 500
_LEADING_CLAUSE_LIMIT = 50

# Emphasis this close to the anchor in the tree gets a proximity bonus.
_NEAR_EMPHASIS_DISTANCE = 3
_NEAR_EMPHASIS_BONUS = 0.1


def _heading_text_ok(element: Tag) -> bool:
    length = len(node_text(element))
    return MIN_HEADING_LENGTH <= length <= MAX_HEADING_LENGTH


class ContextScanner:
    """Collects title candidates and description text around an anchor.

    The scanner only reads the tree. Scores come from the candidate scorer.
    """

    def __init__(self, config):
        self.config = config

    def find_nearest_heading(self, anchor, max_depth: int | None = None) -> Tag | None:
        """Find the heading-like element that most plausibly labels ``anchor``.

        Walks up at most ``max_depth`` ancestors looking at the parent's heading
        descendants and then the current element's own; then tries enclosing
        event containers; finally the page's first h1.
        """
        element = as_element(anchor)
        if element is None:
            return None
        if max_depth is None:
            max_depth = self.config.heading_search_depth

        current = element
        depth = 0
        while current is not None and depth < max_depth:
            parent = element_parent(current)
            if parent is not None:
                for selector in HEADING_SELECTORS:
                    for heading in parent.select(selector):
                        if _heading_text_ok(heading):
                            return heading

            for heading in current.select(GENERIC_HEADING_SELECTOR):
                if _heading_text_ok(heading):
                    return heading

            current = parent
            depth += 1

        for selector in EVENT_CONTAINER_SELECTORS:
            container = closest(element, selector)
            if container is None:
                continue
            heading = container.select_one(CONTAINER_HEADING_SELECTOR)
            if heading is not None and _heading_text_ok(heading):
                return heading

        root = document_root(element)
        first_h1 = root.find("h1") if root is not None else None
        if first_h1 is not None and _heading_text_ok(first_h1):
            return first_h1
        return None

    def collect_sibling_paragraphs(self, anchor, before: int | None = None, after: int | None = None) -> list[str]:
        """Texts of nearby sibling elements, in document order."""
        element = as_element(anchor)
        if element is None or element_parent(element) is None:
            return []
        before = self.config.siblings_before if before is None else before
        after = self.config.siblings_after if after is None else after

        siblings = list(reversed(previous_elements(element, before))) + next_elements(element, after)
        texts = []
        for sibling in siblings:
            text = node_text(sibling)
            if _MIN_SIBLING_LENGTH < len(text) < _MAX_SIBLING_LENGTH:
                texts.append(text)
        return texts

    def title_candidates(self, anchor) -> list[Candidate]:
        element = as_element(anchor)
        if element is None:
            return []
        stopwords = self.config.stopwords
        candidates: list[Candidate] = []

        heading = self.find_nearest_heading(element)
        if heading is not None:
            candidate = self._candidate_from(heading, CandidateOrigin.HEADING)
            if candidate is not None:
                candidates.append(candidate)

        candidates.extend(self._emphasis_candidates(element))

        for text in self.collect_sibling_paragraphs(element):
            if not is_valid_text(text, stopwords):
                continue
            clause = _SENTENCE_END_RE.split(text)[0]
            if len(clause) > _LEADING_CLAUSE_LIMIT:
                clause = clause[:_LEADING_CLAUSE_LIMIT] + "..."
            clause = clause.strip()
            if not clause:
                continue
            candidates.append(Candidate(
                text=clause,
                score=score_title_candidate(clause, CandidateOrigin.NEARBY),
                origin=CandidateOrigin.NEARBY,
                origin_descriptor="sibling-text",
            ))

        fallback = strip_site_suffix(page_title(element))
        if fallback and is_valid_text(fallback, stopwords):
            candidates.append(Candidate(
                text=fallback,
                score=score_title_candidate(fallback, CandidateOrigin.FALLBACK),
                origin=CandidateOrigin.FALLBACK,
                origin_descriptor="document.title",
            ))

        logger.debug("Collected %d title candidates for %s", len(candidates), css_path(element))
        return candidates

    def description_parts(self, anchor) -> list[str]:
        element = as_element(anchor)
        if element is None:
            return []
        stopwords = self.config.stopwords
        parts = []

        block = closest(element, DESCRIPTION_SCOPE_SELECTOR)
        if block is not None:
            block_text = node_text(block)
            if block_text and is_valid_text(block_text, stopwords):
                parts.append(block_text)

        for text in self.collect_sibling_paragraphs(element):
            if is_valid_text(text, stopwords) and text not in parts:
                parts.append(text)
        return parts

    def _emphasis_candidates(self, element: Tag) -> list[Candidate]:
        scope = closest(element, EMPHASIS_SCOPE_SELECTOR)
        if scope is None:
            return []

        candidates = []
        seen: set[int] = set()
        for selector in EMPHASIS_SELECTORS:
            for emphasis in scope.select(selector):
                if id(emphasis) in seen:
                    continue
                seen.add(id(emphasis))
                candidate = self._candidate_from(emphasis, CandidateOrigin.EMPHASIS)
                if candidate is None:
                    continue
                if tree_distance(emphasis, element) <= _NEAR_EMPHASIS_DISTANCE:
                    candidate.score = min(1.0, candidate.score + _NEAR_EMPHASIS_BONUS)
                candidates.append(candidate)
        return candidates

    def _candidate_from(self, element: Tag, origin: str) -> Candidate | None:
        text = node_text(element)
        if not text or not is_valid_text(text, self.config.stopwords):
            return None
        title, location = compress_title(text)
        if not title:
            return None
        return Candidate(
            text=title,
            score=score_title_candidate(title, origin),
            origin=origin,
            origin_descriptor=css_path(element),
            location_hint=location,
        )
