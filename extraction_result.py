from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from date_spans.date_info import ResolvedDateInfo


@dataclass
class ExtractionResult:
    """The outcome of inferring an event around an anchor.

    This is the canonical result of every extraction strategy and of the
    facade. Strategies return ExtractionResult instances rather than raw
    dictionaries so every path validates the same way.

    Core fields:
        title: Event title, or None when nothing plausible was found
        description: Free text description, capped by configuration
        location: Venue or address text
        date_info: Resolved all-day or timed date pair
        confidence: Overall confidence in [0, 1]
        strategy_used: Name of the strategy that produced the result

    Diagnostic fields:
        fallback: True when a specialised strategy crashed and the general
            strategy produced this result instead
        error: Message of the failure that caused a fallback or total failure
        rule_used: Domain of the site rule that was applied
        sources: Origin descriptors of the chosen title/description text
        events: Further events found on listing pages (calendars, schedules)
    """
    title: str | None = None
    description: str | None = None
    location: str | None = None
    date_info: ResolvedDateInfo | None = None
    confidence: float = 0.0
    strategy_used: str = ""
    price: str | None = None
    url: str | None = None
    sources: list[str] = field(default_factory=list)
    events: list["ExtractionResult"] = field(default_factory=list)
    fallback: bool = False
    error: str | None = None
    rule_used: str | None = None

    def __post_init__(self) -> None:
        is_valid, error_message = self.validate()
        if not is_valid:
            raise ValueError(f"Invalid ExtractionResult: {error_message}")

    def validate(self) -> tuple[bool, str]:
        """Check field types and the confidence range.

        Returns:
            Tuple of (is_valid, error_message). error_message is empty string if valid.
        """
        for field_name in ["title", "description", "location", "price", "url", "error", "rule_used"]:
            value = getattr(self, field_name)
            if value is not None and not isinstance(value, str):
                return False, f"Field '{field_name}' must be str or None, got {type(value).__name__}"

        if not isinstance(self.confidence, (float, int)):
            return False, f"Field 'confidence' must be float, got {type(self.confidence).__name__}"
        if not 0.0 <= self.confidence <= 1.0:
            return False, f"Field 'confidence' must be between 0 and 1, got {self.confidence}"

        if self.date_info is not None and not isinstance(self.date_info, ResolvedDateInfo):
            return False, f"Field 'date_info' must be ResolvedDateInfo or None, got {type(self.date_info).__name__}"

        if not isinstance(self.strategy_used, str):
            return False, f"Field 'strategy_used' must be str, got {type(self.strategy_used).__name__}"

        return True, ""

    @property
    def is_empty(self) -> bool:
        """True when the strategy ran but found nothing usable."""
        return self.title is None and self.date_info is None and not self.events

    def with_fallback(self, error: str) -> "ExtractionResult":
        return replace(self, fallback=True, error=error)

    @classmethod
    def failure(cls, error: str) -> "ExtractionResult":
        return cls(confidence=0.0, strategy_used="error", error=error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camel-cased dictionary used in JSON artifacts."""
        data: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "dateInfo": self.date_info.to_dict() if self.date_info else None,
            "confidence": round(float(self.confidence), 3),
            "strategyUsed": self.strategy_used,
        }
        if self.price is not None:
            data["price"] = self.price
        if self.url is not None:
            data["url"] = self.url
        if self.sources:
            data["sources"] = list(self.sources)
        if self.events:
            data["events"] = [event.to_dict() for event in self.events]
        if self.fallback:
            data["fallback"] = True
        if self.error is not None:
            data["error"] = self.error
        if self.rule_used is not None:
            data["ruleUsed"] = self.rule_used
        return data
