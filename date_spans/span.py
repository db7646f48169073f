"""Dataclass representing a temporal expression found in a text unit."""

from dataclasses import dataclass

from date_spans.calendar_rules import is_valid_iso_date


class SpanKind:
    """What a span carries."""
    DATE = "date"            # Calendar date only
    TIME = "time"            # Time of day only
    DATETIME = "datetime"    # Calendar date plus time of day


@dataclass(frozen=True)
class TemporalSpan:
    """A recognized temporal expression with its character offsets.

    Offsets are zero-based and half-open over the scanned text unit. A span
    produced by a single recognizer may overlap others; only the output of a
    span orchestrator is guaranteed to be ordered and non-overlapping.
    """
    start_offset: int
    end_offset: int
    raw_text: str
    recognizer_id: str
    kind: str
    normalized_date: str | None = None  # YYYY-MM-DD
    normalized_time: str | None = None  # HH:MM

    def is_valid(self) -> bool:
        if self.start_offset < 0 or self.start_offset >= self.end_offset:
            return False
        if self.kind in (SpanKind.DATE, SpanKind.DATETIME):
            if not self.normalized_date or not is_valid_iso_date(self.normalized_date):
                return False
        if self.kind in (SpanKind.TIME, SpanKind.DATETIME) and not self.normalized_time:
            return False
        return True

    @property
    def has_date(self) -> bool:
        return self.normalized_date is not None

    def overlaps(self, other: "TemporalSpan") -> bool:
        return self.start_offset < other.end_offset and other.start_offset < self.end_offset
