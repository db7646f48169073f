"""Calendar-ready start/end pairs built from recognized spans."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from date_spans.span import SpanKind, TemporalSpan

ALL_DAY_CONFIDENCE = 0.6
TIMED_CONFIDENCE = 0.7


@dataclass(frozen=True)
class ResolvedDateInfo:
    """Either an all-day date pair or a timed start/end pair.

    All-day values carry ISO dates in ``start_date``/``end_date``; timed
    values carry offset-aware ISO datetimes plus the IANA zone name.
    """
    all_day: bool
    start_date: str | None = None
    end_date: str | None = None
    start_datetime: str | None = None
    end_datetime: str | None = None
    time_zone: str | None = None
    confidence: float = ALL_DAY_CONFIDENCE
    source: str = ""

    def __post_init__(self):
        is_valid, error = self.validate()
        if not is_valid:
            raise ValueError(f"Invalid ResolvedDateInfo: {error}")

    def validate(self) -> tuple[bool, str]:
        if not 0.0 <= self.confidence <= 1.0:
            return False, f"confidence must be within [0, 1], got {self.confidence}"
        try:
            if self.all_day:
                if not self.start_date or not self.end_date:
                    return False, "all-day dates require start_date and end_date"
                if date.fromisoformat(self.end_date) < date.fromisoformat(self.start_date):
                    return False, "end_date precedes start_date"
            else:
                if not self.start_datetime or not self.end_datetime:
                    return False, "timed dates require start_datetime and end_datetime"
                if datetime.fromisoformat(self.end_datetime) < datetime.fromisoformat(self.start_datetime):
                    return False, "end_datetime precedes start_datetime"
        except ValueError as e:
            return False, str(e)
        return True, ""

    @property
    def start(self) -> date | datetime:
        if self.all_day:
            return date.fromisoformat(self.start_date)
        return datetime.fromisoformat(self.start_datetime)

    def to_dict(self) -> dict:
        if self.all_day:
            start = {"date": self.start_date}
            end = {"date": self.end_date}
        else:
            start = {"dateTime": self.start_datetime, "timeZone": self.time_zone}
            end = {"dateTime": self.end_datetime, "timeZone": self.time_zone}
        return {
            "type": "date" if self.all_day else "datetime",
            "start": start,
            "end": end,
            "confidence": self.confidence,
            "source": self.source,
        }

    @classmethod
    def all_day_event(cls, day: date, source: str, confidence: float = ALL_DAY_CONFIDENCE) -> "ResolvedDateInfo":
        iso = day.isoformat()
        return cls(all_day=True, start_date=iso, end_date=iso, confidence=confidence, source=source)

    @classmethod
    def timed_event(
        cls,
        start: datetime,
        duration: timedelta,
        source: str,
        confidence: float = TIMED_CONFIDENCE,
    ) -> "ResolvedDateInfo":
        """Build a timed pair; ``start`` must be timezone-aware."""
        if start.tzinfo is None:
            raise ValueError("timed events need an aware start datetime")
        end = start + duration
        zone_name = getattr(start.tzinfo, "key", None) or start.tzname()
        return cls(
            all_day=False,
            start_datetime=start.isoformat(),
            end_datetime=end.isoformat(),
            time_zone=zone_name,
            confidence=confidence,
            source=source,
        )


def date_info_from_span(
    span: TemporalSpan,
    *,
    tzinfo,
    duration: timedelta,
    time_span: TemporalSpan | None = None,
) -> ResolvedDateInfo | None:
    """Convert a date-bearing span (plus an optional separate time span)."""
    if not span.has_date:
        return None

    day = date.fromisoformat(span.normalized_date)
    clock = span.normalized_time
    if clock is None and time_span is not None and time_span.kind == SpanKind.TIME:
        clock = time_span.normalized_time

    source = f"regex-{span.recognizer_id}"
    if clock is None:
        return ResolvedDateInfo.all_day_event(day, source)

    hour, minute = (int(part) for part in clock.split(":"))
    start = datetime(day.year, day.month, day.day, hour, minute, tzinfo=tzinfo)
    return ResolvedDateInfo.timed_event(start, duration, source)
