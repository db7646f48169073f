from typing import List

from date_spans.factory import SpanRecognizers
from date_spans.orchestrators.span_orchestrator import SpanOrchestrator


class PageScanOrchestrator(SpanOrchestrator):
    """Every recognizer family, used when scanning page text nodes."""

    def get_recognizer_steps(self) -> List[SpanRecognizers]:
        return [
            SpanRecognizers.RELATIVE,
            SpanRecognizers.NUMERIC_DATE,
            SpanRecognizers.LONG_FORM_DATE,
            SpanRecognizers.ERA_DATE,
            SpanRecognizers.MONTH_DAY,
            SpanRecognizers.ENGLISH_DATE,
            SpanRecognizers.TIME_OF_DAY,
        ]
