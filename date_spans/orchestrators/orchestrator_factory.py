from __future__ import annotations

from enum import Enum, auto

from date_spans.orchestrators.span_orchestrator import SpanOrchestrator
from date_spans.orchestrators.page_scan_orchestrator import PageScanOrchestrator
from date_spans.orchestrators.selection_parse_orchestrator import SelectionParseOrchestrator


class SpanOrchestratorTypes(Enum):
    PAGE_SCAN = auto()
    SELECTION = auto()


class SpanOrchestratorFactory:
    """Factory for creating span orchestrators from extraction settings."""

    @staticmethod
    def get_orchestrator(orchestrator_type: SpanOrchestratorTypes, config=None) -> SpanOrchestrator:
        """Get the orchestrator for the given type.

        Args:
            orchestrator_type: Which orchestrator to build.
            config: An ExtractionConfig; defaults are used when omitted.

        Raises:
            ValueError: If the orchestrator type is not recognized.
        """
        from datetime import timedelta
        from extraction_config import ExtractionConfig

        config = config or ExtractionConfig()
        if orchestrator_type == SpanOrchestratorTypes.PAGE_SCAN:
            return PageScanOrchestrator(max_text_length=config.max_text_length)
        elif orchestrator_type == SpanOrchestratorTypes.SELECTION:
            return SelectionParseOrchestrator(
                tzinfo=config.tzinfo,
                duration=timedelta(minutes=config.default_duration_minutes),
                max_text_length=config.max_text_length,
            )
        else:
            raise ValueError(f"Unknown orchestrator type: {orchestrator_type}")
