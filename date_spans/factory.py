"""Factory for creating span recognizers."""

from enum import Enum, auto

from date_spans.strategy import SpanRecognizer


class SpanRecognizers(Enum):
    """Enumeration of available span recognizers."""
    RELATIVE = auto()
    NUMERIC_DATE = auto()
    LONG_FORM_DATE = auto()
    ERA_DATE = auto()
    MONTH_DAY = auto()
    ENGLISH_DATE = auto()
    TIME_OF_DAY = auto()
    LOOSE_NUMERIC_DATE = auto()
    SLASH_MONTH_DAY = auto()


class SpanRecognizerFactory:
    """Factory for creating SpanRecognizer instances."""

    @staticmethod
    def get_recognizer(recognizer: SpanRecognizers) -> SpanRecognizer:
        """Get a recognizer instance for the specified family.

        Args:
            recognizer: The recognizer family to create

        Returns:
            An instance of the requested recognizer

        Raises:
            ValueError: If the recognizer is unknown
        """
        # Import here to avoid circular dependencies
        from date_spans.relative_date_parser import RelativeDateParser
        from date_spans.numeric_date_parser import NumericDateParser
        from date_spans.long_form_date_parser import LongFormDateParser
        from date_spans.era_date_parser import EraDateParser
        from date_spans.month_day_parser import MonthDayParser
        from date_spans.english_date_parser import EnglishDateParser
        from date_spans.time_of_day_parser import TimeOfDayParser
        from date_spans.loose_numeric_date_parser import LooseNumericDateParser
        from date_spans.slash_month_day_parser import SlashMonthDayParser

        if recognizer == SpanRecognizers.RELATIVE:
            return RelativeDateParser()
        elif recognizer == SpanRecognizers.NUMERIC_DATE:
            return NumericDateParser()
        elif recognizer == SpanRecognizers.LONG_FORM_DATE:
            return LongFormDateParser()
        elif recognizer == SpanRecognizers.ERA_DATE:
            return EraDateParser()
        elif recognizer == SpanRecognizers.MONTH_DAY:
            return MonthDayParser()
        elif recognizer == SpanRecognizers.ENGLISH_DATE:
            return EnglishDateParser()
        elif recognizer == SpanRecognizers.TIME_OF_DAY:
            return TimeOfDayParser()
        elif recognizer == SpanRecognizers.LOOSE_NUMERIC_DATE:
            return LooseNumericDateParser()
        elif recognizer == SpanRecognizers.SLASH_MONTH_DAY:
            return SlashMonthDayParser()
        else:
            raise ValueError(f"Unknown recognizer: {recognizer}")
