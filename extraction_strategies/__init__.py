"""Event extraction strategies package.

This package contains the site-specific and generic strategies that turn a
clicked element into an ExtractionResult, and the registry that picks one.
"""

from .extraction_strategy_factory import ExtractionStrategies, ExtractionStrategyFactory, StrategyRegistry
from .strategy_base import ExtractionContext, ExtractionStrategy, StrategyRun

__all__ = [
    "ExtractionContext",
    "ExtractionStrategies",
    "ExtractionStrategy",
    "ExtractionStrategyFactory",
    "StrategyRegistry",
    "StrategyRun",
]
