"""Window statistics: cumulative sums, scatter search and significance testing."""

from .accumulator import Accumulator
from .significance import WelchResult, welch_confidence, welch_test
from .split import Split, between_class_scatter, find_split

__all__ = [
    "Accumulator",
    "Split",
    "WelchResult",
    "between_class_scatter",
    "find_split",
    "welch_confidence",
    "welch_test",
]
