"""Scatter-maximization change detector with a Welch t-test filter.

The detector looks for the split of a window where the distributions on
either side are most dissimilar (largest between-class scatter), following
"Online change detection" style estimators that approach an unbiased
estimate of the changeover point for long windows. A window is not
guaranteed to contain a change, so the winning split is kept only when
Welch's t-test says the two means differ with enough confidence.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import numpy as np

from ..config import DEFAULT_MIN_CONFIDENCE, resolve_min_sample_size
from ..errors import ConfigurationError
from ..models import ChangePoint
from ..stats import Accumulator, find_split, welch_confidence
from .base import ChangeDetector

logger = logging.getLogger(__name__)


class ScatterDetector(ChangeDetector):
    """Finds a single mean shift in a window."""

    def __init__(
        self,
        min_sample_size: int = 0,
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
        name: str = "scatter",
    ) -> None:
        if min_sample_size < 0:
            raise ConfigurationError(f"min_sample_size cannot be negative (got {min_sample_size})")
        if not 0.0 <= min_confidence < 1.0:
            raise ConfigurationError(f"min_confidence must be in [0, 1) (got {min_confidence})")
        super().__init__(name=name, threshold=float(min_confidence))
        self.min_sample_size = resolve_min_sample_size(min_sample_size)
        self.metadata.update({"min_sample_size": self.min_sample_size})

    @property
    def min_confidence(self) -> float:
        return float(self.threshold or 0.0)

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "ScatterDetector":
        return cls(
            min_sample_size=int(cfg.get("min_sample_size", 0)),
            min_confidence=float(cfg.get("min_confidence", DEFAULT_MIN_CONFIDENCE)),
            name=str(cfg.get("name", "scatter")),
        )

    def check(self, window: Sequence[float] | np.ndarray) -> ChangePoint | None:
        arr = np.asarray(window, dtype=float)
        if arr.size < 2 * self.min_sample_size:
            return None
        if not np.all(np.isfinite(arr)):
            logger.warning("Skipping window with non-finite values (size=%d)", arr.size)
            return None

        acc = Accumulator(arr)
        split = find_split(acc, self.min_sample_size)
        if split is None:
            return None

        confidence = welch_confidence(
            acc.prefix(split.index, normalized=True),
            acc.suffix(split.index, normalized=True),
        )
        if not self.exceeds(confidence):
            logger.debug(
                "Rejected split at %d: confidence %.4f <= %.4f",
                split.index,
                confidence,
                self.min_confidence,
            )
            return None

        return ChangePoint(
            index=split.index,
            difference=split.after.mean - split.before.mean,
            confidence=confidence,
            before=split.before,
            after=split.after,
        )
