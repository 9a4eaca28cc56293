"""Marker-correlation change detector.

The series is smoothed with a centered moving mean, differenced, and then
correlated against a triangular marker placed at every position. A level
shift shows up as a spike in the differences, which correlates strongly with
a marker centered on it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence

import numpy as np

from ..errors import ConfigurationError
from ..models import ChangePoint
from ..stats import Accumulator
from .base import ChangeDetector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkerMatch:
    index: int
    correlation: float

    def as_dict(self) -> dict[str, Any]:
        return {"index": self.index, "correlation": self.correlation}


def moving_mean(series: Sequence[float] | np.ndarray, width: int) -> np.ndarray:
    """Centered moving mean over ``width`` points; the first and last ``width // 2`` points are kept raw."""

    arr = np.asarray(series, dtype=float)
    if width == 1:
        return arr.copy()
    support = width // 2
    out = arr.copy()
    out[support : arr.size - support] = np.convolve(arr, np.full(width, 1.0 / width), mode="valid")
    return out


def first_differences(series: Sequence[float] | np.ndarray) -> np.ndarray:
    arr = np.asarray(series, dtype=float)
    if arr.size == 0:
        return arr
    return np.diff(arr, prepend=arr[0])


def marker_template(width: int) -> np.ndarray:
    """Triangular marker: peak 1 in the middle, falling linearly towards 0."""

    around = width // 2
    offsets = np.arange(-around, around + 1)
    return 1.0 - np.abs(offsets) / float(around + 1)


def marker_correlations(series: Sequence[float] | np.ndarray, width: int) -> np.ndarray:
    """Pearson correlation of ``series`` with a marker centered on each position.

    Markers are clipped at the series bounds. Positions where either side has
    zero variance get a correlation of 0.
    """

    d = np.asarray(series, dtype=float)
    n = d.size
    template = marker_template(width)
    ones = np.ones(n)

    # the template is symmetric, so convolution equals correlation here
    dm = np.convolve(d, template, mode="same")
    sm = np.convolve(ones, template, mode="same")
    smm = np.convolve(ones, template * template, mode="same")

    mean_d = float(np.mean(d))
    std_d = float(np.std(d))
    mean_m = sm / n
    std_m = np.sqrt(np.maximum(smm / n - mean_m * mean_m, 0.0))

    cov = dm / n - mean_d * mean_m
    denom = std_d * std_m
    return np.divide(cov, denom, out=np.zeros(n), where=denom > 0)


class MarkerCorrelationDetector(ChangeDetector):
    """Reports positions whose marker correlation exceeds ``min_correlation``."""

    def __init__(self, marker_width: int = 1, min_correlation: float = 0.6, name: str = "correlation") -> None:
        if marker_width <= 0 or marker_width % 2 == 0:
            raise ConfigurationError(f"marker width must be a positive odd number (got {marker_width})")
        if not 0.0 <= min_correlation <= 1.0:
            raise ConfigurationError(f"min_correlation must be in [0, 1] (got {min_correlation})")
        super().__init__(name=name, threshold=float(min_correlation))
        self.marker_width = int(marker_width)
        self.metadata.update({"marker_width": self.marker_width})

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "MarkerCorrelationDetector":
        return cls(
            marker_width=int(cfg.get("marker_width", 1)),
            min_correlation=float(cfg.get("min_correlation", 0.6)),
            name=str(cfg.get("name", "correlation")),
        )

    def correlations(self, series: Sequence[float] | np.ndarray) -> np.ndarray:
        arr = np.asarray(series, dtype=float)
        if self.marker_width > arr.size:
            raise ValueError("marker width cannot be larger than the series size")
        smoothed = moving_mean(arr, self.marker_width)
        return marker_correlations(first_differences(smoothed), self.marker_width)

    def scan(self, series: Sequence[float] | np.ndarray) -> List[MarkerMatch]:
        """Return every position whose absolute correlation exceeds the threshold."""

        corr = self.correlations(series)
        matches = [
            MarkerMatch(index=int(idx), correlation=float(corr[idx]))
            for idx in np.flatnonzero(np.abs(corr) > self.threshold)
        ]
        logger.debug("Marker scan found %d positions above %.3f", len(matches), self.threshold)
        return matches

    def check(self, window: Sequence[float] | np.ndarray) -> ChangePoint | None:
        arr = np.asarray(window, dtype=float)
        if arr.size < max(self.marker_width, 2) or not np.all(np.isfinite(arr)):
            return None

        strength = np.abs(self.correlations(arr))
        # position 0 has no "before" segment
        strength[0] = 0.0
        best = int(np.argmax(strength))
        if not self.exceeds(float(strength[best])):
            return None

        acc = Accumulator(arr)
        before, after = acc.prefix(best), acc.suffix(best)
        return ChangePoint(
            index=best,
            difference=after.mean - before.mean,
            confidence=min(float(strength[best]), 1.0),
            before=before,
            after=after,
        )
