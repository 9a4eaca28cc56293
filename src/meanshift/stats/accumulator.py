"""Cumulative sums over a window for constant-time segment statistics."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..models import SampleSummary


def _summarize(total: float, total_sq: float, count: int, shift: float, scale: float) -> SampleSummary:
    mean = total / count
    variance = None
    if count > 1:
        variance = max((total_sq - total * mean) / (count - 1), 0.0) * scale * scale
    return SampleSummary(mean=mean * scale + shift, variance=variance, count=count)


class Accumulator:
    """Running sums and sums of squares of a single window.

    Entry ``i`` of :attr:`cumsum` and :attr:`cumsumsq` covers ``window[0..i]``.
    Values are shifted by the first element and divided by the largest
    remaining magnitude before accumulation, so a constant window accumulates
    exact zeros and every accumulated value lies in ``[-1, 1]``. Summaries are
    reported in the original units unless ``normalized=True`` is requested.
    Split positions and t statistics are the same in both.
    """

    def __init__(self, window: Sequence[float] | np.ndarray) -> None:
        arr = np.asarray(window, dtype=float)
        if arr.ndim != 1:
            raise ValueError("window must be one-dimensional")
        self.size = int(arr.size)
        self.shift = float(arr[0]) if arr.size else 0.0
        centered = arr - self.shift
        peak = float(np.max(np.abs(centered))) if arr.size else 0.0
        self.scale = peak if peak > 0.0 and np.isfinite(peak) else 1.0
        centered = centered / self.scale
        self.cumsum = np.cumsum(centered)
        self.cumsumsq = np.cumsum(centered * centered)

    def __len__(self) -> int:
        return self.size

    @property
    def total(self) -> float:
        return float(self.cumsum[-1]) if self.size else 0.0

    @property
    def total_sq(self) -> float:
        return float(self.cumsumsq[-1]) if self.size else 0.0

    def _units(self, normalized: bool) -> tuple[float, float]:
        return (0.0, 1.0) if normalized else (self.shift, self.scale)

    def prefix(self, length: int, *, normalized: bool = False) -> SampleSummary:
        """Summary of ``window[:length]``."""

        if not 1 <= length <= self.size:
            raise IndexError(f"prefix length {length} outside [1, {self.size}]")
        return _summarize(
            float(self.cumsum[length - 1]),
            float(self.cumsumsq[length - 1]),
            length,
            *self._units(normalized),
        )

    def suffix(self, start: int, *, normalized: bool = False) -> SampleSummary:
        """Summary of ``window[start:]``."""

        if not 0 <= start < self.size:
            raise IndexError(f"suffix start {start} outside [0, {self.size})")
        head = float(self.cumsum[start - 1]) if start else 0.0
        head_sq = float(self.cumsumsq[start - 1]) if start else 0.0
        return _summarize(
            self.total - head,
            self.total_sq - head_sq,
            self.size - start,
            *self._units(normalized),
        )

    def split_means(self, lengths: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Prefix and suffix means (normalized units) for each split length.

        ``lengths`` must lie in ``[1, size - 1]``.
        """

        lengths = np.asarray(lengths, dtype=int)
        head = self.cumsum[lengths - 1]
        n1 = lengths.astype(float)
        n2 = float(self.size) - n1
        return head / n1, (self.total - head) / n2
