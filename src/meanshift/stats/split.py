"""Between-class scatter search for the most likely split of a window."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..models import SampleSummary
from .accumulator import Accumulator


@dataclass(frozen=True)
class Split:
    """Winning split: ``before`` covers ``[0, index)`` and ``after`` ``[index, n)``."""

    index: int
    scatter: float
    before: SampleSummary
    after: SampleSummary


def between_class_scatter(acc: Accumulator, lengths: np.ndarray) -> np.ndarray:
    """Return ``n1*n2/(n1+n2) * (mean1 - mean2)**2`` for each split length, in normalized units."""

    mean1, mean2 = acc.split_means(lengths)
    n1 = np.asarray(lengths, dtype=float)
    n2 = float(len(acc)) - n1
    delta = mean1 - mean2
    return (n1 * n2 / (n1 + n2)) * delta * delta


def find_split(acc: Accumulator, min_sample_size: int) -> Split | None:
    """Scan every split leaving ``min_sample_size`` values on each side.

    Maximizing the between-class scatter is equivalent to minimizing the
    within/between scatter ratio, so segment variances are only computed for
    the winner. The earliest split wins ties. Returns ``None`` when the range
    is empty or no split has positive scatter.
    """

    n = len(acc)
    low = max(int(min_sample_size), 1)
    high = n - low
    if high < low:
        return None

    lengths = np.arange(low, high + 1)
    scatter = between_class_scatter(acc, lengths)
    # argmax returns the first occurrence of the maximum
    best = int(np.argmax(scatter))
    best_scatter = float(scatter[best])
    if not best_scatter > 0.0:
        return None

    index = int(lengths[best])
    return Split(
        index=index,
        scatter=best_scatter,
        before=acc.prefix(index),
        after=acc.suffix(index),
    )
