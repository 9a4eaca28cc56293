"""Synthetic piecewise-constant series for demos and tests."""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np


def generate_step_series(
    segments: Sequence[Tuple[int, float]] | None = None,
    noise_std: float = 0.1,
    seed: int | None = None,
) -> List[float]:
    """Concatenate ``(length, mean)`` segments and add Gaussian noise."""

    if segments is None:
        segments = [(100, 0.0), (100, 1.0)]
    if noise_std < 0:
        raise ValueError("noise_std cannot be negative")

    rng = np.random.default_rng(seed)
    parts = []
    for length, mean in segments:
        if int(length) <= 0:
            raise ValueError(f"segment length must be positive (got {length})")
        parts.append(np.full(int(length), float(mean)))
    series = np.concatenate(parts) if parts else np.zeros(0)
    if noise_std:
        series = series + rng.normal(scale=noise_std, size=series.shape)
    return series.tolist()


def change_indices(segments: Sequence[Tuple[int, float]]) -> List[int]:
    """Indices where each segment after the first begins."""

    starts = np.cumsum([int(length) for length, _ in segments])
    return [int(s) for s in starts[:-1]]
