"""Sliding window that advances in fixed-size blocks and re-runs a detector."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List, Tuple

import numpy as np

from ..config import DEFAULT_MIN_CONFIDENCE
from ..detectors import ChangeDetector, ScatterDetector
from ..errors import ConfigurationError
from ..logging_utils import log_event
from ..models import ChangePoint

logger = logging.getLogger(__name__)


class StreamState(str, Enum):
    FILLING = "filling"
    READY = "ready"


class Stream:
    """Fixed-size lookback window fed one value at a time.

    Values are collected into a block of ``block_size``; each full block
    shifts the window left by ``block_size`` and the detector runs once the
    window holds ``window_size`` real values. Detection therefore lags by up
    to ``block_size - 1`` samples in exchange for one search per block.
    Not safe for concurrent producers.
    """

    def __init__(
        self,
        window_size: int,
        block_size: int,
        min_sample_size: int | None = None,
        min_confidence: float | None = None,
        *,
        detector: ChangeDetector | None = None,
    ) -> None:
        if detector is not None and (min_sample_size is not None or min_confidence is not None):
            raise ConfigurationError(
                "pass either a detector or min_sample_size/min_confidence, not both; "
                "configure thresholds on the detector itself"
            )
        if window_size <= 0:
            raise ConfigurationError(f"window_size must be positive (got {window_size})")
        if block_size <= 0:
            raise ConfigurationError(f"block_size must be positive (got {block_size})")
        if block_size > window_size:
            raise ConfigurationError(f"block_size ({block_size}) cannot exceed window_size ({window_size})")

        self.window_size = int(window_size)
        self.block_size = int(block_size)
        self.detector = detector or ScatterDetector(
            min_sample_size=min_sample_size or 0,
            min_confidence=DEFAULT_MIN_CONFIDENCE if min_confidence is None else min_confidence,
        )

        min_samples = getattr(self.detector, "min_sample_size", None)
        if min_samples is not None and min_samples > self.window_size / 2:
            raise ConfigurationError(
                f"min_sample_size ({min_samples}) exceeds half of window_size ({self.window_size}); "
                "no split could ever be tested"
            )

        self._window = np.zeros(self.window_size, dtype=float)
        self._block = np.zeros(self.block_size, dtype=float)
        self._filled = 0
        self._observed = 0

    @property
    def observed(self) -> int:
        """Total number of values pushed so far."""

        return self._observed

    @property
    def windowed(self) -> int:
        """Number of values that have entered the window (complete blocks)."""

        return self._observed - self._filled

    @property
    def state(self) -> StreamState:
        return StreamState.READY if self.windowed >= self.window_size else StreamState.FILLING

    @property
    def offset(self) -> int:
        """Absolute series index of ``window[0]``; negative while filling."""

        return self.windowed - self.window_size

    @property
    def window(self) -> np.ndarray:
        """Read-only view of the current window."""

        view = self._window.view()
        view.setflags(write=False)
        return view

    def push(self, value: float) -> ChangePoint | None:
        self._block[self._filled] = float(value)
        self._filled += 1
        self._observed += 1
        if self._filled < self.block_size:
            return None

        b = self.block_size
        self._window[:-b] = self._window[b:]
        self._window[-b:] = self._block
        self._filled = 0

        if self.windowed < self.window_size:
            return None
        if self.windowed == self.window_size:
            log_event(
                logger, "stream_ready", level=logging.DEBUG, observed=self._observed, window_size=self.window_size
            )
        return self.detector.check(self.window)

    def extend(self, values: Iterable[float]) -> List[Tuple[int, ChangePoint]]:
        """Push many values; return ``(observed, change_point)`` for each detection."""

        found: list[tuple[int, ChangePoint]] = []
        for value in values:
            change = self.push(value)
            if change is not None:
                found.append((self._observed, change))
        return found

    def reset(self) -> None:
        self._window[:] = 0.0
        self._block[:] = 0.0
        self._filled = 0
        self._observed = 0

    def __len__(self) -> int:
        return self._observed
