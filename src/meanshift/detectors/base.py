"""Abstract detector strategy shared by the scatter and correlation detectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import numpy as np

from ..models import ChangePoint


@dataclass
class ChangeDetector(ABC):
    """Base class for pluggable change point detectors."""

    name: str = "detector"
    threshold: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @abstractmethod
    def check(self, window: Sequence[float] | np.ndarray) -> ChangePoint | None:
        """Return the change point found in ``window``, or ``None``."""

    def exceeds(self, value: float) -> bool:
        """Return True when ``value`` is strictly above the threshold."""

        if self.threshold is None:
            return bool(value > 0)
        return bool(value > self.threshold)

    def describe(self) -> Mapping[str, Any]:
        """Return serializable detector metadata."""

        return {"name": self.name, "threshold": self.threshold, **self.metadata}
