"""Welch's unequal-variance t-test on two segment summaries."""

from __future__ import annotations

import math
from dataclasses import dataclass

from scipy import stats

from ..models import SampleSummary


@dataclass(frozen=True)
class WelchResult:
    statistic: float
    dof: float
    p_value: float

    @property
    def confidence(self) -> float:
        """Probability that the two means differ (``1 - p``)."""

        return min(max(1.0 - self.p_value, 0.0), 1.0)


def welch_test(before: SampleSummary, after: SampleSummary) -> WelchResult | None:
    """Run Welch's t-test; ``None`` when either segment has fewer than two values."""

    if before.count < 2 or after.count < 2:
        return None
    if before.variance is None or after.variance is None:
        return None

    n1, n2 = float(before.count), float(after.count)
    v1 = before.variance / n1
    v2 = after.variance / n2
    se2 = v1 + v2
    delta = before.mean - after.mean

    denom = v1 * v1 / (n1 - 1.0) + v2 * v2 / (n2 - 1.0)
    if se2 == 0.0 or denom == 0.0:
        # both segments are flat at this precision: any difference is a perfect separation
        dof = n1 + n2 - 2.0
        if delta == 0.0:
            return WelchResult(statistic=0.0, dof=dof, p_value=1.0)
        return WelchResult(statistic=math.copysign(math.inf, delta), dof=dof, p_value=0.0)

    statistic = delta / math.sqrt(se2)
    dof = se2 * se2 / denom
    p_value = float(2.0 * stats.t.sf(abs(statistic), dof))
    return WelchResult(statistic=statistic, dof=dof, p_value=min(max(p_value, 0.0), 1.0))


def welch_confidence(before: SampleSummary, after: SampleSummary) -> float:
    """Confidence in ``[0, 1]`` that the segment means differ; 0 when untestable."""

    result = welch_test(before, after)
    return result.confidence if result is not None else 0.0
