from __future__ import annotations

import numpy as np
import pytest
from scipy import stats

from meanshift.models import SampleSummary
from meanshift.stats import Accumulator, find_split, welch_confidence, welch_test


def test_accumulator_segments_match_numpy() -> None:
    window = [3.0, 1.5, 4.0, 1.0, 5.5, 9.0, 2.5, 6.0]
    acc = Accumulator(window)

    before = acc.prefix(3)
    after = acc.suffix(3)

    assert before.count == 3 and after.count == 5
    assert before.mean == pytest.approx(np.mean(window[:3]))
    assert after.mean == pytest.approx(np.mean(window[3:]))
    assert before.variance == pytest.approx(np.var(window[:3], ddof=1))
    assert after.variance == pytest.approx(np.var(window[3:], ddof=1))
    assert acc.prefix(len(window)).mean == pytest.approx(np.mean(window))


def test_accumulator_single_value_has_no_variance() -> None:
    acc = Accumulator([2.0, 7.0, 7.0])
    assert acc.prefix(1).variance is None
    assert acc.prefix(1).mean == 2.0
    assert acc.suffix(2).variance is None


def test_accumulator_constant_window_accumulates_zeros() -> None:
    acc = Accumulator([0.1] * 25)
    assert acc.total == 0.0
    assert acc.prefix(10).mean == pytest.approx(0.1)
    assert acc.prefix(10).variance == 0.0


def test_accumulator_rejects_out_of_range_segments() -> None:
    acc = Accumulator([1.0, 2.0])
    with pytest.raises(IndexError):
        acc.prefix(0)
    with pytest.raises(IndexError):
        acc.suffix(2)


def test_find_split_locates_step() -> None:
    split = find_split(Accumulator([1.0] * 11 + [2.0] * 12), min_sample_size=5)
    assert split is not None
    assert split.index == 11
    assert split.before.mean == pytest.approx(1.0)
    assert split.after.mean == pytest.approx(2.0)
    assert split.scatter > 0


def test_find_split_keeps_earliest_maximum() -> None:
    # splits at 2 and 4 have identical scatter
    split = find_split(Accumulator([0.0, 0.0, 1.0, 1.0, 0.0, 0.0]), min_sample_size=1)
    assert split is not None
    assert split.index == 2


def test_find_split_constant_window_has_no_split() -> None:
    assert find_split(Accumulator([4.2] * 40), min_sample_size=5) is None


def test_find_split_empty_range() -> None:
    assert find_split(Accumulator([1.0] * 5 + [9.0] * 4), min_sample_size=5) is None


def test_welch_matches_scipy_on_raw_samples() -> None:
    rng = np.random.default_rng(7)
    a = rng.normal(0.0, 1.0, size=40)
    b = rng.normal(0.6, 2.0, size=25)
    acc = Accumulator(np.concatenate([a, b]))

    result = welch_test(acc.prefix(40), acc.suffix(40))
    expected = stats.ttest_ind(a, b, equal_var=False)

    assert result is not None
    assert result.statistic == pytest.approx(expected.statistic)
    assert result.p_value == pytest.approx(expected.pvalue)
    assert result.confidence == pytest.approx(1.0 - expected.pvalue)


def test_welch_untestable_segments_have_zero_confidence() -> None:
    single = SampleSummary(mean=5.0, count=1)
    other = SampleSummary(mean=1.0, variance=0.5, count=10)
    assert welch_test(single, other) is None
    assert welch_confidence(single, other) == 0.0


def test_welch_flat_segments() -> None:
    flat_a = SampleSummary(mean=1.0, variance=0.0, count=10)
    flat_b = SampleSummary(mean=2.0, variance=0.0, count=10)
    assert welch_confidence(flat_a, flat_b) == 1.0
    assert welch_confidence(flat_a, flat_a) == 0.0


def test_confidence_grows_with_mean_difference() -> None:
    before = SampleSummary(mean=0.0, variance=1.0, count=20)
    confidences = [
        welch_confidence(before, SampleSummary(mean=delta, variance=1.5, count=15))
        for delta in (0.0, 0.1, 0.3, 0.6, 1.0, 2.0)
    ]
    assert confidences == sorted(confidences)
    assert confidences[0] == pytest.approx(0.0)
    assert confidences[-1] > 0.99


def test_normalized_summaries_share_split_statistics() -> None:
    acc = Accumulator([2.0, 4.0, 6.0, 10.0])
    assert acc.scale == 8.0
    plain, scaled = acc.prefix(2), acc.prefix(2, normalized=True)
    assert plain.mean == pytest.approx(3.0)
    assert plain.variance == pytest.approx(2.0)
    assert scaled.mean == pytest.approx(0.125)
    assert scaled.variance == pytest.approx(2.0 / 64.0)
    assert acc.suffix(2, normalized=True).mean == pytest.approx(0.375)


def test_welch_handles_underflowing_variance_terms() -> None:
    before = SampleSummary(mean=0.0, variance=1e-320, count=40)
    after = SampleSummary(mean=5e-160, variance=1e-320, count=40)
    assert welch_confidence(before, after) == 1.0
    assert welch_confidence(before, before) == 0.0
