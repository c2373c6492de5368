"""상관 점수 (plain / weighted / raw) 테스트"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from corrfield import DataField
from corrfield.core.scoring import (
    SCORE_INVALID,
    WEIGHTED_OUTSIDE_KERNEL,
    WEIGHTED_OUTSIDE_DATA,
    WEIGHTED_OUTSIDE_KERNEL_AREA,
    WEIGHTED_ZERO_WEIGHTS,
    get_correlation_score,
    get_weighted_correlation_score,
    get_raw_correlation_score,
    is_weighted_sentinel,
)
from corrfield.core.score_numba import warmup_numba_scoring


def make_random_field(xres=16, yres=12, seed=7):
    rng = np.random.default_rng(seed)
    return DataField(rng.normal(size=(yres, xres)))


def test_subwindow_scores_one():
    data = make_random_field()
    kernel = DataField.from_array(data.data[3:8, 4:10])
    score = get_correlation_score(data, kernel, 4, 3, 0, 0, 6, 5)
    assert score == pytest.approx(1.0, abs=1e-12)


def test_inverted_kernel_scores_minus_one():
    data = make_random_field()
    kernel = DataField.from_array(-data.data[2:6, 2:6])
    score = get_correlation_score(data, kernel, 2, 2, 0, 0, 4, 4)
    assert score == pytest.approx(-1.0, abs=1e-12)


def test_outside_geometry_returns_sentinel():
    data = make_random_field()
    kernel = make_random_field(5, 5, seed=3)

    assert get_correlation_score(data, kernel, -1, 0, 0, 0, 5, 5) == SCORE_INVALID
    assert get_correlation_score(data, kernel, 12, 0, 0, 0, 5, 5) == SCORE_INVALID
    assert get_correlation_score(data, kernel, 0, 8, 0, 0, 5, 5) == SCORE_INVALID
    assert get_correlation_score(data, kernel, 0, 0, 1, 0, 5, 5) == SCORE_INVALID
    assert get_correlation_score(data, kernel, 0, 0, 6, 0, 1, 1) == SCORE_INVALID


def test_zero_variance_returns_zero():
    data = make_random_field()
    flat = DataField.new(4, 4, fill=3.0)
    assert get_correlation_score(data, flat, 0, 0, 0, 0, 4, 4) == 0.0

    zeros = DataField.new(8, 8)
    assert get_correlation_score(zeros, zeros, 2, 2, 0, 0, 3, 3) == 0.0


def test_score_range():
    data = make_random_field(20, 20, seed=11)
    kernel = make_random_field(6, 6, seed=12)
    for row in range(0, 15):
        for col in range(0, 15):
            s = get_correlation_score(data, kernel, col, row, 0, 0, 6, 6)
            assert -1.0 <= s <= 1.0


def test_weighted_with_unit_weights_matches_plain():
    data = make_random_field()
    kernel = make_random_field(10, 10, seed=5)
    weights = DataField.new(5, 4, fill=1.0)

    plain = get_correlation_score(data, kernel, 3, 2, 1, 4, 5, 4)
    weighted = get_weighted_correlation_score(data, kernel, weights, 3, 2, 1, 4, 5, 4)
    assert weighted == pytest.approx(plain, abs=1e-12)


def test_weighted_subwindow_scores_one():
    data = make_random_field()
    kernel = DataField.from_array(data.data[1:6, 2:7])
    weights = DataField(np.outer(np.hanning(7)[1:-1], np.hanning(7)[1:-1]))
    score = get_weighted_correlation_score(data, kernel, weights, 2, 1, 0, 0, 5, 5)
    assert score == pytest.approx(1.0, abs=1e-12)


def test_weighted_sentinels_are_distinct():
    data = make_random_field()
    kernel = make_random_field(6, 6, seed=8)
    weights = DataField.new(4, 4, fill=1.0)

    assert get_weighted_correlation_score(
        data, kernel, weights, 0, 0, 7, 0, 4, 4) == WEIGHTED_OUTSIDE_KERNEL
    assert get_weighted_correlation_score(
        data, kernel, weights, 14, 0, 0, 0, 4, 4) == WEIGHTED_OUTSIDE_DATA
    assert get_weighted_correlation_score(
        data, kernel, weights, 0, 0, 3, 0, 4, 4) == WEIGHTED_OUTSIDE_KERNEL_AREA

    zero_weights = DataField.new(4, 4)
    assert get_weighted_correlation_score(
        data, kernel, zero_weights, 0, 0, 0, 0, 4, 4) == WEIGHTED_ZERO_WEIGHTS

    for sentinel in (WEIGHTED_OUTSIDE_KERNEL, WEIGHTED_OUTSIDE_DATA,
                     WEIGHTED_OUTSIDE_KERNEL_AREA, WEIGHTED_ZERO_WEIGHTS):
        assert is_weighted_sentinel(sentinel)
        assert sentinel != SCORE_INVALID
    assert not is_weighted_sentinel(-1.0)


def test_weighted_rejects_mismatched_weights():
    data = make_random_field()
    weights = DataField.new(3, 4, fill=1.0)
    with pytest.raises(ValueError):
        get_weighted_correlation_score(data, data, weights, 0, 0, 0, 0, 4, 4)


def test_raw_score_is_covariance():
    data = make_random_field()
    kernel = make_random_field(5, 5, seed=9)

    window = data.data[2:7, 3:8]
    davg, drms = float(np.mean(window)), float(np.std(window))
    kavg, krms = kernel.get_avg(), kernel.get_rms()

    raw = get_raw_correlation_score(data, kernel, 3, 2, 0, 0, 5, 5, davg, kavg)
    expected = np.mean((window - davg) * (kernel.data - kavg))
    assert raw == pytest.approx(expected, rel=1e-12)

    score = get_correlation_score(data, kernel, 3, 2, 0, 0, 5, 5)
    assert raw / (drms * krms) == pytest.approx(score, abs=1e-12)

    assert get_raw_correlation_score(data, kernel, 13, 2, 0, 0, 5, 5,
                                     davg, kavg) == SCORE_INVALID


def test_warmup_compiles():
    warmup_numba_scoring()
