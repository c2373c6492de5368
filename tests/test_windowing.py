"""아포다이제이션 윈도우 테스트"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from corrfield.core.windowing import WindowingType, as_windowing, window_1d, window_2d


def test_rectangular_windows_are_ones():
    for wt in (WindowingType.NONE, WindowingType.RECT, None):
        assert np.all(window_1d(7, wt) == 1.0)


def test_hann_is_symmetric_with_unit_peak():
    w = window_1d(9, WindowingType.HANN)
    assert w[0] == pytest.approx(0.0, abs=1e-12)
    assert w[4] == pytest.approx(1.0)
    np.testing.assert_allclose(w, w[::-1])


@pytest.mark.parametrize("wt", list(WindowingType))
def test_all_windows_have_positive_sum(wt):
    w = window_2d(9, 7, wt)
    assert w.shape == (7, 9)
    assert np.sum(w) > 0.0


def test_window_2d_is_outer_product():
    w = window_2d(5, 3, 'hamming')
    np.testing.assert_allclose(w, np.outer(window_1d(3, 'hamming'),
                                            window_1d(5, 'hamming')))


def test_names_resolve():
    assert as_windowing('hann') is WindowingType.HANN
    assert as_windowing('KAISER25') is WindowingType.KAISER25
    assert as_windowing('flattop') is WindowingType.FLAT_TOP
    with pytest.raises(ValueError):
        as_windowing('triangle-ish')
    with pytest.raises(ValueError):
        window_1d(0, 'hann')
