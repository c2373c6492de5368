"""FFT / POC 상관 테스트"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from corrfield import DataField, CorrelationMethod, correlate, correlate_init
from corrfield.core.frequency import (
    correlate_fft,
    cross_power_spectrum,
    humanize,
    pad_kernel,
    FrequencyCorrelationJob,
)


def make_random_field(xres=32, yres=24, seed=5):
    rng = np.random.default_rng(seed)
    return DataField(rng.normal(size=(yres, xres)))


def argmax2d(values):
    return np.unravel_index(np.argmax(values), values.shape)


def test_self_correlation_peaks_at_center():
    data = make_random_field()
    for method in (CorrelationMethod.FFT, CorrelationMethod.POC):
        score = correlate(data, data, method=method)
        assert argmax2d(score.data) == (24 // 2, 32 // 2)


def test_poc_self_correlation_is_delta():
    data = make_random_field(16, 16, seed=8)
    score = correlate(data, data, method='poc')
    assert score.data[8, 8] == pytest.approx(1.0, abs=1e-9)
    others = score.data.copy()
    others[8, 8] = 0.0
    assert np.max(np.abs(others)) < 1e-9


def test_bright_square_located_by_box_kernel():
    data = DataField.new(16, 16)
    data.data[5:9, 7:11] = 1.0
    kernel = DataField.new(4, 4, fill=1.0)

    score = correlate(data, kernel, method=CorrelationMethod.FFT)
    row, col = argmax2d(score.data)

    # 커널 좌상단 (row 5, col 7) → 출력 (5 + 4//2, 7 + 4//2)
    assert (row, col) == (7, 9)
    assert abs(row - 6.5) <= 0.5 and abs(col - 8.5) <= 0.5
    assert score.data[row, col] == pytest.approx(16.0, abs=1e-9)


def test_poc_recovers_circular_shift():
    data = make_random_field(seed=12)
    shifted = DataField(np.roll(data.data, shift=(3, -2), axis=(0, 1)))
    score = correlate_fft(shifted, data, phase_only=True)
    assert argmax2d(score.data) == (12 + 3, 16 - 2)


def test_cross_power_spectrum_is_conjugate_product():
    rng = np.random.default_rng(3)
    d = rng.normal(size=(6, 6)) + 1j * rng.normal(size=(6, 6))
    k = rng.normal(size=(6, 6)) + 1j * rng.normal(size=(6, 6))

    np.testing.assert_allclose(cross_power_spectrum(d, k), d * np.conj(k))

    poc = cross_power_spectrum(d, k, phase_only=True)
    np.testing.assert_allclose(np.abs(poc), 1.0)


def test_poc_leaves_zero_bins_unscaled():
    zeros = np.zeros((4, 4), dtype=np.complex128)
    poc = cross_power_spectrum(zeros, zeros, phase_only=True)
    assert np.all(poc == 0.0)

    data = make_random_field(8, 8)
    score = correlate(data, DataField.new(3, 3), method='poc')
    assert np.all(np.isfinite(score.data))


def test_pad_kernel_centers_kernel():
    kernel = DataField.new(3, 2, fill=1.0)
    buffer = pad_kernel(kernel, 8, 6)
    rows, cols = np.nonzero(buffer)
    assert rows.min() == 6 // 2 - 2 // 2
    assert cols.min() == 8 // 2 - 3 // 2
    assert buffer.sum() == 6.0


def test_humanize_moves_zero_lag_to_center():
    values = np.zeros((5, 6))
    values[0, 0] = 1.0
    shifted = humanize(values)
    assert shifted[5 // 2, 6 // 2] == 1.0


def test_frequency_job_single_step():
    data = make_random_field()
    kernel = make_random_field(8, 8, seed=6)
    expected = correlate(data, kernel, method='fft')

    score = data.new_alike()
    job = correlate_init(data, kernel, score, method='fft')
    assert isinstance(job, FrequencyCorrelationJob)
    job.iterate()
    assert job.fraction == 0.0
    status = job.iterate()
    assert status.is_finished
    assert status.fraction == 1.0
    np.testing.assert_array_equal(score.data, expected.data)
    job.finalize()


def test_fft_rejects_bad_geometry():
    data = make_random_field(8, 8)
    with pytest.raises(ValueError):
        correlate(data, make_random_field(9, 4), method='fft')
    with pytest.raises(ValueError):
        correlate_fft(data, data, score=DataField.new(4, 4))
