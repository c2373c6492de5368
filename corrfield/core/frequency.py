"""
주파수 영역 커널 상관 (FrequencyCorrelationEngine)

1. 커널을 데이터 크기 버퍼 중앙에 zero-pad
2. 데이터/커널 2D FFT
3. 교차 전력 스펙트럼 (실수부/허수부 분리 계산, 커널 켤레 곱)
       Re = Ra·Kre + Ia·Kim
       Im = -Ra·Kim + Ia·Kre
4. POC(Phase-Only Correlation)이면 각 bin을 크기로 나눔 (크기 ≈ 0인 bin은 그대로)
5. 역 FFT → humanize (zero lag가 필드 기하 중심에 오도록 순환 이동)

비용은 커널 면적과 무관한 O(n log n): 커널이 데이터 크기에 가까울 때 유리.
점수는 정규화되지 않은 상관값 (공간 경로의 [-1, 1] 점수와 스케일이 다름).
"""

import logging
import time
from typing import Optional

import numpy as np
from scipy.fft import fft2, ifft2, fftshift

from ..models.field import DataField
from .job import ComputationJob

_logger = logging.getLogger(__name__)

# 최대 크기 대비 이 비율 이하인 bin은 POC 정규화에서 제외
_POC_RELATIVE_EPS = 1e-12


def humanize(values: np.ndarray) -> np.ndarray:
    """zero lag (0, 0)을 (yres//2, xres//2)로 순환 이동"""
    return fftshift(values)


def pad_kernel(kernel_field: DataField, xres: int, yres: int) -> np.ndarray:
    """커널을 (yres, xres) 버퍼 중앙에 배치"""
    kxres, kyres = kernel_field.get_dims()
    buffer = np.zeros((yres, xres), dtype=np.float64)
    row0 = yres // 2 - kyres // 2
    col0 = xres // 2 - kxres // 2
    buffer[row0:row0 + kyres, col0:col0 + kxres] = kernel_field.data
    return buffer


def cross_power_spectrum(data_spectrum: np.ndarray,
                         kernel_spectrum: np.ndarray,
                         phase_only: bool = False) -> np.ndarray:
    """
    교차 전력 스펙트럼 (data × conj(kernel))

    phase_only=True면 단위 크기로 정규화. 크기가 거의 0인 bin은 정규화하지
    않음 (0 나눗셈 방지).
    """
    ra, ia = data_spectrum.real, data_spectrum.imag
    kre, kim = kernel_spectrum.real, kernel_spectrum.imag

    re = ra * kre + ia * kim
    im = -ra * kim + ia * kre

    if phase_only:
        norm = np.hypot(re, im)
        scale = norm > _POC_RELATIVE_EPS * norm.max()
        safe = np.where(scale, norm, 1.0)
        re = np.where(scale, re / safe, re)
        im = np.where(scale, im / safe, im)

    return re + 1j * im


def correlate_fft(data_field: DataField, kernel_field: DataField,
                  score: Optional[DataField] = None,
                  phase_only: bool = False,
                  n_workers: int = -1) -> DataField:
    """
    FFT 기반 상관 맵 (단발 계산)

    Args:
        data_field: 데이터 필드
        kernel_field: 커널 (데이터 이하 크기)
        score: 출력 필드 (None이면 새로 생성)
        phase_only: True면 POC
        n_workers: scipy.fft 워커 수 (-1 = 전체 코어)

    Returns:
        humanize된 상관 맵. 커널 중심이 데이터 (row, col)에 놓인 경우의 상관이
        출력 (row, col)에 위치 (커널 좌상단 = (row - kyres//2, col - kxres//2)).
    """
    start_time = time.time()
    xres, yres = data_field.get_dims()
    kxres, kyres = kernel_field.get_dims()
    if kxres > xres or kyres > yres:
        raise ValueError(f"커널이 데이터보다 큽니다: kernel={kxres}x{kyres}, "
                         f"data={xres}x{yres}")
    if score is None:
        score = data_field.new_alike(nullme=False)
    elif not score.same_dims(data_field):
        raise ValueError(f"점수 필드 크기 불일치: score={score.get_dims()}, "
                         f"data={data_field.get_dims()}")

    kernel_in = pad_kernel(kernel_field, xres, yres)

    data_spectrum = fft2(data_field.data, workers=n_workers)
    kernel_spectrum = fft2(kernel_in, workers=n_workers)
    cross = cross_power_spectrum(data_spectrum, kernel_spectrum, phase_only)
    del data_spectrum, kernel_spectrum, kernel_in

    result = ifft2(cross, workers=n_workers).real
    score.data[...] = humanize(result)

    _logger.info(f"{'POC' if phase_only else 'FFT'} 상관 완료: "
                 f"data={xres}x{yres}, kernel={kxres}x{kyres}, "
                 f"{time.time() - start_time:.3f}s")
    return score


class FrequencyCorrelationJob(ComputationJob):
    """
    FFT/POC 상관 반복 계산

    FFT는 분할할 수 없으므로 전체 맵 계산이 한 단위 작업:
    INIT 이후 iterate() 한 번으로 FINISHED.
    """

    def __init__(self, data_field: DataField, kernel_field: DataField,
                 score: DataField, phase_only: bool = False):
        super().__init__()
        if score is None:
            raise ValueError("점수 필드가 필요합니다")
        if (kernel_field.xres > data_field.xres
                or kernel_field.yres > data_field.yres):
            raise ValueError(f"커널이 데이터보다 큽니다: "
                             f"kernel={kernel_field.get_dims()}, "
                             f"data={data_field.get_dims()}")
        if not score.same_dims(data_field):
            raise ValueError(f"점수 필드 크기 불일치: score={score.get_dims()}, "
                             f"data={data_field.get_dims()}")
        self.data_field = data_field
        self.kernel_field = kernel_field
        self.score = score
        self.phase_only = phase_only

    def _start(self) -> int:
        return 1

    def _step(self):
        correlate_fft(self.data_field, self.kernel_field, self.score,
                      phase_only=self.phase_only)

    def _release(self):
        self.data_field = None
        self.kernel_field = None
        self.score = None
