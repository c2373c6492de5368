"""
윈도우 통계 (AreaStatistics)

적분 이미지(prefix sum) 기반 박스 합으로 모든 픽셀의 윈도우 평균/RMS를
O(n)에 계산. 커널 상관에서 데이터 쪽 정규화 값을 픽셀마다 다시 구하지
않도록 미리 캐시해 둠.

윈도우 위치 규약:
    픽셀 (row, col)의 윈도우 = 행 [row - (height-1)//2, row + height//2],
                               열 [col - (width-1)//2,  col + width//2]
    → 커널 좌상단이 (col - (kxres-1)//2, row - (kyres-1)//2)에 놓인 영역과 동일.
    경계 밖으로 나가는 부분은 잘라내고 남은 픽셀 수로 평균 (gather 방식).
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..models.field import DataField


def _window_bounds(n: int, size: int) -> Tuple[np.ndarray, np.ndarray]:
    """각 인덱스의 [start, stop) 윈도우 경계 (필드 범위로 클립)"""
    idx = np.arange(n)
    start = np.clip(idx - (size - 1) // 2, 0, n)
    stop = np.clip(idx - (size - 1) // 2 + size, 0, n)
    return start, stop


def area_gather(values: np.ndarray, width: int, height: int,
                average: bool = True) -> np.ndarray:
    """
    모든 픽셀에 대해 width×height 윈도우 합(또는 평균)

    Args:
        values: 2D 배열 (yres, xres)
        width, height: 윈도우 크기 (>= 1)
        average: True면 윈도우 내 유효 픽셀 수로 나눈 평균

    Returns:
        values와 같은 shape의 float64 배열
    """
    if width < 1 or height < 1:
        raise ValueError(f"윈도우 크기는 1 이상이어야 합니다: {width}x{height}")

    values = np.asarray(values, dtype=np.float64)
    yres, xres = values.shape

    # 0 패딩 적분 이미지: I[r, c] = sum(values[:r, :c])
    integral = np.zeros((yres + 1, xres + 1), dtype=np.float64)
    integral[1:, 1:] = np.cumsum(np.cumsum(values, axis=0), axis=1)

    r1, r2 = _window_bounds(yres, height)
    c1, c2 = _window_bounds(xres, width)

    sums = (
        integral[np.ix_(r2, c2)]
        - integral[np.ix_(r1, c2)]
        - integral[np.ix_(r2, c1)]
        + integral[np.ix_(r1, c1)]
    )

    if not average:
        return sums

    counts = (r2 - r1)[:, None] * (c2 - c1)[None, :]
    return sums / counts


def calculate_normalization(field: DataField,
                            width: int,
                            height: int) -> Tuple[DataField, DataField]:
    """
    픽셀별 윈도우 평균/RMS 필드 생성

    rms = sqrt(E[x²] - E[x]²). one-pass 분산은 큰 오프셋에서 상쇄 오차가
    생길 수 있으므로 음수 분산은 0으로 클램프.
    """
    avg = area_gather(field.data, width, height)
    sq_avg = area_gather(field.data * field.data, width, height)
    var = np.maximum(sq_avg - avg * avg, 0.0)

    avg_field = DataField(avg, field.xreal, field.yreal)
    rms_field = DataField(np.sqrt(var), field.xreal, field.yreal)
    return avg_field, rms_field


@dataclass
class AreaStatistics:
    """윈도우 평균/RMS 캐시"""
    avg: DataField
    rms: DataField
    width: int
    height: int

    @classmethod
    def compute(cls, field: DataField, width: int, height: int) -> 'AreaStatistics':
        avg, rms = calculate_normalization(field, width, height)
        return cls(avg=avg, rms=rms, width=width, height=height)

    def at(self, col: int, row: int) -> Tuple[float, float]:
        """(avg, rms) at pixel"""
        return float(self.avg.data[row, col]), float(self.rms.data[row, col])
