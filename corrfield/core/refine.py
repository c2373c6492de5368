"""
서브픽셀 피크 보정

정수 최대점 주변 3×3 점수에서 x, y 축 각각 3점 포물선 꼭짓점을 구함.
    pos = argmax + (z₋ − z₊) / (2·(z₋ + z₊ − 2·z₀))

축 분리 근사: 2D 2차 곡면 피팅이 아니므로 대각 방향으로 기운 피크는
오차가 생길 수 있음 (알려진 한계, 의도적으로 유지).
"""

from typing import NamedTuple, Optional

import numpy as np

# 포물선 분모가 이보다 작으면 정수 위치 사용
_DENOM_EPS = 1e-12

# 꼭짓점이 이 범위를 벗어나면 이웃 구간 밖 외삽으로 보고 버림 (픽셀)
_MAX_OFFSET = 1.0


class SubpixelPeak(NamedTuple):
    """정수 최대점 기준 서브픽셀 오프셋 (보정 실패 축은 0.0)"""
    x: float
    y: float
    refined_x: bool
    refined_y: bool


def parabolic_offset(z_minus: float, z_center: float, z_plus: float) -> Optional[float]:
    """
    3점 포물선 꼭짓점 오프셋

    Returns:
        오프셋. 다음 경우 None (정수 위치 사용):
            - 이웃이 센티널(< -1)
            - 위로 볼록하지 않음 (분모 >= 0 또는 ≈ 0): 꼭짓점이 최소점이거나 무한원
            - |오프셋| > 1: 3점 구간 밖 외삽
    """
    if z_minus < -1.0 or z_plus < -1.0:
        return None
    denom = z_minus + z_plus - 2.0 * z_center
    if denom > -_DENOM_EPS:
        return None
    offset = (z_minus - z_plus) / (2.0 * denom)
    if not np.isfinite(offset) or abs(offset) > _MAX_OFFSET:
        return None
    return float(offset)


def refine_maximum(scores: np.ndarray) -> SubpixelPeak:
    """
    3×3 점수 배열 (scores[row, col], 중심 = 정수 최대점)에서 서브픽셀 오프셋

    대각 원소는 사용하지 않음 (축 분리 근사).
    """
    scores = np.asarray(scores, dtype=np.float64)
    if scores.shape != (3, 3):
        raise ValueError(f"3x3 점수 배열이 필요합니다: shape={scores.shape}")

    z0 = scores[1, 1]
    dx = parabolic_offset(scores[1, 0], z0, scores[1, 2])
    dy = parabolic_offset(scores[0, 1], z0, scores[2, 1])

    return SubpixelPeak(
        x=dx if dx is not None else 0.0,
        y=dy if dy is not None else 0.0,
        refined_x=dx is not None,
        refined_y=dy is not None,
    )
