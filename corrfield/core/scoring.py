"""
상관 점수 (CorrelationScorer)

DataField 단위 공개 API. 실제 루프는 score_numba의 컴파일 함수가 수행.

센티널 규약:
    correlation_score           기하 오류 → -1.0, 분산 0 → 0.0
    weighted_correlation_score  기하 오류/가중치 합 0 → -2.0 ~ -5.0 (원인별),
                                분산 0 → 0.0
    두 경로의 센티널은 서로 다름. 가중 점수 센티널은 < -1 이므로
    유효 점수 [-1, 1]과 구분됨.
"""

from ..models.field import DataField
from .score_numba import (
    SCORE_INVALID,
    SCORE_DEGENERATE,
    WEIGHTED_OUTSIDE_KERNEL,
    WEIGHTED_OUTSIDE_DATA,
    WEIGHTED_OUTSIDE_KERNEL_AREA,
    WEIGHTED_ZERO_WEIGHTS,
    correlation_score as _correlation_score,
    raw_correlation_score as _raw_correlation_score,
    weighted_correlation_score as _weighted_correlation_score,
)

WEIGHTED_SENTINELS = {
    WEIGHTED_OUTSIDE_KERNEL: 'outside_kernel',
    WEIGHTED_OUTSIDE_DATA: 'outside_data',
    WEIGHTED_OUTSIDE_KERNEL_AREA: 'outside_kernel_area',
    WEIGHTED_ZERO_WEIGHTS: 'zero_weights',
}


def get_correlation_score(data_field: DataField, kernel_field: DataField,
                          col: int, row: int,
                          kernel_col: int, kernel_row: int,
                          kernel_width: int, kernel_height: int) -> float:
    """
    한 위치의 정규화 상관 점수

    Args:
        data_field: 데이터 필드
        kernel_field: 커널 필드
        col, row: 데이터 필드 내 윈도우 좌상단
        kernel_col, kernel_row: 커널 필드 내 윈도우 좌상단
        kernel_width, kernel_height: 윈도우 크기

    Returns:
        [-1, 1] 점수 (1.0 = 최대 상관, 기하 오류 -1.0, 분산 0 → 0.0)
    """
    return float(_correlation_score(data_field.data, kernel_field.data,
                                    col, row, kernel_col, kernel_row,
                                    kernel_width, kernel_height))


def get_weighted_correlation_score(data_field: DataField,
                                   kernel_field: DataField,
                                   weight_field: DataField,
                                   col: int, row: int,
                                   kernel_col: int, kernel_row: int,
                                   kernel_width: int, kernel_height: int) -> float:
    """
    가중치로 윈도우 중심 정보를 강조한 상관 점수

    weight_field는 윈도우와 같은 크기여야 함 (아니면 ValueError).
    실패 원인은 WEIGHTED_SENTINELS 참고.
    """
    if weight_field.get_dims() != (kernel_width, kernel_height):
        raise ValueError(f"가중치 크기 불일치: weights={weight_field.get_dims()}, "
                         f"window=({kernel_width}, {kernel_height})")
    return float(_weighted_correlation_score(data_field.data, kernel_field.data,
                                             weight_field.data,
                                             col, row, kernel_col, kernel_row,
                                             kernel_width, kernel_height))


def get_raw_correlation_score(data_field: DataField, kernel_field: DataField,
                              col: int, row: int,
                              kernel_col: int, kernel_row: int,
                              kernel_width: int, kernel_height: int,
                              data_avg: float, kernel_avg: float) -> float:
    """
    평균이 알려진 경우의 비정규화 점수 (공분산)

    점수를 얻으려면 데이터 영역 rms와 커널 rms의 곱으로 나눔.
    """
    return float(_raw_correlation_score(data_field.data, kernel_field.data,
                                        col, row, kernel_col, kernel_row,
                                        kernel_width, kernel_height,
                                        data_avg, kernel_avg))


def is_weighted_sentinel(score: float) -> bool:
    return score < -1.0


__all__ = [
    'SCORE_INVALID',
    'SCORE_DEGENERATE',
    'WEIGHTED_OUTSIDE_KERNEL',
    'WEIGHTED_OUTSIDE_DATA',
    'WEIGHTED_OUTSIDE_KERNEL_AREA',
    'WEIGHTED_ZERO_WEIGHTS',
    'WEIGHTED_SENTINELS',
    'get_correlation_score',
    'get_weighted_correlation_score',
    'get_raw_correlation_score',
    'is_weighted_sentinel',
]
