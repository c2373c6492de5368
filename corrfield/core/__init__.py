"""상관/상호상관 계산 핵심 모듈"""

from .statistics import area_gather, calculate_normalization, AreaStatistics
from .scoring import (
    SCORE_INVALID,
    SCORE_DEGENERATE,
    WEIGHTED_OUTSIDE_KERNEL,
    WEIGHTED_OUTSIDE_DATA,
    WEIGHTED_OUTSIDE_KERNEL_AREA,
    WEIGHTED_ZERO_WEIGHTS,
    WEIGHTED_SENTINELS,
    get_correlation_score,
    get_weighted_correlation_score,
    get_raw_correlation_score,
    is_weighted_sentinel,
)
from .score_numba import warmup_numba_scoring
from .job import ComputationJob
from .spatial import correlate_spatial, SpatialCorrelationJob
from .frequency import correlate_fft, humanize, FrequencyCorrelationJob
from .correlate import (
    correlate,
    correlate_init,
    correlate_iteration,
    correlate_finalize,
)
from .refine import refine_maximum, parabolic_offset, SubpixelPeak
from .windowing import WindowingType, window_1d, window_2d
from .crosscorrelation import (
    CrossCorrelationJob,
    crosscorrelate,
    crosscorrelate_init,
    crosscorrelate_set_weights,
    crosscorrelate_iteration,
    crosscorrelate_finalize,
    ZERO_SHIFT_TIE_BREAK,
)

__all__ = [
    # Statistics
    'area_gather',
    'calculate_normalization',
    'AreaStatistics',

    # Scoring
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
    'warmup_numba_scoring',

    # Correlation
    'ComputationJob',
    'correlate',
    'correlate_init',
    'correlate_iteration',
    'correlate_finalize',
    'correlate_spatial',
    'correlate_fft',
    'humanize',
    'SpatialCorrelationJob',
    'FrequencyCorrelationJob',

    # Cross-correlation
    'CrossCorrelationJob',
    'crosscorrelate',
    'crosscorrelate_init',
    'crosscorrelate_set_weights',
    'crosscorrelate_iteration',
    'crosscorrelate_finalize',
    'ZERO_SHIFT_TIE_BREAK',
    'refine_maximum',
    'parabolic_offset',
    'SubpixelPeak',
    'WindowingType',
    'window_1d',
    'window_2d',
]
