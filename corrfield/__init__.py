"""2D 상관/상호상관 계산 패키지"""

from .models import (
    DataField,
    CorrelationMethod,
    ComputationState,
    ComputationStatus,
    ComputationStateError,
    CrossCorrelationResult,
)
from .core import (
    AreaStatistics,
    calculate_normalization,
    get_correlation_score,
    get_weighted_correlation_score,
    get_raw_correlation_score,
    correlate,
    correlate_init,
    correlate_iteration,
    correlate_finalize,
    crosscorrelate,
    crosscorrelate_init,
    crosscorrelate_set_weights,
    crosscorrelate_iteration,
    crosscorrelate_finalize,
    CrossCorrelationJob,
    WindowingType,
    refine_maximum,
    warmup_numba_scoring,
)
from .utils import setup_logger, set_log_level, CorrelationSettings

__version__ = "1.0.0"

__all__ = [
    # Models
    'DataField',
    'CorrelationMethod',
    'ComputationState',
    'ComputationStatus',
    'ComputationStateError',
    'CrossCorrelationResult',

    # Core
    'AreaStatistics',
    'calculate_normalization',
    'get_correlation_score',
    'get_weighted_correlation_score',
    'get_raw_correlation_score',
    'correlate',
    'correlate_init',
    'correlate_iteration',
    'correlate_finalize',
    'crosscorrelate',
    'crosscorrelate_init',
    'crosscorrelate_set_weights',
    'crosscorrelate_iteration',
    'crosscorrelate_finalize',
    'CrossCorrelationJob',
    'WindowingType',
    'refine_maximum',
    'warmup_numba_scoring',

    # Utils
    'setup_logger',
    'set_log_level',
    'CorrelationSettings',
]
