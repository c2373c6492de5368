"""필드 및 계산 상태 데이터 모델"""

from .field import DataField
from .state import (
    CorrelationMethod,
    ComputationState,
    ComputationStatus,
    ComputationStateError,
)
from .results import CrossCorrelationResult

__all__ = [
    'DataField',
    'CorrelationMethod',
    'ComputationState',
    'ComputationStatus',
    'ComputationStateError',
    'CrossCorrelationResult',
]
