"""
계산 상태 모델

반복 계산(iterator) 프로토콜: INIT → ITERATE → FINISHED
"""

from dataclasses import dataclass
from enum import Enum


class CorrelationMethod(Enum):
    """상관 계산 방식"""
    SPATIAL = 'spatial'
    FFT = 'fft'
    POC = 'poc'          # Phase-Only Correlation


class ComputationState(Enum):
    INIT = 'init'
    ITERATE = 'iterate'
    FINISHED = 'finished'


@dataclass(frozen=True)
class ComputationStatus:
    """iterate() 호출 후 조회 가능한 진행 상태 (읽기 전용)"""
    state: ComputationState
    fraction: float

    @property
    def is_finished(self) -> bool:
        return self.state is ComputationState.FINISHED


class ComputationStateError(RuntimeError):
    """반복 계산 프로토콜 위반 (finalize 후 iterate, 이중 finalize 등)"""
