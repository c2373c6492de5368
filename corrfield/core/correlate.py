"""
커널 상관 방식 선택 (SPATIAL / FFT / POC)

단발 계산 correlate()와 반복 계산 correlate_init/iteration/finalize 제공.
"""

from typing import Optional, Union

from ..models.field import DataField
from ..models.state import CorrelationMethod, ComputationStatus
from .job import ComputationJob
from .spatial import correlate_spatial, SpatialCorrelationJob
from .frequency import correlate_fft, FrequencyCorrelationJob


def _as_method(method: Union[CorrelationMethod, str]) -> CorrelationMethod:
    if isinstance(method, CorrelationMethod):
        return method
    try:
        return CorrelationMethod(str(method).lower())
    except ValueError:
        raise ValueError(f"알 수 없는 상관 방식: {method}") from None


def correlate(data_field: DataField, kernel_field: DataField,
              score: Optional[DataField] = None,
              method: Union[CorrelationMethod, str] = CorrelationMethod.SPATIAL
              ) -> DataField:
    """
    데이터 필드 전체 위치에 대한 커널 상관 점수

    Args:
        data_field: 데이터 필드
        kernel_field: 상관 커널
        score: 출력 필드 (None이면 새로 생성)
        method: SPATIAL (정규화 점수, 범위 밖 -1) / FFT / POC

    Returns:
        점수 필드
    """
    method = _as_method(method)
    if method is CorrelationMethod.SPATIAL:
        return correlate_spatial(data_field, kernel_field, score)
    return correlate_fft(data_field, kernel_field, score,
                         phase_only=method is CorrelationMethod.POC)


def correlate_init(data_field: DataField, kernel_field: DataField,
                   score: DataField,
                   method: Union[CorrelationMethod, str] = CorrelationMethod.SPATIAL
                   ) -> ComputationJob:
    """상관 반복 계산 생성 (상태 INIT)"""
    method = _as_method(method)
    if method is CorrelationMethod.SPATIAL:
        return SpatialCorrelationJob(data_field, kernel_field, score)
    return FrequencyCorrelationJob(data_field, kernel_field, score,
                                   phase_only=method is CorrelationMethod.POC)


def correlate_iteration(job: ComputationJob) -> ComputationStatus:
    return job.iterate()


def correlate_finalize(job: ComputationJob):
    job.finalize()
