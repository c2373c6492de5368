"""
공간 영역 커널 상관 (SpatialCorrelationEngine)

출력 점수 맵의 (row, col)은 커널 중심이 그 위치에 놓였을 때의 점수.
정확히는 출력 ((kyres-1)/2, (kxres-1)/2)가 커널 좌상단과 데이터 좌상단이
겹치는 위치에 해당. 커널이 데이터 안에 완전히 들어가지 않는 위치는 -1.

데이터 쪽 윈도우 평균/RMS는 AreaStatistics로 한 번에 계산하고,
커널 평균/RMS는 전체 커널에서 한 번 계산.
"""

import logging
import time
from typing import Optional

from ..models.field import DataField
from .job import ComputationJob
from .statistics import calculate_normalization
from .score_numba import SCORE_INVALID, correlation_map, spatial_pixel_score

_logger = logging.getLogger(__name__)


def _check_fields(data_field: DataField, kernel_field: DataField,
                  score: Optional[DataField]):
    kxres, kyres = kernel_field.get_dims()
    xres, yres = data_field.get_dims()
    if kxres > xres or kyres > yres:
        raise ValueError(f"커널이 데이터보다 큽니다: kernel={kxres}x{kyres}, "
                         f"data={xres}x{yres}")
    if score is not None and not score.same_dims(data_field):
        raise ValueError(f"점수 필드 크기 불일치: score={score.get_dims()}, "
                         f"data={data_field.get_dims()}")


def _kernel_stats(kernel_field: DataField):
    kavg = kernel_field.get_avg()
    krms = kernel_field.get_rms()
    if krms == 0.0:
        _logger.warning("커널 분산 0: 모든 유효 점수가 0.0")
    return kavg, krms


def correlate_spatial(data_field: DataField, kernel_field: DataField,
                      score: Optional[DataField] = None) -> DataField:
    """
    모든 위치의 정규화 상관 점수 (단발 계산)

    Args:
        data_field: 데이터 필드
        kernel_field: 커널 (데이터 이하 크기)
        score: 출력 필드 (None이면 새로 생성)

    Returns:
        점수 필드
    """
    start_time = time.time()
    _check_fields(data_field, kernel_field, score)
    if score is None:
        score = data_field.new_alike(nullme=False)

    kxres, kyres = kernel_field.get_dims()
    score.fill(SCORE_INVALID)

    kavg, krms = _kernel_stats(kernel_field)
    avg, rms = calculate_normalization(data_field, kxres, kyres)

    correlation_map(data_field.data, kernel_field.data, avg.data, rms.data,
                    kavg, krms, score.data)

    _logger.info(f"공간 상관 완료: data={data_field.xres}x{data_field.yres}, "
                 f"kernel={kxres}x{kyres}, {time.time() - start_time:.3f}s")
    return score


class SpatialCorrelationJob(ComputationJob):
    """
    공간 상관 반복 계산

    iterate() 한 번에 출력 한 픽셀을 래스터 순서로 처리.
    완료 시 correlate_spatial()과 비트 단위로 같은 결과.
    """

    def __init__(self, data_field: DataField, kernel_field: DataField,
                 score: DataField):
        super().__init__()
        if score is None:
            raise ValueError("점수 필드가 필요합니다")
        _check_fields(data_field, kernel_field, score)

        self.data_field = data_field
        self.kernel_field = kernel_field
        self.score = score
        self.avg: Optional[DataField] = None
        self.rms: Optional[DataField] = None
        self.kavg = 0.0
        self.krms = 0.0

        kxres, kyres = kernel_field.get_dims()
        self.xoff = (kxres - 1) // 2
        self.yoff = (kyres - 1) // 2
        self.row = self.yoff
        self.col = self.xoff

    def _start(self) -> int:
        xres, yres = self.data_field.get_dims()
        kxres, kyres = self.kernel_field.get_dims()

        self.score.fill(SCORE_INVALID)
        self.kavg, self.krms = _kernel_stats(self.kernel_field)
        self.avg, self.rms = calculate_normalization(self.data_field, kxres, kyres)
        self.row = self.yoff
        self.col = self.xoff
        return (xres - kxres + 1) * (yres - kyres + 1)

    def _step(self):
        xres = self.data_field.xres
        kxres = self.kernel_field.xres

        self.score.data[self.row, self.col] = spatial_pixel_score(
            self.data_field.data, self.kernel_field.data,
            self.avg.data, self.rms.data, self.kavg, self.krms,
            self.row, self.col, self.xoff, self.yoff)

        self.col += 1
        if self.col + kxres - self.xoff > xres:
            self.col = self.xoff
            self.row += 1

    def _release(self):
        self.avg = None
        self.rms = None
        self.data_field = None
        self.kernel_field = None
        self.score = None
