"""
상호상관 변위 추정 (CrossCorrelationEngine)

같은 표면을 거의 같은 조건에서 측정한 두 필드 사이의 점별 변위 벡터 필드.
특별한 특징점 없이, field1의 각 점 주변 윈도우를 field2의 한정된 탐색
영역에서 가중 상관 점수로 찾음.

처리 순서 (격자점 하나 = iterate() 한 번):
    1. 탐색 영역 (축마다 ±size//2 오프셋, 짝수 크기는 size + 1개) 후보 점수 계산
       - 무변위 후보에 1.0001 배율 (평탄/모호한 데이터에서 0 변위 우선)
       - 필드 밖 후보는 건너뜀
    2. 정수 최대점 주변 3×3 점수 → 축 분리 포물선 서브픽셀 보정
    3. 픽셀 변위 × (물리 크기 / 픽셀 수) → x_dist, y_dist

유효 격자점: 비교 윈도우가 field1 안에 완전히 들어가는 점
    col ∈ [ww//2, xres - ww + ww//2],  row ∈ [wh//2, yres - wh + wh//2]
    그 밖의 점: 변위 0, 점수 -1 (SCORE_INVALID)
"""

import logging
import time
from typing import Optional, Union

import numpy as np

from ..models.field import DataField
from ..models.results import CrossCorrelationResult
from ..models.state import ComputationState, ComputationStateError, ComputationStatus
from .job import ComputationJob
from .refine import refine_maximum
from .score_numba import SCORE_INVALID, search_best_offset, neighbour_scores
from .windowing import WindowingType, as_windowing, window_2d

_logger = logging.getLogger(__name__)

# 무변위 후보 점수 배율
ZERO_SHIFT_TIE_BREAK = 1.0001


class CrossCorrelationJob(ComputationJob):
    """
    상호상관 반복 계산

    Args:
        data_field1, data_field2: 같은 크기의 두 필드
        x_dist, y_dist: x/y 변위 출력 (물리 단위, 선택)
        score: 최대 상관 점수 출력 (선택)
        search_width, search_height: 탐색 영역 크기 (오프셋 ±size//2, 짝수면 size + 1 오프셋)
        window_width, window_height: 비교 윈도우 크기
    """

    def __init__(self, data_field1: DataField, data_field2: DataField,
                 x_dist: Optional[DataField] = None,
                 y_dist: Optional[DataField] = None,
                 score: Optional[DataField] = None,
                 search_width: int = 11, search_height: int = 11,
                 window_width: int = 9, window_height: int = 9):
        super().__init__()

        if not data_field1.same_dims(data_field2):
            raise ValueError(f"필드 크기 불일치: {data_field1.get_dims()} vs "
                             f"{data_field2.get_dims()}")
        for name, out in (('x_dist', x_dist), ('y_dist', y_dist), ('score', score)):
            if out is not None and not out.same_dims(data_field1):
                raise ValueError(f"{name} 크기 불일치: {out.get_dims()} vs "
                                 f"{data_field1.get_dims()}")
        if search_width < 1 or search_height < 1:
            raise ValueError(f"탐색 영역은 1 이상이어야 합니다: "
                             f"{search_width}x{search_height}")
        if window_width < 1 or window_height < 1:
            raise ValueError(f"윈도우는 1 이상이어야 합니다: "
                             f"{window_width}x{window_height}")
        xres, yres = data_field1.get_dims()
        if window_width > xres or window_height > yres:
            raise ValueError(f"윈도우가 필드보다 큽니다: "
                             f"window={window_width}x{window_height}, "
                             f"field={xres}x{yres}")

        self.data_field1 = data_field1
        self.data_field2 = data_field2
        self.x_dist = x_dist
        self.y_dist = y_dist
        self.score = score

        self.search_width = search_width
        self.search_height = search_height
        self.window_width = window_width
        self.window_height = window_height
        self.windowing = WindowingType.NONE

        # 기본 사각 윈도우 (모두 1)
        self._weights: Optional[np.ndarray] = np.ones(
            (window_height, window_width), dtype=np.float64)
        self._scores = np.zeros((3, 3), dtype=np.float64)

        self.col_start = window_width // 2
        self.col_stop = xres - window_width + window_width // 2 + 1
        self.row_start = window_height // 2
        self.row_stop = yres - window_height + window_height // 2 + 1
        self.col = self.col_start
        self.row = self.row_start

        _logger.debug(f"상호상관 생성: field={xres}x{yres}, "
                      f"search={search_width}x{search_height}, "
                      f"window={window_width}x{window_height}")

    # ===== 가중치 =====

    @property
    def weights(self) -> Optional[np.ndarray]:
        """가중치 (ITERATE 이후 읽기 전용)"""
        return self._weights

    def set_weights(self, windowing: Union[WindowingType, str, None]):
        """
        비교 윈도우 가중치를 아포다이제이션 윈도우로 설정

        첫 iterate() 이전에만 허용 (이후 호출은 ComputationStateError).
        """
        if self.is_finalized:
            raise ComputationStateError("finalize 이후 가중치 설정")
        if self.state is not ComputationState.INIT:
            raise ComputationStateError(
                f"반복 시작 후 가중치 변경 불가: state={self.state.value}")

        windowing = as_windowing(windowing)
        self._weights[...] = window_2d(self.window_width, self.window_height,
                                       windowing)
        self.windowing = windowing
        if np.sum(self._weights) <= 0.0:
            _logger.warning(f"가중치 합 <= 0 ({windowing.value}, "
                            f"{self.window_width}x{self.window_height}): "
                            f"모든 점 매칭 실패")

    # ===== 상태 머신 =====

    def valid_mask(self) -> np.ndarray:
        """결과가 기록되는 격자점 마스크"""
        mask = np.zeros((self.data_field1.yres, self.data_field1.xres), dtype=bool)
        mask[self.row_start:self.row_stop, self.col_start:self.col_stop] = True
        return mask

    def _start(self) -> int:
        # 변위는 0, 점수는 처리 전까지 SCORE_INVALID (유효 영역 밖은 계속 유지)
        for out in (self.x_dist, self.y_dist):
            if out is not None:
                out.clear()
        if self.score is not None:
            self.score.fill(SCORE_INVALID)
        self._weights.flags.writeable = False
        self.col = self.col_start
        self.row = self.row_start
        return ((self.col_stop - self.col_start)
                * (self.row_stop - self.row_start))

    def _step(self):
        col, row = self.col, self.row
        data1 = self.data_field1.data
        data2 = self.data_field2.data

        cormax, colmax, rowmax, found = search_best_offset(
            data1, data2, self._weights, col, row,
            self.search_width, self.search_height,
            self.window_width, self.window_height,
            ZERO_SHIFT_TIE_BREAK)

        if self.score is not None:
            self.score.data[row, col] = cormax if found else SCORE_INVALID

        if self.x_dist is not None or self.y_dist is not None:
            ipos, jpos = float(colmax), float(rowmax)
            if found:
                neighbour_scores(data1, data2, self._weights, col, row,
                                 colmax, rowmax,
                                 self.window_width, self.window_height,
                                 cormax, self._scores)
                peak = refine_maximum(self._scores)
                ipos += peak.x
                jpos += peak.y

            field = self.data_field1
            if self.x_dist is not None:
                self.x_dist.data[row, col] = (ipos - col) * field.xreal / field.xres
            if self.y_dist is not None:
                self.y_dist.data[row, col] = (jpos - row) * field.yreal / field.yres

        self.col += 1
        if self.col == self.col_stop:
            self.col = self.col_start
            self.row += 1

    def _release(self):
        self._weights = None
        self._scores = None
        self.data_field1 = None
        self.data_field2 = None
        self.x_dist = None
        self.y_dist = None
        self.score = None


# ===== 함수형 API =====

def crosscorrelate_init(data_field1: DataField, data_field2: DataField,
                        x_dist: Optional[DataField], y_dist: Optional[DataField],
                        score: Optional[DataField],
                        search_width: int, search_height: int,
                        window_width: int, window_height: int) -> CrossCorrelationJob:
    return CrossCorrelationJob(data_field1, data_field2, x_dist, y_dist, score,
                               search_width, search_height,
                               window_width, window_height)


def crosscorrelate_set_weights(job: CrossCorrelationJob,
                               windowing: Union[WindowingType, str, None]):
    job.set_weights(windowing)


def crosscorrelate_iteration(job: CrossCorrelationJob) -> ComputationStatus:
    return job.iterate()


def crosscorrelate_finalize(job: CrossCorrelationJob):
    job.finalize()


def crosscorrelate(data_field1: DataField, data_field2: DataField,
                   x_dist: Optional[DataField] = None,
                   y_dist: Optional[DataField] = None,
                   score: Optional[DataField] = None,
                   search_width: int = 11, search_height: int = 11,
                   window_width: int = 9, window_height: int = 9,
                   windowing: Union[WindowingType, str, None] = WindowingType.NONE,
                   progress_callback=None, should_stop=None) -> CrossCorrelationResult:
    """
    두 필드 사이의 변위 필드 (단발 계산)

    출력 필드가 None이면 새로 생성. should_stop()이 True를 반환하면 중단하고
    그때까지의 결과를 반환 (completed=False).

    Returns:
        CrossCorrelationResult
    """
    start_time = time.time()
    if x_dist is None:
        x_dist = data_field1.new_alike()
    if y_dist is None:
        y_dist = data_field1.new_alike()
    if score is None:
        score = data_field1.new_alike()

    with CrossCorrelationJob(data_field1, data_field2, x_dist, y_dist, score,
                             search_width, search_height,
                             window_width, window_height) as job:
        job.set_weights(windowing)
        valid_mask = job.valid_mask()
        completed = job.run(progress_callback=progress_callback,
                            should_stop=should_stop)
        n_processed = job.processed
        windowing_name = job.windowing.value

    processing_time = time.time() - start_time
    result = CrossCorrelationResult(
        x_dist=x_dist,
        y_dist=y_dist,
        score=score,
        search_width=search_width,
        search_height=search_height,
        window_width=window_width,
        window_height=window_height,
        windowing=windowing_name,
        valid_mask=valid_mask,
        processing_time=processing_time,
        completed=completed,
        n_processed=n_processed,
    )
    _logger.info(f"상호상관 {'완료' if completed else '중단'}: "
                 f"{result.n_points} 점, mean_score={result.mean_score:.4f}, "
                 f"{processing_time:.3f}s")
    return result
