"""
반복 계산(iterator) 공통 골격

단일 스레드 협조적 실행: 호출부가 iterate()를 반복 호출하고, 각 호출은
한정된 작업(출력 한 픽셀, 한 탐색 영역)만 수행. 호출 사이에 호스트가
다른 작업(UI 이벤트 등)을 끼워 넣을 수 있음.

상태 전이:
    INIT ──iterate()──▶ ITERATE ──iterate() × total──▶ FINISHED
    - 첫 iterate()는 준비 작업(_start)만 수행 (출력 초기화, 캐시 할당)
    - FINISHED 이후 iterate()는 아무 것도 하지 않음
    - 중단: iterate() 호출을 멈추고 finalize(): 출력은 항상 일관된 상태
    - finalize()는 정확히 한 번 (이중 호출, finalize 후 iterate는 ComputationStateError)
"""

import logging
from typing import Callable, Optional

from ..models.state import ComputationState, ComputationStatus, ComputationStateError

_logger = logging.getLogger(__name__)


class ComputationJob:
    """iterate/finalize 프로토콜 기반 클래스"""

    def __init__(self):
        self._state = ComputationState.INIT
        self._fraction = 0.0
        self._processed = 0
        self._total = 0
        self._finalized = False

    # ===== 상태 조회 =====

    @property
    def state(self) -> ComputationState:
        return self._state

    @property
    def fraction(self) -> float:
        return self._fraction

    @property
    def status(self) -> ComputationStatus:
        return ComputationStatus(self._state, self._fraction)

    @property
    def processed(self) -> int:
        return self._processed

    @property
    def total(self) -> int:
        return self._total

    @property
    def is_finished(self) -> bool:
        return self._state is ComputationState.FINISHED

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    # ===== 프로토콜 =====

    def iterate(self) -> ComputationStatus:
        """한 단계 진행 후 상태 반환"""
        if self._finalized:
            raise ComputationStateError(
                f"{type(self).__name__}: finalize 이후 iterate 호출")

        if self._state is ComputationState.INIT:
            self._total = self._start()
            self._processed = 0
            self._fraction = 0.0
            self._state = ComputationState.ITERATE
            _logger.debug(f"{type(self).__name__} 시작: total={self._total}")
            if self._total <= 0:
                self._finish()
        elif self._state is ComputationState.ITERATE:
            self._step()
            self._processed += 1
            self._fraction = min(self._processed / self._total, 1.0)
            if self._processed >= self._total:
                self._finish()

        return self.status

    def finalize(self):
        """소유한 스크래치 버퍼와 필드 참조 해제"""
        if self._finalized:
            raise ComputationStateError(f"{type(self).__name__}: 이중 finalize")
        self._release()
        self._finalized = True
        _logger.debug(f"{type(self).__name__} 해제: state={self._state.value}, "
                      f"{self._processed}/{self._total}")

    def run(self,
            progress_callback: Optional[Callable[[int, int], None]] = None,
            should_stop: Optional[Callable[[], bool]] = None) -> bool:
        """
        FINISHED까지 iterate() 반복

        Args:
            progress_callback: (current, total) 진행 콜백
            should_stop: True 반환 시 중단 (finalize는 호출부 책임)

        Returns:
            완료 여부
        """
        while not self.is_finished:
            if should_stop and should_stop():
                _logger.debug(f"{type(self).__name__} 중단: "
                              f"{self._processed}/{self._total}")
                return False
            was_init = self._state is ComputationState.INIT
            self.iterate()
            if progress_callback and not was_init:
                progress_callback(self._processed, self._total)
        return True

    def _finish(self):
        self._state = ComputationState.FINISHED
        self._fraction = 1.0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if not self._finalized:
            self.finalize()
        return False

    # ===== 하위 클래스 구현 =====

    def _start(self) -> int:
        """준비 작업, 처리할 단위 수 반환"""
        raise NotImplementedError

    def _step(self):
        """한 단위 처리"""
        raise NotImplementedError

    def _release(self):
        raise NotImplementedError
