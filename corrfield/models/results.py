"""
상호상관(cross-correlation) 결과 데이터 모델
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any

import numpy as np

from .field import DataField


@dataclass
class CrossCorrelationResult:
    """변위 필드 추정 결과"""
    x_dist: Optional[DataField]
    y_dist: Optional[DataField]
    score: Optional[DataField]

    search_width: int = 0
    search_height: int = 0
    window_width: int = 0
    window_height: int = 0
    windowing: str = 'none'

    # 유효 격자점 마스크 (윈도우가 필드 안에 들어가는 점)
    valid_mask: Optional[np.ndarray] = None
    processing_time: float = 0.0
    completed: bool = True
    # 처리된 격자점 수 (None이면 유효 격자점 전부)
    n_processed: Optional[int] = None

    @property
    def n_points(self) -> int:
        if self.valid_mask is None:
            return 0
        return int(np.sum(self.valid_mask))

    @property
    def processed_mask(self) -> Optional[np.ndarray]:
        """
        실제로 계산된 격자점 마스크

        중단된 결과는 래스터 순서로 앞쪽 n_processed 개 유효 격자점만 포함.
        """
        if self.valid_mask is None or self.n_processed is None:
            return self.valid_mask
        mask = np.zeros_like(self.valid_mask)
        index = np.flatnonzero(self.valid_mask)[:self.n_processed]
        mask.flat[index] = True
        return mask

    @property
    def mean_score(self) -> float:
        """처리된 격자점의 평균 점수"""
        processed = self.processed_mask
        if self.score is None or processed is None or not np.any(processed):
            return 0.0
        return float(np.mean(self.score.data[processed]))

    def displacement_magnitude(self) -> np.ndarray:
        """변위 크기 맵 (물리 단위)"""
        if self.x_dist is None or self.y_dist is None:
            raise ValueError("x_dist, y_dist가 모두 있어야 합니다")
        return np.hypot(self.x_dist.data, self.y_dist.data)

    @property
    def metadata(self) -> Dict[str, Any]:
        return {
            'search_width': self.search_width,
            'search_height': self.search_height,
            'window_width': self.window_width,
            'window_height': self.window_height,
            'windowing': self.windowing,
            'processing_time': self.processing_time,
            'n_points': self.n_points,
            'completed': self.completed,
            'n_processed': self.n_processed,
        }
