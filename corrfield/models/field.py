"""
2D 스칼라 필드 (DataField)

행 우선(row-major) float64 격자와 물리적 크기(xreal, yreal)를 함께 보관.
배열 shape은 (yres, xres): data[row, col] 인덱싱.
"""

from typing import Optional, Tuple

import cv2
import numpy as np


class DataField:
    """
    픽셀 해상도 + 물리 크기를 가진 2D 데이터 필드

    Args:
        data: 2D 배열 (yres, xres)
        xreal, yreal: 물리적 가로/세로 크기 (None이면 픽셀 수와 동일)
    """

    def __init__(self, data: np.ndarray,
                 xreal: Optional[float] = None,
                 yreal: Optional[float] = None):
        arr = np.ascontiguousarray(data, dtype=np.float64)
        if arr.ndim != 2:
            raise ValueError(f"2D 배열이 필요합니다: ndim={arr.ndim}")
        if arr.shape[0] < 1 or arr.shape[1] < 1:
            raise ValueError(f"빈 필드는 허용되지 않습니다: shape={arr.shape}")
        self.data = arr
        self.xreal = float(xreal) if xreal is not None else float(arr.shape[1])
        self.yreal = float(yreal) if yreal is not None else float(arr.shape[0])

        if self.xreal <= 0 or self.yreal <= 0:
            raise ValueError(f"물리 크기는 양수여야 합니다: "
                             f"xreal={self.xreal}, yreal={self.yreal}")

    # ===== 생성 =====

    @classmethod
    def new(cls, xres: int, yres: int,
            xreal: Optional[float] = None,
            yreal: Optional[float] = None,
            fill: float = 0.0) -> 'DataField':
        if xres < 1 or yres < 1:
            raise ValueError(f"해상도는 1 이상이어야 합니다: {xres}x{yres}")
        return cls(np.full((yres, xres), fill, dtype=np.float64), xreal, yreal)

    @classmethod
    def from_array(cls, data: np.ndarray,
                   xreal: Optional[float] = None,
                   yreal: Optional[float] = None) -> 'DataField':
        """배열 복사본으로 필드 생성"""
        return cls(np.array(data, dtype=np.float64), xreal, yreal)

    @classmethod
    def from_image(cls, image: np.ndarray,
                   xreal: Optional[float] = None,
                   yreal: Optional[float] = None) -> 'DataField':
        """이미지(BGR 또는 gray)에서 필드 생성"""
        if image is None:
            raise ValueError("이미지가 None입니다")
        if len(image.shape) == 3:
            image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        return cls.from_array(image, xreal, yreal)

    def duplicate(self) -> 'DataField':
        return DataField(self.data.copy(), self.xreal, self.yreal)

    def new_alike(self, nullme: bool = True) -> 'DataField':
        """같은 해상도/물리 크기의 새 필드 (nullme=False이면 값 미초기화)"""
        if nullme:
            arr = np.zeros_like(self.data)
        else:
            arr = np.empty_like(self.data)
        return DataField(arr, self.xreal, self.yreal)

    # ===== 기하 =====

    @property
    def xres(self) -> int:
        return self.data.shape[1]

    @property
    def yres(self) -> int:
        return self.data.shape[0]

    def get_dims(self) -> Tuple[int, int]:
        """(xres, yres)"""
        return self.xres, self.yres

    def get_physical_extent(self) -> Tuple[float, float]:
        """(xreal, yreal)"""
        return self.xreal, self.yreal

    def get_data(self) -> np.ndarray:
        """읽기 전용 view"""
        view = self.data.view()
        view.flags.writeable = False
        return view

    def same_dims(self, other: 'DataField') -> bool:
        return self.data.shape == other.data.shape

    # ===== 값 설정 =====

    def fill(self, value: float):
        self.data.fill(value)

    def clear(self):
        self.data.fill(0.0)

    # ===== 통계 =====

    def get_sum(self) -> float:
        return float(np.sum(self.data))

    def get_avg(self) -> float:
        return float(np.mean(self.data))

    def get_rms(self) -> float:
        """평균 제거 후 RMS (모집단 표준편차)"""
        return float(np.sqrt(np.mean((self.data - np.mean(self.data)) ** 2)))

    def _area(self, col: int, row: int, width: int, height: int) -> np.ndarray:
        if (width < 1 or height < 1 or col < 0 or row < 0
                or col + width > self.xres or row + height > self.yres):
            raise ValueError(f"영역이 필드 밖입니다: col={col}, row={row}, "
                             f"size={width}x{height}, field={self.xres}x{self.yres}")
        return self.data[row:row + height, col:col + width]

    def area_sum(self, col: int, row: int, width: int, height: int) -> float:
        return float(np.sum(self._area(col, row, width, height)))

    def area_avg(self, col: int, row: int, width: int, height: int) -> float:
        return float(np.mean(self._area(col, row, width, height)))

    def area_rms(self, col: int, row: int, width: int, height: int) -> float:
        area = self._area(col, row, width, height)
        return float(np.sqrt(np.mean((area - np.mean(area)) ** 2)))

    def __repr__(self) -> str:
        return (f"DataField({self.xres}x{self.yres}, "
                f"real={self.xreal:g}x{self.yreal:g})")
