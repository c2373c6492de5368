"""
아포다이제이션 윈도우 (상호상관 가중치)

2D 가중치 = 행 방향 1D 윈도우 × 열 방향 1D 윈도우 (outer product).
1D 윈도우는 scipy.signal.get_window의 대칭(symmetric) 윈도우 사용.
"""

from enum import Enum
from typing import Union

import numpy as np
from scipy.signal import get_window


class WindowingType(Enum):
    NONE = 'none'
    RECT = 'rect'
    HANN = 'hann'
    HAMMING = 'hamming'
    BLACKMANN = 'blackman'
    LANCZOS = 'lanczos'
    NUTTALL = 'nuttall'
    FLAT_TOP = 'flattop'
    KAISER25 = 'kaiser25'


# Kaiser α = 2.5 → β = π·α
_SCIPY_WINDOWS = {
    WindowingType.HANN: 'hann',
    WindowingType.HAMMING: 'hamming',
    WindowingType.BLACKMANN: 'blackman',
    WindowingType.LANCZOS: 'lanczos',
    WindowingType.NUTTALL: 'nuttall',
    WindowingType.FLAT_TOP: 'flattop',
    WindowingType.KAISER25: ('kaiser', np.pi * 2.5),
}


def as_windowing(windowing: Union[WindowingType, str, None]) -> WindowingType:
    if windowing is None:
        return WindowingType.NONE
    if isinstance(windowing, WindowingType):
        return windowing
    name = str(windowing).lower()
    for wt in WindowingType:
        if name in (wt.value, wt.name.lower()):
            return wt
    raise ValueError(f"알 수 없는 윈도우 종류: {windowing}")


def window_1d(n: int, windowing: Union[WindowingType, str, None]) -> np.ndarray:
    """길이 n의 1D 윈도우"""
    if n < 1:
        raise ValueError(f"윈도우 길이는 1 이상이어야 합니다: {n}")
    windowing = as_windowing(windowing)
    if windowing in (WindowingType.NONE, WindowingType.RECT):
        return np.ones(n, dtype=np.float64)
    return np.asarray(get_window(_SCIPY_WINDOWS[windowing], n, fftbins=False),
                      dtype=np.float64)


def window_2d(width: int, height: int,
              windowing: Union[WindowingType, str, None]) -> np.ndarray:
    """(height, width) 2D 가중치"""
    return np.outer(window_1d(height, windowing), window_1d(width, windowing))
