"""
Numba 상관 점수 코어 모듈

정규화 상관 점수의 픽셀 단위 루프를 nopython 모드로 컴파일.
단발(one-shot) 맵 계산과 반복(iterator) 계산이 같은 컴파일 함수를
호출하므로 두 경로의 결과가 비트 단위로 동일함.

함수 호출 구조:
    correlation_map                (커널 상관 전체 맵)
    └── spatial_pixel_score        (캐시된 avg/rms로 한 픽셀 정규화)
        └── raw_correlation_score  (공분산)
    search_best_offset             (상호상관: 탐색 영역 최대점)
    └── weighted_correlation_score
    neighbour_scores               (서브픽셀 보정용 3×3 점수)
    └── weighted_correlation_score

좌표 규약: 배열은 (row, col) 인덱싱, 함수 인자는 원본 API처럼 (col, row) 순서.
"""

import numpy as np
from numba import jit


# =============================================================================
#  점수 센티널 상수
# =============================================================================

SCORE_INVALID = -1.0               # 기하 오류 (윈도우가 필드 밖)
SCORE_DEGENERATE = 0.0             # 분산 0 윈도우

# 가중 점수는 실패 원인별로 구분되는 값을 반환
WEIGHTED_OUTSIDE_KERNEL = -2.0       # 커널 시작점이 커널 필드 밖
WEIGHTED_OUTSIDE_DATA = -3.0         # 데이터 윈도우가 데이터 필드 밖
WEIGHTED_OUTSIDE_KERNEL_AREA = -4.0  # 커널 윈도우가 커널 필드 밖
WEIGHTED_ZERO_WEIGHTS = -5.0         # 가중치 합 <= 0

GEOMETRY_OK = 0
GEOMETRY_KERNEL_ORIGIN = 1
GEOMETRY_DATA = 2
GEOMETRY_KERNEL_AREA = 3


@jit(nopython=True, cache=True)
def clamp_score(s):
    if s > 1.0:
        return 1.0
    if s < -1.0:
        return -1.0
    return s


@jit(nopython=True, cache=True)
def check_geometry(xres, yres, kxres, kyres, col, row,
                   kernel_col, kernel_row, kernel_width, kernel_height):
    """윈도우 기하 검사 → GEOMETRY_* 코드"""
    if kernel_col > kxres or kernel_row > kyres:
        return GEOMETRY_KERNEL_ORIGIN
    if (kernel_width <= 0 or kernel_height <= 0
            or col < 0 or row < 0
            or col + kernel_width > xres
            or row + kernel_height > yres):
        return GEOMETRY_DATA
    if (kernel_col < 0 or kernel_row < 0
            or kernel_col + kernel_width > kxres
            or kernel_row + kernel_height > kyres):
        return GEOMETRY_KERNEL_AREA
    return GEOMETRY_OK


# =============================================================================
#  1. 점수 함수
# =============================================================================

@jit(nopython=True, cache=True)
def correlation_score(data, kdata, col, row, kernel_col, kernel_row,
                      kernel_width, kernel_height):
    """
    한 위치의 정규화 상관 점수

    Returns:
        [-1, 1] 점수. 기하 오류 -1, 분산 0 윈도우 0.0
    """
    yres, xres = data.shape
    kyres, kxres = kdata.shape
    if check_geometry(xres, yres, kxres, kyres, col, row, kernel_col,
                      kernel_row, kernel_width, kernel_height) != GEOMETRY_OK:
        return SCORE_INVALID

    n = kernel_width * kernel_height
    sum1 = 0.0
    sum2 = 0.0
    for j in range(kernel_height):
        for i in range(kernel_width):
            sum1 += data[row + j, col + i]
            sum2 += kdata[kernel_row + j, kernel_col + i]
    avg1 = sum1 / n
    avg2 = sum2 / n

    ss1 = 0.0
    ss2 = 0.0
    for j in range(kernel_height):
        for i in range(kernel_width):
            d1 = data[row + j, col + i] - avg1
            d2 = kdata[kernel_row + j, kernel_col + i] - avg2
            ss1 += d1 * d1
            ss2 += d2 * d2

    rms1 = np.sqrt(ss1 / n)
    if rms1 == 0.0:
        return SCORE_DEGENERATE
    rms2 = np.sqrt(ss2 / n)
    if rms2 == 0.0:
        return SCORE_DEGENERATE

    score = 0.0
    for j in range(kernel_height):
        for i in range(kernel_width):
            score += ((data[row + j, col + i] - avg1)
                      * (kdata[kernel_row + j, kernel_col + i] - avg2))
    return clamp_score(score / (rms1 * rms2 * n))


@jit(nopython=True, cache=True)
def raw_correlation_score(data, kdata, col, row, kernel_col, kernel_row,
                          kernel_width, kernel_height, data_avg, kernel_avg):
    """
    평균을 이미 알고 있을 때의 비정규화 점수 (공분산)

    점수 = 반환값 / (data_rms * kernel_rms). 기하 오류 시 -1.
    """
    yres, xres = data.shape
    kyres, kxres = kdata.shape
    if check_geometry(xres, yres, kxres, kyres, col, row, kernel_col,
                      kernel_row, kernel_width, kernel_height) != GEOMETRY_OK:
        return SCORE_INVALID

    score = 0.0
    for j in range(kernel_height):
        for i in range(kernel_width):
            score += ((data[row + j, col + i] - data_avg)
                      * (kdata[kernel_row + j, kernel_col + i] - kernel_avg))
    return score / (kernel_width * kernel_height)


@jit(nopython=True, cache=True)
def weighted_correlation_score(data, kdata, wdata, col, row,
                               kernel_col, kernel_row,
                               kernel_width, kernel_height):
    """
    가중 정규화 상관 점수

    wdata: (kernel_height, kernel_width) 가중치. 공분산/분산 모두 가중.

    Returns:
        [-1, 1] 점수, 분산 0이면 0.0, 실패 시 WEIGHTED_* 센티널 (< -1)
    """
    yres, xres = data.shape
    kyres, kxres = kdata.shape
    code = check_geometry(xres, yres, kxres, kyres, col, row, kernel_col,
                          kernel_row, kernel_width, kernel_height)
    if code == GEOMETRY_KERNEL_ORIGIN:
        return WEIGHTED_OUTSIDE_KERNEL
    if code == GEOMETRY_DATA:
        return WEIGHTED_OUTSIDE_DATA
    if code == GEOMETRY_KERNEL_AREA:
        return WEIGHTED_OUTSIDE_KERNEL_AREA

    weightsum = 0.0
    avg1 = 0.0
    avg2 = 0.0
    for j in range(kernel_height):
        for i in range(kernel_width):
            w = wdata[j, i]
            weightsum += w
            avg1 += data[row + j, col + i] * w
            avg2 += kdata[kernel_row + j, kernel_col + i] * w
    if weightsum <= 0.0:
        return WEIGHTED_ZERO_WEIGHTS
    avg1 /= weightsum
    avg2 /= weightsum

    rms1 = 0.0
    rms2 = 0.0
    for j in range(kernel_height):
        for i in range(kernel_width):
            w = wdata[j, i]
            d1 = data[row + j, col + i] - avg1
            d2 = kdata[kernel_row + j, kernel_col + i] - avg2
            rms1 += w * d1 * d1
            rms2 += w * d2 * d2
    rms1 = np.sqrt(rms1 / weightsum)
    rms2 = np.sqrt(rms2 / weightsum)

    if rms1 == 0.0:
        return SCORE_DEGENERATE
    if rms2 == 0.0:
        return SCORE_DEGENERATE

    score = 0.0
    for j in range(kernel_height):
        for i in range(kernel_width):
            score += (wdata[j, i]
                      * (data[row + j, col + i] - avg1)
                      * (kdata[kernel_row + j, kernel_col + i] - avg2))
    return clamp_score(score / (rms1 * rms2 * weightsum))


# =============================================================================
#  2. 커널 상관 (공간 영역)
# =============================================================================

@jit(nopython=True, cache=True)
def spatial_pixel_score(data, kdata, avg, rms, kernel_avg, kernel_rms,
                        row, col, xoff, yoff):
    """
    출력 픽셀 (row, col) 하나의 점수: 커널 중심이 (row, col)에 놓인 경우

    avg/rms는 커널 크기 윈도우로 미리 계산된 데이터 통계.
    """
    kyres, kxres = kdata.shape
    drms = rms[row, col]
    if kernel_rms == 0.0 or drms == 0.0:
        return SCORE_DEGENERATE
    s = raw_correlation_score(data, kdata, col - xoff, row - yoff, 0, 0,
                              kxres, kyres, avg[row, col], kernel_avg)
    return clamp_score(s / (drms * kernel_rms))


@jit(nopython=True, cache=True)
def correlation_map(data, kdata, avg, rms, kernel_avg, kernel_rms, out):
    """
    커널이 완전히 들어가는 모든 위치의 점수를 out에 기록 (래스터 순서)

    out의 나머지 픽셀은 호출부에서 -1로 채워 둠.
    """
    yres, xres = data.shape
    kyres, kxres = kdata.shape
    xoff = (kxres - 1) // 2
    yoff = (kyres - 1) // 2

    i = yoff
    while i + kyres - yoff <= yres:
        j = xoff
        while j + kxres - xoff <= xres:
            out[i, j] = spatial_pixel_score(data, kdata, avg, rms,
                                            kernel_avg, kernel_rms,
                                            i, j, xoff, yoff)
            j += 1
        i += 1


# =============================================================================
#  3. 상호상관 (변위 탐색)
# =============================================================================

@jit(nopython=True, cache=True)
def search_best_offset(data1, data2, wdata, col, row,
                       search_width, search_height,
                       window_width, window_height, tie_break):
    """
    field1의 (col, row) 중심 윈도우를 field2의 탐색 영역에서 찾음

    오프셋 범위는 축마다 [-size//2, size//2]. 홀수 크기는 정확히 size개,
    짝수 크기는 size + 1개 (대칭 범위).

    무변위 후보를 먼저 평가하고 tie_break 배율을 곱함. 이후 후보는
    엄격히 더 클 때만 교체 → 동점이면 무변위 유지.
    필드 밖 후보와 센티널 점수(< -1)는 최대값 후보에서 제외.

    Returns:
        (score, colmax, rowmax, found)
        score는 tie_break 배율 적용 전 점수, colmax/rowmax는 field2 윈도우 중심
    """
    yres, xres = data2.shape
    hw = window_width // 2
    hh = window_height // 2
    x1 = col - hw
    y1 = row - hh
    sx = search_width // 2
    sy = search_height // 2

    best = -np.inf
    best_score = SCORE_INVALID
    colmax = col
    rowmax = row
    found = False

    if x1 >= 0 and y1 >= 0 and x1 + window_width <= xres and y1 + window_height <= yres:
        s = weighted_correlation_score(data1, data2, wdata, x1, y1, x1, y1,
                                       window_width, window_height)
        if s >= -1.0:
            best = s * tie_break
            best_score = s
            found = True

    for dy in range(-sy, sy + 1):
        m = y1 + dy
        if m < 0 or m + window_height > yres:
            continue
        for dx in range(-sx, sx + 1):
            if dx == 0 and dy == 0:
                continue
            n = x1 + dx
            if n < 0 or n + window_width > xres:
                continue
            s = weighted_correlation_score(data1, data2, wdata, x1, y1, n, m,
                                           window_width, window_height)
            if s < -1.0:
                continue
            if s > best:
                best = s
                best_score = s
                colmax = n + hw
                rowmax = m + hh
                found = True

    return best_score, colmax, rowmax, found


@jit(nopython=True, cache=True)
def neighbour_scores(data1, data2, wdata, col, row, colmax, rowmax,
                     window_width, window_height, center_score, out):
    """
    최대점 주변 3×3 점수 (out[m+1, n+1], 중심은 center_score)

    필드 밖 이웃은 WEIGHTED_* 센티널 값이 들어감.
    """
    hw = window_width // 2
    hh = window_height // 2
    for m in range(-1, 2):
        for n in range(-1, 2):
            if m == 0 and n == 0:
                out[1, 1] = center_score
            else:
                out[m + 1, n + 1] = weighted_correlation_score(
                    data1, data2, wdata,
                    col - hw, row - hh,
                    colmax - hw + n, rowmax - hh + m,
                    window_width, window_height)


def warmup_numba_scoring():
    """Numba JIT 컴파일 워밍업"""
    dummy = np.random.rand(12, 12).astype(np.float64)
    kernel = dummy[2:7, 3:8].copy()
    weights = np.ones((5, 5), dtype=np.float64)
    avg = np.zeros_like(dummy)
    rms = np.ones_like(dummy)
    out = np.full_like(dummy, SCORE_INVALID)
    scores = np.zeros((3, 3), dtype=np.float64)

    correlation_score(dummy, kernel, 3, 2, 0, 0, 5, 5)
    raw_correlation_score(dummy, kernel, 3, 2, 0, 0, 5, 5, 0.5, 0.5)
    weighted_correlation_score(dummy, dummy, weights, 3, 2, 3, 2, 5, 5)
    correlation_map(dummy, kernel, avg, rms, 0.5, 1.0, out)
    best, cmax, rmax, _ = search_best_offset(dummy, dummy, weights, 6, 6,
                                             3, 3, 5, 5, 1.0001)
    neighbour_scores(dummy, dummy, weights, 6, 6, cmax, rmax, 5, 5, best, scores)
