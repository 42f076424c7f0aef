# conics/tracer/intersections.py

"""
================================================================================
 二次曲线求交模块 (conics/tracer/intersections.py)
================================================================================

模块功能:
求二次曲线与直线、二次曲线与二次曲线的交点。

工作原理 (两条二次曲线求交):
- 两条曲线各有正根和负根两个分支，共有四种组合。对每种组合定义差函数
      G(x) = y1(x) - y2(x)
  G(x) 的零点就是交点的横坐标。
- 用 `ROOT_SAMPLES` 个等距采样点把区间 [xmin, xmax] 分为 `ROOT_SAMPLES - 1` 段，
  在每一段中检查 G 的符号。
  “没有实数解”被视为一种独立的符号，这样曲线的端点也能被正确地分隔开。
- 两端符号不同时用二分法 (`BISECTION_TRIALS` 次) 逼近零点，最后只接受
  |G| < `ROOT_TOLERANCE` 的结果，以排除在曲线端点处收敛到的伪根。
- 每种组合至多有两个交点；横坐标相差小于 `ROOT_TOLERANCE` 的根视为同一个。
"""
import logging

import numpy as np

from conics.geometry import kernels
from conics.geometry.kernels import EPSILON
from conics.geometry.primitives import ROOT_NEGATIVE, ROOT_POSITIVE, Point2D
from conics.tracer.scan import evaluate_y

logger = logging.getLogger(__name__)

ROOT_SAMPLES = 100
BISECTION_TRIALS = 200
ROOT_TOLERANCE = 0.1

# “没有实数解”对应的符号类别，与 -1、0、+1 都不相同。
SIGN_NAN = -2


def conic_line_segment_intersection(coefficients, p1, p2):
    """
    求二次曲线与经过 p1、p2 两点的直线的交点。

    Returns:
        list[Point2D]: 0、1 或 2 个交点。
    """
    if p1[0] == p2[0] and p1[1] == p2[1]:
        raise ValueError(f"两个点重合，无法确定一条直线: {p1}")
    a, b, c, d, e, f = (float(v) for v in coefficients)
    results, count = kernels.intersect_conic_line(
        a, b, c, d, e, f, float(p1[0]), float(p1[1]), float(p2[0]), float(p2[1]))
    return [Point2D(float(results[i, 0]), float(results[i, 1])) for i in range(count)]


def _difference(x, first, sign1, second, sign2):
    y1 = evaluate_y(x, first, sign1)
    y2 = evaluate_y(x, second, sign2)
    if y1 is None or y2 is None:
        return None
    return y1 - y2


def _sign_class(value):
    if value is None:
        return SIGN_NAN
    if abs(value) < EPSILON:
        return 0
    return int(np.sign(value))


def _bisect(x0, delta_x, first, sign1, second, sign2):
    xmin, xmax = x0, x0 + delta_x
    g_min = _difference(xmin, first, sign1, second, sign2)
    if _sign_class(g_min) == 0:
        return xmin
    g_max = _difference(xmax, first, sign1, second, sign2)
    if _sign_class(g_max) == 0:
        return xmax

    sgn_min, sgn_max = _sign_class(g_min), _sign_class(g_max)
    if sgn_min == sgn_max:
        return None

    xmid, g_mid = xmin, g_min
    for _ in range(BISECTION_TRIALS):
        xmid = (xmin + xmax) / 2.0
        g_mid = _difference(xmid, first, sign1, second, sign2)
        sgn_mid = _sign_class(g_mid)
        if sgn_mid == 0:
            break
        if sgn_mid == sgn_min:
            xmin, g_min = xmid, g_mid
        elif sgn_mid == sgn_max:
            xmax, g_max = xmid, g_mid
        elif sgn_min == SIGN_NAN:
            xmin, g_min = xmid, g_mid
            sgn_min = sgn_mid
        elif sgn_max == SIGN_NAN:
            xmax, g_max = xmid, g_mid
            sgn_max = sgn_mid
        else:
            # 三个符号互不相同且都不是 NaN，差函数在这一段内不连续。
            return None

    for x, g in ((xmid, g_mid), (xmin, g_min), (xmax, g_max)):
        if g is not None and abs(g) < ROOT_TOLERANCE:
            return x
    return None


def find_roots(first, sign1, second, sign2, xmin, xmax):
    """
    求差函数 y1(x) - y2(x) 在 [xmin, xmax] 上的零点 (至多两个)。
    """
    roots = []
    # ROOT_SAMPLES 个等距采样点，相邻两点之间为一段，最后一段的右端恰好是 xmax。
    delta_x = (xmax - xmin) / (ROOT_SAMPLES - 1)
    for i in range(ROOT_SAMPLES - 1):
        x = _bisect(xmin + i * delta_x, delta_x, first, sign1, second, sign2)
        if x is None or any(abs(x - root) < ROOT_TOLERANCE for root in roots):
            continue
        roots.append(x)
        if len(roots) > 1:
            break
    return roots


def conic_conic_intersection(first, second, xmin, xmax):
    """
    求两条二次曲线在 [xmin, xmax] 内的交点。

    Args:
        first, second (ConicCoefficients): 两条曲线的系数。
        xmin, xmax (float): 搜索区间。

    Returns:
        list[Point2D]: 交点列表。
    """
    if xmax <= xmin:
        raise ValueError(f"搜索区间无效: [{xmin}, {xmax}]")

    points = []
    for sign1 in (ROOT_POSITIVE, ROOT_NEGATIVE):
        for sign2 in (ROOT_POSITIVE, ROOT_NEGATIVE):
            for x in find_roots(first, sign1, second, sign2, xmin, xmax):
                y = evaluate_y(x, first, sign1)
                point = Point2D(x, y)
                if any(abs(p.x - x) < ROOT_TOLERANCE and abs(p.y - y) < ROOT_TOLERANCE
                       for p in points):
                    continue
                points.append(point)
    logger.debug("两条曲线在 [%s, %s] 内共有 %d 个交点", xmin, xmax, len(points))
    return points
