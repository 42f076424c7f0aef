# conics/tracer/stitch.py

"""
================================================================================
 曲线拼接模块 (conics/tracer/stitch.py)
================================================================================

模块功能:
本模块把 `scan.py` 产生的正根、负根采样序列拼接为可以直接绘制的折线，
是光栅化流程的最后一步。

工作原理:
1.  **双向扫描** (`trace_branches`):
    - 先求出曲线在扫描区间内的可见范围 [left, right]。
    - 左侧负根 (ln): 从 left 向右扫描，直到第一个不连续点，最后一个有效点
      记为 xmid1。
    - 左侧正根 (lp): 从 xmid1 向左扫描回 left。
    - 只有当 xmid1 < right 时，曲线才有第二段不相交的弧 (例如双曲线的
      右支)。此时右侧正根 (rp) 从 right 向左扫描到 xmid2，右侧负根 (rn)
      再从 xmid2 向右扫描回 right。
    二次曲线的“有实数解”区域至多由两段区间组成，因此最多只有两条弧。

2.  **拼接** (`stitch_branches`):
    负根按 x 递增的顺序排列，正根按 x 递减的顺序排列，首尾相接即可得到一条
    连续的路径，不会有线段穿过曲线内部。弧的每一端分两种情况：
    - **尖端**: 端点的 x 严格位于扫描区间内部，两个根在这里汇合，
      把两段序列连起来。
    - **边界**: 端点的 x 恰好是扫描区间的边界，曲线从视口离开，端点保持
      开放，不沿视口边缘画多余的线段。
    少于两个点的折线无法绘制，直接丢弃。

3.  **单值曲线**: C 为 0 时每个 x 只对应一个 y，正根与负根重合，只保留
    负根序列。
"""
import logging
from collections import namedtuple

from conics.geometry.primitives import (
    ROOT_NEGATIVE, ROOT_POSITIVE, ConicCoefficients,
)
from conics.tracer.scan import find_extent, last_x, scan_branch

logger = logging.getLogger(__name__)

Branches = namedtuple(
    'Branches',
    ['left_negative', 'left_positive', 'right_positive', 'right_negative', 'single_valued'],
)


def trace_branches(coefficients, domain):
    """
    对曲线做双向扫描，返回四段根序列。

    Args:
        coefficients (ConicCoefficients): 曲线系数。
        domain (ScanDomain): 扫描区间。

    Returns:
        Branches: 四段采样序列 (列表)；曲线不可见时全部为空。
    """
    single_valued = coefficients.is_single_valued
    extent = find_extent(coefficients, domain)
    if extent is None:
        return Branches([], [], [], [], single_valued)
    left, right = extent

    ln_points = list(scan_branch(coefficients, left, right + 1, ROOT_NEGATIVE))
    xmid1 = last_x(ln_points, left)
    lp_points = list(scan_branch(coefficients, xmid1, left - 1, ROOT_POSITIVE))

    rp_points, rn_points = [], []
    if xmid1 < right:
        rp_points = list(scan_branch(coefficients, right, xmid1, ROOT_POSITIVE))
        xmid2 = last_x(rp_points, right)
        rn_points = list(scan_branch(coefficients, xmid2, right + 1, ROOT_NEGATIVE))

    return Branches(ln_points, lp_points, rp_points, rn_points, single_valued)


def stitch_branches(branches, domain):
    """
    把四段根序列拼接为至多两条折线。

    Args:
        branches (Branches): `trace_branches` 的结果。
        domain (ScanDomain): 扫描区间，用于判断弧的端点是尖端还是边界。

    Returns:
        list[list[Point2D]]: 0 到 2 条折线，每条至少包含两个点。
    """
    ln, lp, rp, rn, single_valued = branches
    if not ln:
        return []

    if single_valued:
        polylines = [list(ln), list(rn)]
    else:
        left_tip = ln[0].x > domain.xmin
        mid_tip = ln[-1].x < domain.last

        if left_tip and mid_tip:
            polylines = [ln + lp + [ln[0]]]
        elif mid_tip:
            polylines = [ln + lp]
        elif left_tip:
            polylines = [lp + ln]
        else:
            polylines = [list(ln), list(lp)]

        if rp:
            right_branch = rp + rn
            if rp[0].x < domain.last:
                right_branch.append(rp[0])
            polylines.append(right_branch)

    return [polyline for polyline in polylines if len(polyline) >= 2]


def rasterize_conic(coefficients, domain):
    """
    光栅化一条二次曲线。

    Args:
        coefficients (ConicCoefficients | tuple): 六个系数 (A, B, C, D, E, F)。
        domain (ScanDomain): 扫描区间 [xmin, xmax)，通常是 [0, 视口宽度)。

    Returns:
        list[list[Point2D]]: 0 到 2 条折线。曲线不可见时返回空列表。
    """
    if not isinstance(coefficients, ConicCoefficients):
        coefficients = ConicCoefficients(*coefficients)
    polylines = stitch_branches(trace_branches(coefficients, domain), domain)
    logger.debug("曲线 %s 在区间 %s 内得到 %d 条折线", coefficients, domain, len(polylines))
    return polylines
