# conics/tracer/scan.py

"""
================================================================================
 分支扫描模块 (conics/tracer/scan.py)
================================================================================

模块功能:
本模块沿 x 轴以单位步长扫描一个整数区间，对每个采样点调用内核函数
`kernels.conic_y` 求曲线上的 y，并把区间划分为“有实数解”的连续子区间。

工作原理:
- **求值**: `evaluate_y` 是内核函数的Python包装。内核用 `(y, ok)` 表示结果，
  包装函数把“无实数解”转换为 `None`，避免 NaN 混入后续的算术运算。
- **惰性扫描**: `scan_branch` 是一个生成器，从起点出发逐个产生有效的采样点，
  一旦遇到第一个没有实数解的 x 就立即停止 (而不是跳过)。生成器只能被遍历
  一次；需要再次扫描时重新调用即可，两次调用之间不共享任何状态。
- **可见范围**: `find_extent` 从左往右找到第一个有效的 x，再从右往左找到最后
  一个有效的 x。两者都不存在时，曲线在当前视口中不可见。

注意:
对同一个 x，正根和负根的判别式完全相同，因此“是否有实数解”与根的符号无关。
扫描可见范围时统一使用负根。
"""
import logging

from conics.geometry import kernels
from conics.geometry.primitives import ROOT_NEGATIVE, Point2D, check_root_sign

logger = logging.getLogger(__name__)


def evaluate_y(x, coefficients, sign):
    """
    求二次曲线在 x 处的一个根。

    Args:
        x (float): 横坐标。
        coefficients (ConicCoefficients): 曲线系数。
        sign (int): +1 取正根，-1 取负根。

    Returns:
        float | None: 对应的 y；该 x 处没有实数解时返回 None。
    """
    check_root_sign(sign)
    a, b, c, d, e, f = (float(v) for v in coefficients)
    y, ok = kernels.conic_y(float(x), a, b, c, d, e, f, sign)
    if not ok:
        return None
    return float(y)


def scan_branch(coefficients, start, stop, sign):
    """
    从 start 向 stop (不含) 逐个整数扫描，产生曲线上连续的一段采样点。

    扫描方向由 start 与 stop 的大小关系决定。遇到第一个没有实数解的 x 时
    扫描立即结束。

    Yields:
        Point2D: (x, y) 采样点。
    """
    check_root_sign(sign)
    a, b, c, d, e, f = (float(v) for v in coefficients)
    step = 1 if stop >= start else -1
    for x in range(start, stop, step):
        y, ok = kernels.conic_y(float(x), a, b, c, d, e, f, sign)
        if not ok:
            return
        yield Point2D(x, float(y))


def _first_valid(coefficients, xs):
    a, b, c, d, e, f = (float(v) for v in coefficients)
    for x in xs:
        _, ok = kernels.conic_y(float(x), a, b, c, d, e, f, ROOT_NEGATIVE)
        if ok:
            return x
    return None


def find_extent(coefficients, domain):
    """
    求曲线在扫描区间内有实数解的最左和最右的 x。

    Args:
        coefficients (ConicCoefficients): 曲线系数。
        domain (ScanDomain): 扫描区间 [xmin, xmax)。

    Returns:
        tuple | None: (left, right)；曲线在区间内不可见时返回 None。
    """
    left = _first_valid(coefficients, range(domain.xmin, domain.xmax))
    if left is None:
        logger.debug("曲线 %s 在区间 %s 内没有实数解", coefficients, domain)
        return None
    right = _first_valid(coefficients, range(domain.last, left - 1, -1))
    return left, right


def last_x(samples, default):
    """返回一段采样点中最后一个点的 x；没有采样点时返回 default。"""
    return samples[-1].x if samples else default
