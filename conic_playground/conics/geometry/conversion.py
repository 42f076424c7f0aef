# conics/geometry/conversion.py

"""
================================================================================
 曲线转换模块 (conics/geometry/conversion.py)
================================================================================

模块功能:
本模块把各种“参数化”的图形描述转换为引擎内部统一使用的两种表示：
1.  **二次曲线系数**: 圆、椭圆、双曲线、点、直线和抛物线都可以写成一般
    二次曲线方程 Ax²+Bxy+Cy²+Dx+Ey+F=0，之后交给 `tracer` 包光栅化。
2.  **三次贝塞尔控制点**: 抛物线和二次贝塞尔曲线被转换为四个三次贝塞尔
    控制点，渲染端只需要实现一种曲线绘制方式。

坐标约定:
- 圆、椭圆和双曲线使用中心坐标 (h, k)。
- 旋转角一律使用弧度。
- 本模块从不做屏幕坐标变换 (缩放、平移)；旋转的抛物线返回的是其自身
  局部坐标系中的控制点，由渲染端在绘制时施加旋转。
"""
import math
from functools import lru_cache

import numpy as np

from conics.geometry import kernels
from conics.geometry.kernels import EPSILON
from conics.geometry.primitives import (
    BezierControlPoints, ConicCoefficients, InvalidLineDirection, LineParams,
    Point2D, QuadraticBezierPoints, StandardParabola, VertexParabola,
    is_axis_aligned,
)

# ------------------------------------------------------------------------------
# 图形 -> 二次曲线系数
# ------------------------------------------------------------------------------

def point_to_conic(h, k):
    """点 (h, k) 写作 (x-h)² + (y-k)² = 0。"""
    return ConicCoefficients(1.0, 0.0, 1.0, -2.0 * h, -2.0 * k, h * h + k * k)


def circle_to_conic(r, h, k):
    """
    圆心为 (h, k)、半径为 r 的圆。

    方程 (x-h)² + (y-k)² = r² 展开后两边同除以 r²，使系数的量级与半径无关。
    半径为 0 时退化为一个点。
    """
    if r == 0:
        return point_to_conic(h, k)
    r2 = r * r
    return ConicCoefficients(
        1.0 / r2, 0.0, 1.0 / r2,
        -2.0 * h / r2, -2.0 * k / r2,
        (h * h + k * k) / r2 - 1.0,
    )


def _rotated_quadric(coef_a, coef_b, coef_c, h, k):
    # 把以原点为中心的 A·X² + B·XY + C·Y² = 1 平移到 (h, k)。
    return ConicCoefficients(
        coef_a, coef_b, coef_c,
        -2.0 * h * coef_a - k * coef_b,
        -2.0 * k * coef_c - h * coef_b,
        h * h * coef_a + h * k * coef_b + k * k * coef_c - 1.0,
    )


def _cos_sin(angle):
    cos, sin = math.cos(angle), math.sin(angle)
    # cos(π/2) 在浮点数下不为 0，会让直角旋转的曲线出现微小的 xy 项。
    if abs(sin) == 1.0:
        cos = 0.0
    return cos, sin


def ellipse_to_conic(rx, ry, h, k, angle=0.0):
    """
    中心为 (h, k)、半轴为 rx, ry、旋转角为 angle 的椭圆。

    数学原理:
    在旋转后的局部坐标系中椭圆为 x'²/rx² + y'²/ry² = 1，其中
        x' = (x-h)·cos + (y-k)·sin
        y' = -(x-h)·sin + (y-k)·cos
    展开即得：
        A = cos²/rx² + sin²/ry²
        B = 2·sin·cos·(1/rx² - 1/ry²)
        C = sin²/rx² + cos²/ry²
    """
    if rx == ry:
        return circle_to_conic(rx, h, k)
    cos, sin = _cos_sin(angle)
    irx2, iry2 = 1.0 / (rx * rx), 1.0 / (ry * ry)
    return _rotated_quadric(
        cos * cos * irx2 + sin * sin * iry2,
        2.0 * sin * cos * (irx2 - iry2),
        sin * sin * irx2 + cos * cos * iry2,
        h, k,
    )


@lru_cache(maxsize=256)
def hyperbola_to_conic(rx, ry, h, k, angle=0.0):
    """
    中心为 (h, k)、半轴为 rx, ry、旋转角为 angle 的双曲线 x'²/rx² - y'²/ry² = 1。

    系数推导与 `ellipse_to_conic` 相同，只是 y' 项的符号相反：
        A = cos²/rx² - sin²/ry²
        B = 2·sin·cos·(1/rx² + 1/ry²)
        C = sin²/rx² - cos²/ry²

    结果会被缓存：同一条双曲线在每次重绘时都会被重新光栅化。
    """
    cos, sin = _cos_sin(angle)
    irx2, iry2 = 1.0 / (rx * rx), 1.0 / (ry * ry)
    return _rotated_quadric(
        cos * cos * irx2 - sin * sin * iry2,
        2.0 * sin * cos * (irx2 + iry2),
        sin * sin * irx2 - cos * cos * iry2,
        h, k,
    )


def line_to_conic(line):
    """
    经过点 (x, y)、方向为 (i, j) 的直线：j·(X - x) - i·(Y - y) = 0。
    """
    if line.i == 0 and line.j == 0:
        raise InvalidLineDirection(f"直线的方向向量不能为零向量: {line}")
    return ConicCoefficients(0.0, 0.0, 0.0, line.j, -line.i, line.i * line.y - line.j * line.x)


def line_segment_to_conic(p1, p2):
    """经过 p1、p2 两点的直线。两点重合时无法确定方向。"""
    x1, y1 = float(p1[0]), float(p1[1])
    x2, y2 = float(p2[0]), float(p2[1])
    return line_to_conic(LineParams(x1, y1, x2 - x1, y2 - y1))


def parabola_to_conic(parabola):
    """
    把竖直开口的抛物线写成二次曲线：a·x² + b·x - y + c = 0。

    顶点式会先转换为标准式。旋转角 i 不参与计算 (由渲染端施加)。
    """
    if isinstance(parabola, VertexParabola):
        parabola = vertex_to_standard(parabola)
    return ConicCoefficients(parabola.a, 0.0, 0.0, parabola.b, -1.0, parabola.c)


def rescale_conic(coefficients):
    """把系数同除以绝对值最小的非零系数，使其中一个系数变为 ±1。"""
    nonzero = [abs(v) for v in coefficients if v != 0]
    if not nonzero:
        return coefficients
    scale = 1.0 / min(nonzero)
    return ConicCoefficients(*(v * scale for v in coefficients))


def conic_to_matrix(coefficients):
    """返回二次曲线的 3x3 对称矩阵表示。"""
    a, b, c, d, e, f = coefficients
    return np.array([
        [a, b / 2.0, d / 2.0],
        [b / 2.0, c, e / 2.0],
        [d / 2.0, e / 2.0, f],
    ], dtype=np.float64)


def matrix_to_conic(matrix):
    m = np.asarray(matrix, dtype=np.float64)
    return ConicCoefficients(
        float(m[0, 0]), float(m[0, 1] + m[1, 0]), float(m[1, 1]),
        float(m[0, 2] + m[2, 0]), float(m[1, 2] + m[2, 1]), float(m[2, 2]),
    )


def conic_from_points(points):
    """
    求经过五个点的二次曲线。

    数学原理:
    每个点 (x, y) 给出一个关于六个系数的线性方程
        A·x² + B·xy + C·y² + D·x + E·y + F = 0
    五个点组成一个 5x6 的齐次线性方程组。当系数矩阵的秩为 5 时，解空间
    是一维的，取其零空间向量 (奇异值分解中最小奇异值对应的右奇异向量)
    即可。结果除以绝对值最大的系数，使该系数为 1。

    Args:
        points: 五个点 [(x, y), ...]。

    Returns:
        ConicCoefficients: 曲线系数。

    Raises:
        ValueError: 点的个数不是 5，或者这些点不能唯一确定一条二次曲线
                    (例如其中四点共线)。
    """
    pts = np.asarray(points, dtype=np.float64)
    if pts.shape != (5, 2):
        raise ValueError(f"需要恰好五个点，而不是 {len(points)} 个。")

    x, y = pts[:, 0], pts[:, 1]
    system = np.column_stack([x * x, x * y, y * y, x, y, np.ones(5)])
    _, singular_values, vh = np.linalg.svd(system)
    if singular_values[-1] <= EPSILON * singular_values[0]:
        raise ValueError("这五个点不能唯一确定一条二次曲线。")

    solution = vh[-1]
    solution = solution / solution[np.argmax(np.abs(solution))]
    return ConicCoefficients(*(float(v) + 0.0 for v in solution))

# ------------------------------------------------------------------------------
# 抛物线的两种形式
# ------------------------------------------------------------------------------

def standard_to_vertex(parabola):
    """y = a·x² + b·x + c  ->  y = a·(x - h)² + k。"""
    a, b, c, i = parabola
    if a == 0:
        raise ValueError("a 为 0 时方程不是抛物线，没有顶点式。")
    return VertexParabola(a, -b / (2.0 * a), c - b * b / (4.0 * a), i)


def vertex_to_standard(parabola):
    """y = a·(x - h)² + k  ->  y = a·x² + b·x + c。"""
    a, h, k, i = parabola
    b = -2.0 * a * h
    return StandardParabola(a, b, a * h * h + k, i)

# ------------------------------------------------------------------------------
# 极值点 (轴对齐包围盒)
# ------------------------------------------------------------------------------

def circle_extreme_points(r, h, k):
    """圆在 y 最小、x 最小、y 最大、x 最大处的四个点 (上、左、下、右)。"""
    return (Point2D(h, k - r), Point2D(h - r, k), Point2D(h, k + r), Point2D(h + r, k))


def orthogonal_ellipse_extreme_points(rx, ry, h, k):
    """未旋转的椭圆的四个极值点，顺序与 `circle_extreme_points` 相同。"""
    if rx == ry:
        return circle_extreme_points(rx, h, k)
    return (Point2D(h, k - ry), Point2D(h - rx, k), Point2D(h, k + ry), Point2D(h + rx, k))


def ellipse_extreme_points(rx, ry, h, k, angle=0.0):
    """
    旋转椭圆在 x、y 方向上的四个极值点，按上、左、下、右的顺序返回。

    数学原理:
    椭圆上的点为
        x(t) = h + rx·cos(t)·cos(θ) - ry·sin(t)·sin(θ)
        y(t) = k + rx·cos(t)·sin(θ) + ry·sin(t)·cos(θ)
    令 x'(t) = 0 得 t = atan2(-ry·sin θ, rx·cos θ)，令 y'(t) = 0 得
    t = atan2(ry·cos θ, rx·sin θ)；两者再加上 π 就是另一侧的极值点。
    """
    if rx == ry:
        return circle_extreme_points(rx, h, k)
    if is_axis_aligned(angle):
        return orthogonal_ellipse_extreme_points(rx, ry, h, k)

    cos, sin = _cos_sin(angle)

    def at(t):
        return Point2D(h + rx * math.cos(t) * cos - ry * math.sin(t) * sin,
                       k + rx * math.cos(t) * sin + ry * math.sin(t) * cos)

    tx = math.atan2(-ry * sin, rx * cos)
    ty = math.atan2(ry * cos, rx * sin)
    left, right = sorted((at(tx), at(tx + math.pi)), key=lambda p: p.x)
    top, bottom = sorted((at(ty), at(ty + math.pi)), key=lambda p: p.y)
    return top, left, bottom, right

# ------------------------------------------------------------------------------
# 贝塞尔曲线
# ------------------------------------------------------------------------------

def standard_parabola_to_quadratic_bezier(parabola, left, right):
    values = kernels.standard_parabola_to_quadratic(
        float(parabola.a), float(parabola.b), float(parabola.c), float(left), float(right))
    return _quadratic_from_array(values)


def vertex_parabola_to_quadratic_bezier(parabola, left, right):
    values = kernels.vertex_parabola_to_quadratic(
        float(parabola.a), float(parabola.h), float(parabola.k), float(left), float(right))
    return _quadratic_from_array(values)


def _quadratic_from_array(values):
    ax, ay, bx, by, cx, cy = (float(v) for v in values)
    return QuadraticBezierPoints(Point2D(ax, ay), Point2D(bx, by), Point2D(cx, cy))


def quadratic_to_cubic_bezier(q0, q1, q2):
    """
    把二次贝塞尔曲线的三个控制点升阶为三次贝塞尔曲线的四个控制点。

    这是精确转换：两条曲线在每个参数 t 处都重合。
    """
    values = kernels.quadratic_to_cubic(
        float(q0[0]), float(q0[1]), float(q1[0]), float(q1[1]), float(q2[0]), float(q2[1]))
    return BezierControlPoints.from_array(values)


def parabola_x_range(angle, bounds):
    """
    求抛物线在其局部坐标系中需要覆盖的 x 区间。

    - 轴对齐 (旋转角为 π 的整数倍) 时只需要矩形的左右边界；旋转 π 时
      局部 x 轴与屏幕 x 轴方向相反，区间随之取反。
    - 其他角度时，把矩形的四个角点投影到局部 x 轴上 (x·cos + y·sin)，
      取投影的最小值和最大值，保证旋转后的曲线覆盖整个矩形。
    """
    if is_axis_aligned(angle):
        if math.cos(angle) > 0:
            return bounds.left, bounds.right
        return -bounds.right, -bounds.left

    cos, sin = _cos_sin(angle)
    projections = [p.x * cos + p.y * sin for p in bounds.corners()]
    return min(projections), max(projections)


def parabola_to_bezier(parabola, bounds):
    """
    把抛物线在给定矩形范围内的一段弧转换为三次贝塞尔控制点。

    Args:
        parabola (StandardParabola | VertexParabola): 抛物线参数。
        bounds (Rectangle): 视口矩形。

    Returns:
        BezierControlPoints: 抛物线局部坐标系中的四个控制点。旋转角
        `parabola.i` 由渲染端施加。
    """
    if isinstance(parabola, VertexParabola):
        to_quadratic = vertex_parabola_to_quadratic_bezier
    elif isinstance(parabola, StandardParabola):
        to_quadratic = standard_parabola_to_quadratic_bezier
    else:
        raise TypeError(f"不支持的抛物线类型: {type(parabola).__name__}")
    left, right = parabola_x_range(parabola.i, bounds)
    return quadratic_to_cubic_bezier(*to_quadratic(parabola, left, right))


def bezier_point(control_points, t):
    """
    用 Bernstein 多项式求任意阶贝塞尔曲线在参数 t 处的点。
    """
    n = len(control_points) - 1
    x = y = 0.0
    for index, (px, py) in enumerate(control_points):
        weight = math.comb(n, index) * (1.0 - t) ** (n - index) * t ** index
        x += weight * px
        y += weight * py
    return Point2D(x, y)
