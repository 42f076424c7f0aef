# conics/geometry/primitives.py

"""
================================================================================
 几何图元模块 (conics/geometry/primitives.py)
================================================================================

模块功能:
本模块负责两件核心任务：
1.  **数据表示**: 定义引擎使用的所有值类型（点、二次曲线系数、扫描区间、
    矩形、直线、抛物线、贝塞尔控制点）在内存中的标准表示方式。它们都是
    不可变的命名元组，可以安全地在线程之间共享。
2.  **点的规范化**: 为点生成一个可哈希、可比较的表示，用于去除重复的交点。

工作原理 (点的规范化):
- **核心挑战**: 直线与矩形相交时，经过矩形角点的直线会同时与相邻的两条边
  相交，得到“同一个”角点两次。但这两次计算走的是不同的浮点运算路径，
  结果可能存在微小的差异，直接比较会被误认为是两个不同的点。
- **解决方案**: 所有坐标都四舍五入到统一的小数位数 (`HASH_PRECISION`) 后
  再比较，这消除了微小的计算噪声，保证每个角点只被报告一次。

二次曲线分类:
`ConicCoefficients.classify()` 根据判别式 B²-4AC 和 3x3 系数矩阵的行列式
计算曲线的类型。类型是派生值，每次调用时重新计算，从不存储。
"""
import math
from collections import namedtuple

import numpy as np

from conics.geometry.kernels import EPSILON, y_squared_term_vanishes

# 定义用于规范化和去重的浮点数精度。
HASH_PRECISION = 9

ROOT_POSITIVE = 1
ROOT_NEGATIVE = -1

class InvalidLineDirection(ValueError):
    """直线的方向向量为零向量，无法确定一条直线。"""


Point2D = namedtuple('Point2D', ['x', 'y'])
LineParams = namedtuple('LineParams', ['x', 'y', 'i', 'j'])
QuadraticBezierPoints = namedtuple('QuadraticBezierPoints', ['a', 'b', 'c'])


class ConicCoefficients(namedtuple('ConicCoefficients', ['a', 'b', 'c', 'd', 'e', 'f'])):
    """
    一般二次曲线方程 Ax²+Bxy+Cy²+Dx+Ey+F=0 的六个系数。
    """
    __slots__ = ()

    @property
    def discriminant(self):
        """判别式 B² - 4AC。"""
        return self.b * self.b - 4.0 * self.a * self.c

    @property
    def determinant(self):
        """3x3 对称系数矩阵的行列式；为 0 时曲线退化。"""
        return sum(self._determinant_terms())

    def _determinant_terms(self):
        a, b, c, d, e, f = (float(v) for v in self)
        return (a * c * f, b * e * d / 4.0,
                -a * e * e / 4.0, -c * d * d / 4.0, -f * b * b / 4.0)

    @property
    def is_single_valued(self):
        """C 相对于二次项可以忽略时，每个 x 至多对应一个 y。"""
        return bool(y_squared_term_vanishes(float(self.a), float(self.b), float(self.c)))

    def classify(self):
        """
        判断二次曲线的类型。

        所有零值判断都与同一量级的项比较 (判别式与二次项的平方比较，行列式
        与展开式中各项的绝对值之和比较)，因此系数整体缩放不会改变结果。

        Returns:
            str: 'point', 'circle', 'ellipse', 'imaginary', 'parabola', 'line',
                 'parallel_lines', 'crossing_lines', 'rectangular_hyperbola',
                 'hyperbola' 或 'degenerate' 之一。
        """
        a, b, c, d, e, f = self
        quadratic_scale = max(abs(a), abs(b), abs(c))
        if quadratic_scale == 0:
            return 'line' if d != 0 or e != 0 else 'degenerate'

        disc = self.discriminant
        terms = self._determinant_terms()
        det = sum(terms)
        degenerate = abs(det) <= EPSILON * sum(abs(term) for term in terms)

        if abs(disc) <= EPSILON * quadratic_scale * quadratic_scale:
            return 'parallel_lines' if degenerate else 'parabola'
        if disc < 0:
            if degenerate:
                return 'point'
            if (a + c) * det > 0:
                return 'imaginary'
            if abs(a - c) <= EPSILON * quadratic_scale and abs(b) <= EPSILON * quadratic_scale:
                return 'circle'
            return 'ellipse'
        if degenerate:
            return 'crossing_lines'
        if abs(a + c) <= EPSILON * quadratic_scale:
            return 'rectangular_hyperbola'
        return 'hyperbola'


class ScanDomain(namedtuple('ScanDomain', ['xmin', 'xmax'])):
    """
    光栅化时对 x 进行采样的半开整数区间 [xmin, xmax)，步长为 1。
    """
    __slots__ = ()

    def __new__(cls, xmin, xmax):
        if isinstance(xmin, bool) or isinstance(xmax, bool) \
                or not isinstance(xmin, (int, np.integer)) \
                or not isinstance(xmax, (int, np.integer)):
            raise ValueError(f"扫描区间的边界必须是整数，而不是 ({xmin!r}, {xmax!r})。")
        if xmin > xmax:
            raise ValueError(f"扫描区间无效：xmin ({xmin}) 大于 xmax ({xmax})。")
        return super().__new__(cls, int(xmin), int(xmax))

    @classmethod
    def from_width(cls, width):
        return cls(0, width)

    @property
    def width(self):
        return self.xmax - self.xmin

    @property
    def last(self):
        """区间内最后一个采样点。"""
        return self.xmax - 1

    def __contains__(self, x):
        return self.xmin <= x < self.xmax


class Rectangle(namedtuple('Rectangle', ['x', 'y', 'width', 'height'])):
    """轴对齐矩形 (x, y, width, height)。"""
    __slots__ = ()

    @property
    def left(self):
        return min(self.x, self.x + self.width)

    @property
    def right(self):
        return max(self.x, self.x + self.width)

    @property
    def top(self):
        return min(self.y, self.y + self.height)

    @property
    def bottom(self):
        return max(self.y, self.y + self.height)

    def corners(self):
        """按顺时针顺序返回四个角点：左上、右上、右下、左下。"""
        return (
            Point2D(self.left, self.top),
            Point2D(self.right, self.top),
            Point2D(self.right, self.bottom),
            Point2D(self.left, self.bottom),
        )


# 标准式抛物线 y = a·x² + b·x + c；顶点式抛物线 y = a·(x - h)² + k。i 为旋转角 (弧度)。
StandardParabola = namedtuple('StandardParabola', ['a', 'b', 'c', 'i'], defaults=(0.0,))
VertexParabola = namedtuple('VertexParabola', ['a', 'h', 'k', 'i'], defaults=(0.0,))


class BezierControlPoints(namedtuple('BezierControlPoints', ['a', 'b', 'c', 'd'])):
    """三次贝塞尔曲线的四个控制点。"""
    __slots__ = ()

    @classmethod
    def from_array(cls, values):
        aX, aY, bX, bY, cX, cY, dX, dY = (float(v) for v in values)
        return cls(Point2D(aX, aY), Point2D(bX, bY), Point2D(cX, cY), Point2D(dX, dY))

    def as_tuple(self):
        """展开为 (aX, aY, bX, bY, cX, cY, dX, dY)。"""
        return tuple(coord for point in self for coord in point)


def check_root_sign(sign):
    if sign not in (ROOT_POSITIVE, ROOT_NEGATIVE):
        raise ValueError(f"根的符号必须是 +1 或 -1，而不是 {sign!r}。")
    return sign


def normalize_point(p):
    """
    为点创建一个规范化的、可哈希的表示。

    Args:
        p: 点的坐标 (x, y)，可以是元组、Point2D 或 NumPy 数组。

    Returns:
        tuple: 四舍五入后的坐标元组 (rounded_x, rounded_y)。
    """
    # 加 0.0 把 -0.0 统一为 0.0。
    return (round(float(p[0]), HASH_PRECISION) + 0.0, round(float(p[1]), HASH_PRECISION) + 0.0)


def is_axis_aligned(angle):
    """旋转角是否为 π 的整数倍。"""
    remainder = math.fmod(abs(angle), math.pi)
    return remainder < EPSILON or math.pi - remainder < EPSILON
