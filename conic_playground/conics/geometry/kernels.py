# conics/geometry/kernels.py

"""
================================================================================
 高性能几何计算内核 (conics/geometry/kernels.py)
================================================================================

模块功能:
本模块是整个绘制引擎的“计算内核”。它包含了所有底层的、纯粹的数值运算函数，
例如对给定的 x 求解二次曲线上的 y、求直线与线段的交点、把抛物线转换为
贝塞尔控制点等。光栅化、裁剪和曲线转换都建立在这些函数之上。

核心技术 - Numba JIT (即时编译):
- **性能瓶颈**: 光栅化一条曲线需要对视口宽度内的每一个整数 x 都求解一次
  二次方程，而且每条曲线至少要做四次扫描。纯Python在这种密集的逐点运算中
  速度较慢。
- **解决方案**: 我们使用Numba库的`@njit`装饰器，在函数第一次被调用时把它
  编译为机器码，并通过`cache=True`把编译结果缓存到磁盘。

使用约定:
本模块中的所有函数都工作在“Numba世界”中，它们只接受标量浮点数或NumPy数组，
并返回标量、元组或NumPy数组。把结果包装成命名元组等Python对象的工作由
`conversion.py`、`clipping.py` 和 `tracer` 包完成。

[返回格式说明]
- `conic_y` 返回 `(y, ok)`。当 `ok` 为 False 时该 x 处没有实数解，此时 `y`
  的值没有意义，调用者绝不能使用它。
- 所有求交点函数 (intersect_*) 都遵循统一的返回格式：一个元组 `(results, count)`。
  - `results`: 一个固定的 2x2 NumPy数组，用于存放最多两个点的坐标。
  - `count`: 一个整数(0, 1, or 2)，表示实际找到的交点数量。
"""
import numpy as np
from numba import njit

# 定义一个微小量，用于在JIT编译的代码中进行浮点数比较，避免精度问题。
EPSILON = 1e-9

# 二次贝塞尔升阶为三次贝塞尔时使用的系数。
TWO_THIRDS = 2.0 / 3.0

@njit(cache=True)
def y_squared_term_vanishes(a, b, c):
    """
    判断 C 相对于二次项 A、B、C 是否可以忽略。

    二次曲线的系数可以整体乘以任意非零常数，而半径很大的圆在归一化后
    各项系数都很小，因此这里与二次项的量级比较，而不是与固定的阈值比较。
    """
    return abs(c) <= EPSILON * max(abs(a), abs(b), abs(c))

@njit(cache=True)
def conic_y(x, a, b, c, d, e, f, root_sign):
    """
    对给定的 x，求解二次曲线 Ax²+Bxy+Cy²+Dx+Ey+F=0 上的 y。

    数学原理:
    固定 x 之后，方程变为关于 y 的一元二次方程：
        C·y² + (B·x+E)·y + (A·x²+D·x+F) = 0
    `root_sign` 选择取正根还是负根：
        y = (-(B·x+E) + root_sign·sqrt(disc)) / (2C)
    其中 disc = (B·x+E)² - 4·C·(A·x²+D·x+F)。
    为避免两数相近时相减造成的精度损失，先求出绝对值较大的根 q/C，
    另一个根由韦达定理 (两根之积为常数项/C) 得到。
    当 C 可以忽略时方程退化为一次方程，两个根重合。

    Args:
        x (float): 采样点的横坐标。
        a, b, c, d, e, f (float): 二次曲线的六个系数。
        root_sign (int): +1 或 -1。

    Returns:
        tuple: (y, ok)。ok 为 False 表示该 x 处没有实数解。
    """
    linear = b * x + e
    constant = a * x * x + d * x + f

    if y_squared_term_vanishes(a, b, c):
        if abs(linear) <= EPSILON * (abs(b * x) + abs(e)):
            return np.nan, False
        return -constant / linear, True

    disc = linear * linear - 4.0 * c * constant
    if disc < 0.0:
        return np.nan, False

    root = np.sqrt(disc)
    if linear >= 0.0:
        q = -0.5 * (linear + root)
        q_is_requested = root_sign < 0
    else:
        q = -0.5 * (linear - root)
        q_is_requested = root_sign > 0

    if q == 0.0:
        y = 0.0
    elif q_is_requested:
        y = q / c
    else:
        y = constant / q
    if not np.isfinite(y):
        return np.nan, False
    return y, True

@njit(cache=True)
def intersect_line_segment(lx, ly, li, lj, s0x, s0y, s1x, s1y):
    """
    计算一条无限长直线与一条线段的交点。

    数学原理:
    直线写作 L + ta·d，线段写作 S0 + tb·v (0 <= tb <= 1)。两式相等时，
    分别与 v 和 d 做二维叉积即可解出 ta 和 tb：
        ta = cross(S0 - L, v) / cross(d, v)
        tb = cross(L - S0, d) / cross(v, d)
    只有当 tb 落在线段的参数区间 [0, 1] 内时，交点才有效。
    若直线与线段平行且共线，则返回线段的两个端点。

    返回一个元组 (results, count)。
    """
    results = np.full((2, 2), np.nan, dtype=np.float64)
    vi = s1x - s0x
    vj = s1y - s0y

    ua = vi * (ly - s0y) - vj * (lx - s0x)
    ub = li * (ly - s0y) - lj * (lx - s0x)
    det = vj * li - vi * lj

    if abs(det) < EPSILON:
        if abs(ua) < EPSILON:
            # 共线：线段上有无穷多个交点，只保留两个端点。
            results[0, 0] = s0x
            results[0, 1] = s0y
            results[1, 0] = s1x
            results[1, 1] = s1y
            return results, 2
        return results, 0

    ta = ua / det
    tb = ub / det
    if tb < -EPSILON or tb > 1.0 + EPSILON:
        return results, 0

    results[0, 0] = lx + ta * li
    results[0, 1] = ly + ta * lj
    return results, 1

@njit(cache=True)
def intersect_conic_line(a, b, c, d, e, f, x1, y1, x2, y2):
    """
    计算二次曲线与经过两点 (x1, y1)、(x2, y2) 的直线的交点。

    数学原理:
    把参数式 x = x1 + t·dx, y = y1 + t·dy 代入二次曲线方程，得到关于 t 的
    一元二次方程 qa·t² + qb·t + qc = 0，解出 t 后再代回参数式。

    返回一个元组 (results, count)。
    """
    results = np.full((2, 2), np.nan, dtype=np.float64)
    dx = x2 - x1
    dy = y2 - y1

    qa = a * dx * dx + b * dx * dy + c * dy * dy
    qb = (2.0 * a * x1 * dx + b * x1 * dy + b * y1 * dx
          + 2.0 * c * y1 * dy + d * dx + e * dy)
    qc = a * x1 * x1 + b * x1 * y1 + c * y1 * y1 + d * x1 + e * y1 + f

    # 零值判断都与各项的量级比较，系数整体缩放时结果不变。
    qa_scale = abs(a * dx * dx) + abs(b * dx * dy) + abs(c * dy * dy)
    qb_scale = (abs(2.0 * a * x1 * dx) + abs(b * x1 * dy) + abs(b * y1 * dx)
                + abs(2.0 * c * y1 * dy) + abs(d * dx) + abs(e * dy))
    qc_scale = (abs(a * x1 * x1) + abs(b * x1 * y1) + abs(c * y1 * y1)
                + abs(d * x1) + abs(e * y1) + abs(f))

    if abs(qa) <= EPSILON * qa_scale:
        # 直线平行于渐近线方向 (或曲线本身退化)，方程只剩一次项。
        if abs(qb) <= EPSILON * qb_scale:
            return results, 0
        t = -qc / qb
        results[0, 0] = x1 + t * dx
        results[0, 1] = y1 + t * dy
        return results, 1

    disc = qb * qb - 4.0 * qa * qc
    if abs(disc) <= EPSILON * (qb * qb + 4.0 * abs(qa) * qc_scale):
        t = -qb / (2.0 * qa)
        results[0, 0] = x1 + t * dx
        results[0, 1] = y1 + t * dy
        return results, 1

    if disc < 0.0:
        return results, 0

    root = np.sqrt(disc)
    t1 = (-qb + root) / (2.0 * qa)
    t2 = (-qb - root) / (2.0 * qa)
    results[0, 0] = x1 + t1 * dx
    results[0, 1] = y1 + t1 * dy
    results[1, 0] = x1 + t2 * dx
    results[1, 1] = y1 + t2 * dy
    return results, 2

@njit(cache=True)
def standard_parabola_to_quadratic(a, b, c, x1, x2):
    """
    求表示抛物线 y = a·x² + b·x + c 在 [x1, x2] 上一段弧的二次贝塞尔曲线。

    数学原理:
    起点和终点取抛物线在 x1、x2 处的点；中间控制点是两个端点处切线的交点。
    抛物线本身就是二次曲线，因此这个表示是精确的。
    中间控制点横坐标为 (x1 + x2) / 2，纵坐标为
        a·(x2·x1 - x1²) + b·(x2 - x1)/2 + y1

    Returns:
        np.array: [ax, ay, bx, by, cx, cy]。
    """
    y1 = a * x1 * x1 + b * x1 + c
    y2 = a * x2 * x2 + b * x2 + c
    cx = (x2 + x1) * 0.5
    cy = a * (x2 * x1 - x1 * x1) + b * (x2 - x1) * 0.5 + y1
    return np.array([x1, y1, cx, cy, x2, y2], dtype=np.float64)

@njit(cache=True)
def vertex_parabola_to_quadratic(a, h, k, left, right):
    """
    求表示顶点式抛物线 y = a·(x - h)² + k 在 [left, right] 上一段弧的二次贝塞尔曲线。

    中间控制点同样取两端切线的交点：
        cy = a·(h·left + left·right - h·right - left²) + y1

    Returns:
        np.array: [ax, ay, bx, by, cx, cy]。
    """
    y1 = a * (left - h) * (left - h) + k
    y2 = a * (right - h) * (right - h) + k
    cx = (right + left) * 0.5
    cy = a * (h * left + left * right - h * right - left * left) + y1
    return np.array([left, y1, cx, cy, right, y2], dtype=np.float64)

@njit(cache=True)
def quadratic_to_cubic(ax, ay, bx, by, cx, cy):
    """
    把二次贝塞尔曲线升阶为三次贝塞尔曲线 (精确转换)。

    数学原理:
        C0 = Q0
        C1 = Q0 + 2/3·(Q1 - Q0)
        C2 = Q2 + 2/3·(Q1 - Q2)
        C3 = Q2

    Returns:
        np.array: [aX, aY, bX, bY, cX, cY, dX, dY]。
    """
    return np.array([
        ax, ay,
        ax + TWO_THIRDS * (bx - ax), ay + TWO_THIRDS * (by - ay),
        cx + TWO_THIRDS * (bx - cx), cy + TWO_THIRDS * (by - cy),
        cx, cy,
    ], dtype=np.float64)
