# conics/geometry/clipping.py

"""
================================================================================
 直线裁剪模块 (conics/geometry/clipping.py)
================================================================================

模块功能:
求一条无限长直线在轴对齐矩形 (通常是视口) 内的可见部分，即直线与矩形
边界的 0、1 或 2 个交点。

工作原理:
1.  把矩形拆成四条边 (上、右、下、左)，依次调用内核函数
    `kernels.intersect_line_segment` 求直线与每条边的交点。
2.  只有落在边的参数区间 [0, 1] 内的交点才被保留。
3.  经过角点的直线会同时与相邻两条边相交；与某条边共线的直线会返回该边的
    两个端点，而相邻的边又会再次报告同样的角点。所有交点都经过
    `normalize_point` 规范化后去重，保证每个角点只被报告一次。
"""
import math

from conics.geometry import kernels
from conics.geometry.primitives import InvalidLineDirection, Point2D, normalize_point


def clip_line_to_rect(line, rect):
    """
    计算直线与矩形边界的交点。

    Args:
        line (LineParams): 直线经过的点 (x, y) 和方向 (i, j)。
        rect (Rectangle): 轴对齐矩形 (x, y, width, height)。

    Returns:
        list[Point2D]: 0、1 或 2 个交点，按发现的顺序排列。

    Raises:
        InvalidLineDirection: 方向向量为零向量。
    """
    lx, ly, li, lj = (float(v) for v in line)
    if li == 0.0 and lj == 0.0:
        raise InvalidLineDirection(f"直线的方向向量不能为零向量: {line}")
    # 内核的平行判断与方向向量的长度有关，先化为单位向量。
    length = math.hypot(li, lj)
    li, lj = li / length, lj / length

    corners = rect.corners()
    edges = zip(corners, corners[1:] + corners[:1])

    seen = set()
    points = []
    for start, end in edges:
        results, count = kernels.intersect_line_segment(
            lx, ly, li, lj,
            float(start.x), float(start.y), float(end.x), float(end.y))
        for i in range(count):
            key = normalize_point(results[i])
            if key in seen:
                continue
            seen.add(key)
            points.append(Point2D(*key))
    return points
