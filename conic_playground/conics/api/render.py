# conics/api/render.py

"""
================================================================================
 渲染分派模块 (conics/api/render.py)
================================================================================

模块功能:
本模块是API层与几何引擎之间的边界。它根据图形的 `type` 标签，只在这里做
一次分派，把每种图形交给对应的几何处理流程：

- circle / ellipse / hyperbola / conic_section: 转换为二次曲线系数后光栅化，
  得到折线。
- standard_parabola / vertex_parabola: 转换为三次贝塞尔控制点，并附带旋转角。
- line: 与视口矩形求交，只有得到两个交点时才绘制。
- quadratic_bezier: 升阶为三次贝塞尔曲线。
- cubic_bezier: 原样返回控制点。
- group: 递归处理其中的每一个图形。

错误处理:
单个图形的参数无效 (例如直线的方向为零向量) 时，只跳过该图形并记录一条
警告日志，其余图形照常渲染。
"""
import logging

from conics.geometry.clipping import clip_line_to_rect
from conics.geometry.conversion import (
    circle_to_conic, ellipse_to_conic, hyperbola_to_conic, parabola_to_bezier,
    quadratic_to_cubic_bezier,
)
from conics.geometry.primitives import (
    ConicCoefficients, LineParams, Rectangle, ScanDomain, StandardParabola,
    VertexParabola,
)
from conics.tracer.stitch import rasterize_conic
from .schemas import RenderedShape

logger = logging.getLogger(__name__)


def shape_to_conic(shape):
    """
    把可以写成二次曲线的图形转换为系数；其他图形返回 None。
    """
    if shape.type == 'conic_section':
        return ConicCoefficients(shape.a, shape.b, shape.c, shape.d, shape.e, shape.f)
    if shape.type == 'circle':
        return circle_to_conic(shape.r, shape.h, shape.k)
    if shape.type == 'ellipse':
        return ellipse_to_conic(shape.rx, shape.ry, shape.h, shape.k, shape.angle)
    if shape.type == 'hyperbola':
        return hyperbola_to_conic(shape.rx, shape.ry, shape.h, shape.k, shape.angle)
    return None


def _points(points):
    return [[float(p[0]), float(p[1])] for p in points]


def render_shape(shape, viewport):
    """
    计算单个图形在视口中的几何数据。

    Args:
        shape: `schemas.Shape` 中的任意一种图形。
        viewport (schemas.Viewport): 视口大小。

    Returns:
        list[RenderedShape]: 普通图形返回一个元素；group 返回其成员的结果。

    Raises:
        ValueError: 图形的参数无效 (包括 `InvalidLineDirection`)。
    """
    if shape.type == 'group':
        rendered = []
        for member in shape.shapes:
            rendered.extend(render_shape(member, viewport))
        return rendered

    result = RenderedShape(name=shape.label, type=shape.type)
    bounds = Rectangle(0, 0, viewport.width, viewport.height)

    conic = shape_to_conic(shape)
    if conic is not None:
        domain = ScanDomain.from_width(viewport.width)
        result.polylines = [_points(polyline) for polyline in rasterize_conic(conic, domain)]
    elif shape.type == 'standard_parabola':
        parabola = StandardParabola(shape.a, shape.b, shape.c, shape.i)
        result.beziers = [_points(parabola_to_bezier(parabola, bounds))]
        result.rotation = shape.i
    elif shape.type == 'vertex_parabola':
        parabola = VertexParabola(shape.a, shape.h, shape.k, shape.i)
        result.beziers = [_points(parabola_to_bezier(parabola, bounds))]
        result.rotation = shape.i
    elif shape.type == 'line':
        points = clip_line_to_rect(LineParams(shape.x, shape.y, shape.i, shape.j), bounds)
        if len(points) > 1:
            result.polylines = [_points(points[:2])]
    elif shape.type == 'quadratic_bezier':
        result.beziers = [_points(quadratic_to_cubic_bezier(*shape.points))]
    elif shape.type == 'cubic_bezier':
        result.beziers = [_points(shape.points)]
    else:
        raise ValueError(f"不支持的图形类型: {shape.type}")
    return [result]


def render_shapes(shapes, viewport):
    """
    依次渲染一组图形，跳过参数无效的图形。

    Returns:
        tuple: (rendered, skipped)。rendered 是 RenderedShape 列表，
               skipped 是被跳过的图形名称列表。
    """
    rendered, skipped = [], []
    for shape in shapes:
        if shape.type == 'group':
            members, members_skipped = render_shapes(shape.shapes, viewport)
            rendered.extend(members)
            skipped.extend(members_skipped)
            continue
        try:
            rendered.extend(render_shape(shape, viewport))
        except ValueError as e:
            logger.warning("跳过图形 %s: %s", shape.label, e)
            skipped.append(shape.label)
    return rendered, skipped
