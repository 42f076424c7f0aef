# conics/api/schemas.py

"""
================================================================================
 API数据结构手册 (conics/api/schemas.py)
================================================================================

致API使用者（尤其是渲染端/前端工程师）：

这个文件精确定义了你需要发送给后端以及从后端接收的所有JSON对象的格式。
后端服务会严格按照此文件定义的结构来验证请求和生成响应。

主要的数据结构：
1. `RenderRequest`: 发送给 `/render` 端点的对象，包含视口大小和一组图形。
2. `RenderResponse`: `/render` 端点返回的对象，包含每个图形的几何数据。
3. `ConicSectionShape`: 发送给 `/classify` 端点的对象。
4. `ClipRequest` / `ClipResponse`: `/clip` 端点的请求和响应。

图形 (Shape) 是一个带标签的联合类型：每个图形对象都有一个 `type` 字段，
后端根据它选择对应的几何处理方式。`group` 类型可以嵌套任意图形。

坐标约定：
- 所有坐标都是“对象坐标”。缩放、平移等屏幕变换由渲染端负责。
- 角度一律使用弧度。
"""
from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, Field

# 单次扫描的最大宽度 (像素)。光栅化的耗时与视口宽度成正比。
MAX_VIEWPORT_SIZE = 16384

# ==============================================================================
# 1. 图形模型 (Shape Models)
# ==============================================================================

class ShapeBase(BaseModel):
    name: Optional[str] = Field(None, description="图形的名称，用于在响应中标识该图形。")

    @property
    def label(self):
        return self.name or self.type


class CircleShape(ShapeBase):
    """
    圆心为 (h, k)、半径为 r 的圆。
    """
    type: Literal["circle"] = Field(description="对象的类型，固定为 'circle'。")
    h: float = Field(..., description="圆心的横坐标。")
    k: float = Field(..., description="圆心的纵坐标。")
    r: float = Field(..., ge=0, description="半径，必须 >= 0。半径为 0 时退化为一个点。")


class EllipseShape(ShapeBase):
    """
    中心为 (h, k)、半轴为 rx, ry、旋转角为 angle 的椭圆。
    """
    type: Literal["ellipse"] = Field(description="对象的类型，固定为 'ellipse'。")
    h: float
    k: float
    rx: float = Field(..., gt=0, description="x 方向的半轴长度。")
    ry: float = Field(..., gt=0, description="y 方向的半轴长度。")
    angle: float = Field(0.0, description="旋转角 (弧度)。")


class HyperbolaShape(ShapeBase):
    """
    中心为 (h, k)、半轴为 rx, ry、旋转角为 angle 的双曲线 x'²/rx² - y'²/ry² = 1。
    """
    type: Literal["hyperbola"] = Field(description="对象的类型，固定为 'hyperbola'。")
    h: float
    k: float
    rx: float = Field(..., gt=0)
    ry: float = Field(..., gt=0)
    angle: float = Field(0.0, description="旋转角 (弧度)。")


class ConicSectionShape(ShapeBase):
    """
    一般二次曲线 Ax²+Bxy+Cy²+Dx+Ey+F=0。
    """
    type: Literal["conic_section"] = Field(description="对象的类型，固定为 'conic_section'。")
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float


class StandardParabolaShape(ShapeBase):
    """
    标准式抛物线 y = a·x² + b·x + c。
    """
    type: Literal["standard_parabola"] = Field(description="对象的类型，固定为 'standard_parabola'。")
    a: float
    b: float
    c: float
    i: float = Field(0.0, description="旋转角 (弧度)。")


class VertexParabolaShape(ShapeBase):
    """
    顶点式抛物线 y = a·(x - h)² + k。
    """
    type: Literal["vertex_parabola"] = Field(description="对象的类型，固定为 'vertex_parabola'。")
    a: float
    h: float
    k: float
    i: float = Field(0.0, description="旋转角 (弧度)。")


class LineShape(ShapeBase):
    """
    经过点 (x, y)、方向为 (i, j) 的无限长直线。方向不能为零向量。
    """
    type: Literal["line"] = Field(description="对象的类型，固定为 'line'。")
    x: float
    y: float
    i: float
    j: float


class QuadraticBezierShape(ShapeBase):
    type: Literal["quadratic_bezier"] = Field(description="对象的类型，固定为 'quadratic_bezier'。")
    points: List[List[float]] = Field(..., min_length=3, max_length=3,
                                      description="三个控制点，格式为 [[x, y], [x, y], [x, y]]。")


class CubicBezierShape(ShapeBase):
    type: Literal["cubic_bezier"] = Field(description="对象的类型，固定为 'cubic_bezier'。")
    points: List[List[float]] = Field(..., min_length=4, max_length=4,
                                      description="四个控制点。")


class GroupShape(ShapeBase):
    """
    一组图形。渲染时依次处理其中的每一个图形。
    """
    type: Literal["group"] = Field(description="对象的类型，固定为 'group'。")
    shapes: List["Shape"] = Field(default_factory=list)


Shape = Annotated[
    Union[
        CircleShape, EllipseShape, HyperbolaShape, ConicSectionShape,
        StandardParabolaShape, VertexParabolaShape, LineShape,
        QuadraticBezierShape, CubicBezierShape, GroupShape,
    ],
    Field(discriminator="type"),
]

GroupShape.model_rebuild()

# ==============================================================================
# 2. 请求体模型 (Request Body Models)
# ==============================================================================

class Viewport(BaseModel):
    """
    视口大小。曲线在 x ∈ [0, width) 内以单位步长扫描。
    """
    width: int = Field(..., ge=1, le=MAX_VIEWPORT_SIZE)
    height: int = Field(..., ge=1, le=MAX_VIEWPORT_SIZE)


class RenderRequest(BaseModel):
    viewport: Viewport
    shapes: List[Shape] = Field(..., description="需要渲染的图形数组，数组中可以混合各种类型。")


class RectangleModel(BaseModel):
    x: float = 0.0
    y: float = 0.0
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)


class ClipRequest(BaseModel):
    line: LineShape
    rect: RectangleModel

# ==============================================================================
# 3. 响应体模型 (Response Body Models)
# ==============================================================================

class RenderedShape(BaseModel):
    """
    一个图形的几何数据。

    - `polylines`: 折线数组，每条折线是一组 [x, y] 点，按顺序连接即可。
    - `beziers`: 三次贝塞尔曲线数组，每条曲线是四个 [x, y] 控制点。
    - `rotation`: 绘制 `beziers` 前需要施加的旋转角 (弧度，绕原点)。
    """
    name: str
    type: str
    polylines: List[List[List[float]]] = Field(default_factory=list)
    beziers: List[List[List[float]]] = Field(default_factory=list)
    rotation: float = 0.0


class PerformanceMetrics(BaseModel):
    calculation_time_ms: float
    shapes_rendered: int


class RenderResponse(BaseModel):
    shapes: List[RenderedShape]
    skipped: List[str] = Field(default_factory=list, description="因参数无效而被跳过的图形名称。")
    performance: Optional[PerformanceMetrics] = None


class ClassifyResponse(BaseModel):
    type: str
    discriminant: float


class ClipResponse(BaseModel):
    points: List[List[float]]
