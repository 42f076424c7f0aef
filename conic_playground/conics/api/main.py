# conics/api/main.py

"""
================================================================================
 API端点手册 (conics/api/main.py)
================================================================================

致API使用者（尤其是渲染端/前端工程师）：

这个文件是API服务器的入口点。它使用FastAPI框架来设置和定义所有HTTP端点。
后端只负责“计算几何”：它返回折线和贝塞尔控制点，而绘制、缩放、平移都由
渲染端完成。

交互式文档 (Swagger UI):
1. 运行后端服务器，例如 `uvicorn conics.api.main:app`。
2. 在浏览器中打开 http://127.0.0.1:8000/docs。

核心端点:
- **`POST /render`**: 发送视口大小和一组图形 (`RenderRequest`)，返回每个图形的
  折线和贝塞尔控制点 (`RenderResponse`)。
- **`POST /classify`**: 发送一般二次曲线的系数，返回曲线的类型。
- **`POST /clip`**: 求一条直线在矩形内的可见部分。
"""
import logging
import time
from fastapi import FastAPI, HTTPException
from .schemas import (
    ClassifyResponse, ClipRequest, ClipResponse, ConicSectionShape,
    PerformanceMetrics, RenderRequest, RenderResponse,
)
from .render import render_shapes, shape_to_conic
from conics.geometry.clipping import clip_line_to_rect
from conics.geometry.primitives import InvalidLineDirection, LineParams, Rectangle

logging.basicConfig(format="[%(levelname)s] %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(
    title="二次曲线绘制引擎 (Conic Section Rendering Engine)",
    description="把圆、椭圆、抛物线、双曲线和直线转换为可直接绘制的折线与贝塞尔控制点。",
    version="1.0.0",
)

@app.post("/render", response_model=RenderResponse, tags=["Render"])
def render(request: RenderRequest):
    """
    计算一组图形在视口中的几何数据。

    **请求体 (Request Body)**:
    - 一个符合 `RenderRequest` 模型的JSON对象。

    **成功响应 (Success Response - HTTP 200)**:
    - `shapes`: 每个图形的折线 (`polylines`) 或贝塞尔控制点 (`beziers`)。
      曲线不在视口内时，对应的数组为空。
    - `skipped`: 因参数无效而被跳过的图形名称。一个图形无效不会影响其他图形。
    - `performance`: 本次请求的计算耗时。

    **错误响应 (Error Responses)**:
    - **HTTP 422 (Unprocessable Entity)**: 请求的JSON结构不符合模型定义，
      例如视口宽度超出范围或图形的 `type` 未知。
    """
    start_time = time.perf_counter()
    rendered, skipped = render_shapes(request.shapes, request.viewport)
    end_time = time.perf_counter()

    performance = PerformanceMetrics(
        calculation_time_ms=(end_time - start_time) * 1000,
        shapes_rendered=len(rendered),
    )
    logger.info("渲染了 %d 个图形，跳过 %d 个，耗时 %.2f ms",
                len(rendered), len(skipped), performance.calculation_time_ms)
    return RenderResponse(shapes=rendered, skipped=skipped, performance=performance)

@app.post("/classify", response_model=ClassifyResponse, tags=["Geometry"])
def classify(shape: ConicSectionShape):
    """
    判断一般二次曲线的类型 (圆、椭圆、抛物线、双曲线或退化情形)。
    """
    conic = shape_to_conic(shape)
    return ClassifyResponse(type=conic.classify(), discriminant=conic.discriminant)

@app.post("/clip", response_model=ClipResponse, tags=["Geometry"])
def clip(request: ClipRequest):
    """
    求直线与矩形边界的交点 (0、1 或 2 个)。

    **错误响应 (Error Responses)**:
    - **HTTP 400 (Bad Request)**: 直线的方向向量为零向量。
    """
    line = LineParams(request.line.x, request.line.y, request.line.i, request.line.j)
    rect = Rectangle(request.rect.x, request.rect.y, request.rect.width, request.rect.height)
    try:
        points = clip_line_to_rect(line, rect)
    except InvalidLineDirection as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ClipResponse(points=[[p.x, p.y] for p in points])

@app.get("/", include_in_schema=False)
def root():
    """根路径，用于简单的健康检查或服务发现。"""
    return {"message": "二次曲线绘制引擎正在运行。请访问 /docs 查看API文档。"}
