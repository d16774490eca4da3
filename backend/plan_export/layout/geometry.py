"""
页面几何计算器 - 截图像素到纸张毫米的统一缩放

计算步骤：
1. 可用区 = 纸张 - 2 * 边距
2. 宽比 = 可用宽 / 像素宽，高比 = 可用高 / 像素高
3. 缩放比：
   - WIDTH:   取宽比（宽度撑满，高度交给分页器）
   - CONTAIN: 取 min(宽比, 高比)（整幅缩进单页）
   缩放比按整幅截图只算一次，所有页共用
   默认 WIDTH：min(宽比, 高比) 总把整幅缩进一页，超长内容永远不会分页；
   需要单页缩略时显式选 CONTAIN（page.fit: contain）
4. 落版尺寸 = 像素尺寸 * 缩放比
5. 水平居中 x = (纸宽 - 落版宽) / 2，y = 上边距

测试要点：
- test_scale_ratio_width_fit: 宽度撑满
- test_scale_ratio_contain: min(宽比, 高比)
- test_x_offset_centered: 水平居中
- test_zero_dimension: 退化尺寸抛GeometryError
"""

from __future__ import annotations

from ..interfaces import GeometryError
from ..models import FitMode, PageFormat, PageGeometry


def compute_geometry(
    raster_width: int,
    raster_height: int,
    page_format: PageFormat,
    fit: FitMode | str = FitMode.WIDTH,
) -> PageGeometry:
    """计算页面几何（纯函数）"""
    if raster_width <= 0 or raster_height <= 0:
        raise GeometryError(f"栅格尺寸无效: {raster_width}x{raster_height}")

    # 1. 可用区
    available_width = page_format.available_width_units
    available_height = page_format.available_height_units
    if available_width <= 0 or available_height <= 0:
        raise GeometryError(
            f"纸张 {page_format.name} 扣除边距 {page_format.margin_units} 后无可用区域"
        )

    # 2. 宽高比
    width_ratio = available_width / raster_width
    height_ratio = available_height / raster_height

    # 3. 统一缩放比
    fit = FitMode(fit)
    if fit is FitMode.CONTAIN:
        scale_ratio = min(width_ratio, height_ratio)
    else:
        scale_ratio = width_ratio

    # 4. 落版尺寸
    placed_width = raster_width * scale_ratio
    placed_height = raster_height * scale_ratio

    # 5. 落版位置
    return PageGeometry(
        page_width_units=page_format.width_units,
        page_height_units=page_format.height_units,
        margin_units=page_format.margin_units,
        scale_ratio=scale_ratio,
        placed_width_units=placed_width,
        placed_height_units=placed_height,
        x_offset_units=(page_format.width_units - placed_width) / 2,
        y_offset_units=page_format.margin_units,
    )
