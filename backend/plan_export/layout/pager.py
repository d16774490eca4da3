"""
分页器 - 将缩放后的整幅截图按页高切成连续行带

职责：
1. 单页内容（落版高 ≤ 可用高）只产出一个切片
2. 多页内容按可用高逐页切分，页数 = ceil(落版高 / 可用高)
3. 切片首尾相接、不重叠、不丢行，按自上而下顺序产出

切分规则：
- 第i条切线（像素）= floor(i * 可用高 / 缩放比)
- 最后一页吸收全部取整余量（可能很薄，但不会丢掉）

测试要点：
- test_single_page: 单页
- test_page_count: 页数公式
- test_slices_contiguous: 连续不重叠
- test_heights_sum: 像素高度总和
- test_lazy_not_restartable: 惰性且不可重启
"""

from __future__ import annotations

import math
from typing import Iterator

from ..interfaces import GeometryError
from ..models import CapturedRaster, PageGeometry, PageSlice

# 页数计算的相对容差（吸收浮点噪声，不吞掉真实的亚像素余量）
_PAGE_COUNT_EPS = 1e-9


def page_count(raster_height: int, geometry: PageGeometry) -> int:
    """计算页数"""
    if raster_height <= 0:
        raise GeometryError(f"栅格高度无效: {raster_height}")

    total_placed = raster_height * geometry.scale_ratio
    available = geometry.available_height_units
    if available <= 0:
        raise GeometryError(f"可用高度无效: {available}")

    if total_placed <= available:
        return 1
    return max(1, math.ceil(total_placed / available - _PAGE_COUNT_EPS))


def paginate(raster: CapturedRaster | int, geometry: PageGeometry) -> Iterator[PageSlice]:
    """
    按页切分截图（生成器，惰性、有限、不可重启）

    Args:
        raster: 截图栅格，或直接给出像素高度
        geometry: 页面几何（缩放比在整次导出中不变）

    Yields:
        PageSlice，order_index 从0开始连续递增
    """
    height = raster.pixel_height if isinstance(raster, CapturedRaster) else int(raster)
    pages = page_count(height, geometry)

    # 单页
    if pages == 1:
        yield PageSlice(source_y_offset_px=0, height_px=height, order_index=0)
        return

    # 每页像素行数（不含取整）
    rows_per_page = geometry.available_height_units / geometry.scale_ratio
    if rows_per_page < 1:
        raise GeometryError(f"每页不足一个像素行: {rows_per_page:.4f}")

    # 浮点误差导致最后一页为空时少切一页
    while pages > 1 and math.floor((pages - 1) * rows_per_page) >= height:
        pages -= 1

    offset = 0
    for index in range(pages):
        if index == pages - 1:
            end = height
        else:
            end = math.floor((index + 1) * rows_per_page)
        yield PageSlice(
            source_y_offset_px=offset,
            height_px=end - offset,
            order_index=index,
        )
        offset = end
