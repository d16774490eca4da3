"""
版面模型 - 纸张规格 / 页面几何 / 分页切片

单位约定：
- *_units: 物理单位（毫米）
- *_px: 截图像素
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class FitMode(str, Enum):
    """缩放策略"""
    WIDTH = "width"       # 宽度撑满可用区，高度交给分页
    CONTAIN = "contain"   # 整幅内容缩进单页（min(宽比, 高比)）


class PageFormat(BaseModel):
    """纸张规格"""
    name: str
    width_units: float = Field(..., gt=0)
    height_units: float = Field(..., gt=0)
    margin_units: float = Field(10.0, ge=0)

    model_config = {"frozen": True}

    @property
    def available_width_units(self) -> float:
        return self.width_units - 2 * self.margin_units

    @property
    def available_height_units(self) -> float:
        return self.height_units - 2 * self.margin_units

    def landscape(self) -> PageFormat:
        """横向版本"""
        return self.model_copy(
            update={"width_units": self.height_units, "height_units": self.width_units}
        )

    def with_margin(self, margin_units: float) -> PageFormat:
        return self.model_copy(update={"margin_units": margin_units})


class PageGeometry(BaseModel):
    """页面几何（每次导出计算一次，所有页共用）"""
    page_width_units: float
    page_height_units: float
    margin_units: float
    scale_ratio: float = Field(..., gt=0, description="截图像素 → 毫米")
    placed_width_units: float
    placed_height_units: float
    x_offset_units: float   # 水平居中
    y_offset_units: float   # 固定上边距

    model_config = {"frozen": True}

    @property
    def available_width_units(self) -> float:
        return self.page_width_units - 2 * self.margin_units

    @property
    def available_height_units(self) -> float:
        return self.page_height_units - 2 * self.margin_units


class PageSlice(BaseModel):
    """分页切片（截图中的一条水平行带）"""
    source_y_offset_px: int = Field(..., ge=0)
    height_px: int = Field(..., gt=0)
    order_index: int = Field(..., ge=0)

    model_config = {"frozen": True}

    @property
    def end_y_px(self) -> int:
        return self.source_y_offset_px + self.height_px

    def placed_height_units(self, geometry: PageGeometry) -> float:
        """切片落版高度（毫米）"""
        return self.height_px * geometry.scale_ratio
