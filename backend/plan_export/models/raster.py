"""
截图栅格模型 - 单次导出中唯一的一张整幅截图

只读：分页时每页按行带拷贝（copy-on-read），不修改原图
"""

from __future__ import annotations

from PIL import Image
from pydantic import BaseModel, Field, model_validator


class CapturedRaster(BaseModel):
    """截图栅格"""

    pixel_width: int = Field(..., gt=0, description="像素宽")
    pixel_height: int = Field(..., gt=0, description="像素高")
    image: Image.Image = Field(..., description="像素数据")
    magnification: float = Field(1.0, gt=0, description="截图放大倍率")

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    @model_validator(mode="after")
    def _check_size(self) -> CapturedRaster:
        if self.image.size != (self.pixel_width, self.pixel_height):
            raise ValueError(
                f"声明尺寸 {self.pixel_width}x{self.pixel_height} 与图像尺寸 {self.image.size} 不一致"
            )
        return self

    @classmethod
    def from_image(cls, image: Image.Image, magnification: float = 1.0) -> CapturedRaster:
        width, height = image.size
        return cls(
            pixel_width=width,
            pixel_height=height,
            image=image,
            magnification=magnification,
        )

    def crop_band(self, y_offset: int, height: int) -> Image.Image:
        """拷贝 [y_offset, y_offset+height) 行带（全宽）"""
        if y_offset < 0 or height <= 0 or y_offset + height > self.pixel_height:
            raise ValueError(
                f"行带越界: y={y_offset}, h={height}, 栅格高={self.pixel_height}"
            )
        return self.image.crop((0, y_offset, self.pixel_width, y_offset + height))

    def close(self) -> None:
        """释放像素缓冲"""
        self.image.close()
