"""
导出文档模型 - 流水线的终态产物
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from .page import PageSlice


class PageImage(BaseModel):
    """单页落版信息"""
    order_index: int
    slice: PageSlice
    x_units: float
    y_units: float       # 距页面顶边
    width_units: float
    height_units: float
    jpeg_size: int = Field(0, description="压缩后字节数")


class ExportedDocument(BaseModel):
    """导出文档（写出一次后，工作态即被丢弃）"""
    title: str
    output_name: str
    page_width_units: float
    page_height_units: float
    pages: list[PageImage] = Field(default_factory=list)
    pdf_bytes: bytes = b""

    # 保存后回填
    output_path: Path | None = None

    model_config = {"arbitrary_types_allowed": True}

    @property
    def page_count(self) -> int:
        return len(self.pages)
