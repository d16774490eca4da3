"""
文档组装器 - 切片逐页写入PDF

职责：
1. 每个切片一页（纸张尺寸取自规格，毫米）
2. 切片按调用方的质量参数JPEG压缩后落版到 (x_offset, y_offset)
3. 全部在内存中完成，保存时先写临时文件再原子替换
4. 任一切片失败则整体失败，不留半成品文件

依赖：
- reportlab: PDF画布
- Pillow: 行带裁切与JPEG压缩

测试要点：
- test_assemble_page_count: 页数 = 切片数
- test_assemble_placement: 落版位置/尺寸
- test_assemble_empty_slices: 空切片序列
- test_save_atomic: 原子保存
- test_save_failure_no_partial: 保存失败不留文件
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..interfaces import AssemblyError, IDocumentAssembler, PlanExportError
from ..models import (
    CapturedRaster,
    ExportedDocument,
    PageFormat,
    PageGeometry,
    PageImage,
    PageSlice,
)

logger = logging.getLogger(__name__)


def jpeg_quality(image_quality: float) -> int:
    """(0,1] 质量映射为 Pillow 的 1..100 整数质量"""
    if not 0 < image_quality <= 1:
        raise AssemblyError(f"图像质量必须在 (0, 1] 内: {image_quality}")
    return max(1, min(100, round(image_quality * 100)))


class DocumentAssembler(IDocumentAssembler):
    """PDF组装器实现"""

    def __init__(self, creator: str = "plan_export"):
        self.creator = creator

    def assemble(
        self,
        raster: CapturedRaster,
        slices: Iterable[PageSlice],
        geometry: PageGeometry,
        page_format: PageFormat,
        title: str,
        image_quality: float,
        output_name: str | None = None,
    ) -> ExportedDocument:
        """组装文档（内存中）"""
        quality = jpeg_quality(image_quality)
        buffer = io.BytesIO()
        pages: list[PageImage] = []

        try:
            pdf = canvas.Canvas(
                buffer,
                pagesize=(page_format.width_units * mm, page_format.height_units * mm),
                pageCompression=1,
            )
            pdf.setTitle(title)
            pdf.setCreator(self.creator)

            for page_slice in slices:
                if page_slice.order_index != len(pages):
                    raise AssemblyError(
                        f"切片顺序异常: 期望 {len(pages)}，实际 {page_slice.order_index}"
                    )
                pages.append(self._draw_page(pdf, raster, page_slice, geometry, quality))
                pdf.showPage()

            if not pages:
                raise AssemblyError("没有可写入的页面")

            pdf.save()
        except PlanExportError:
            buffer.close()
            raise
        except Exception as e:
            buffer.close()
            raise AssemblyError(f"PDF组装失败（第{len(pages) + 1}页）: {e}") from e

        logger.info(f"PDF组装完成: {len(pages)} 页, {buffer.tell()} 字节")
        return ExportedDocument(
            title=title,
            output_name=output_name or f"{title}.pdf",
            page_width_units=page_format.width_units,
            page_height_units=page_format.height_units,
            pages=pages,
            pdf_bytes=buffer.getvalue(),
        )

    def _draw_page(
        self,
        pdf: canvas.Canvas,
        raster: CapturedRaster,
        page_slice: PageSlice,
        geometry: PageGeometry,
        quality: int,
    ) -> PageImage:
        """裁切行带、压缩并落版到当前页"""
        band = raster.crop_band(page_slice.source_y_offset_px, page_slice.height_px)
        if band.mode != "RGB":
            band = band.convert("RGB")

        jpeg = io.BytesIO()
        band.save(jpeg, format="JPEG", quality=quality, optimize=True)
        band.close()
        jpeg_size = jpeg.tell()
        jpeg.seek(0)

        width = geometry.placed_width_units
        height = page_slice.placed_height_units(geometry)
        x = geometry.x_offset_units
        y = geometry.y_offset_units

        # reportlab 原点在左下角
        pdf.drawImage(
            ImageReader(jpeg),
            x * mm,
            (geometry.page_height_units - y - height) * mm,
            width=width * mm,
            height=height * mm,
        )

        return PageImage(
            order_index=page_slice.order_index,
            slice=page_slice,
            x_units=x,
            y_units=y,
            width_units=width,
            height_units=height,
            jpeg_size=jpeg_size,
        )

    def save(self, document: ExportedDocument, output_path: Path) -> Path:
        """原子保存（临时文件 + 替换）"""
        if not document.pdf_bytes:
            raise AssemblyError("文档内容为空，无法保存")

        output_path = Path(output_path)
        tmp_name: str | None = None
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{output_path.stem}-", suffix=".part", dir=output_path.parent
            )
            with os.fdopen(fd, "wb") as f:
                f.write(document.pdf_bytes)
            os.replace(tmp_name, output_path)
            tmp_name = None
        except OSError as e:
            raise AssemblyError(f"PDF保存失败: {output_path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        document.output_path = output_path
        logger.info(f"PDF已保存: {output_path}")
        return output_path
