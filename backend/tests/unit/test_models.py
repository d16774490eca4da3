"""
数据模型单元测试
"""

import pytest
from PIL import Image
from pydantic import ValidationError

from plan_export.models import (
    CapturedRaster,
    ContentRef,
    ExportJob,
    ExportRequest,
    ExportStatus,
    PageFormat,
    PageSlice,
)


class TestContentRef:
    """内容引用测试"""

    def test_url_source(self):
        ref = ContentRef(url="https://example.com/plan/1")
        assert ref.selector == "body"
        assert ref.describe() == "https://example.com/plan/1 [body]"

    def test_html_source(self):
        ref = ContentRef(html="<p>x</p>", selector="#plan")
        assert ref.describe() == "<html 8 chars> [#plan]"

    def test_requires_exactly_one_source(self):
        """url 与 html 二选一"""
        with pytest.raises(ValidationError):
            ContentRef()
        with pytest.raises(ValidationError):
            ContentRef(url="https://example.com", html="<p/>")

    def test_empty_selector(self):
        with pytest.raises(ValidationError):
            ContentRef(url="https://example.com", selector="  ")


class TestExportRequest:
    """导出请求测试"""

    def test_optional_fields(self):
        request = ExportRequest(content_ref=ContentRef(url="file:///a.html"))
        assert request.magnification is None
        assert request.image_quality is None

    @pytest.mark.parametrize("field,value", [
        ("magnification", 0),
        ("magnification", -1.5),
        ("image_quality", 0),
        ("image_quality", 1.2),
    ])
    def test_invalid_values(self, field: str, value: float):
        with pytest.raises(ValidationError):
            ExportRequest(content_ref=ContentRef(url="file:///a.html"), **{field: value})

    def test_frozen(self):
        request = ExportRequest(content_ref=ContentRef(url="file:///a.html"))
        with pytest.raises(ValidationError):
            request.title = "x"


class TestCapturedRaster:
    """截图栅格测试"""

    def test_from_image(self):
        raster = CapturedRaster.from_image(Image.new("RGB", (30, 40)), magnification=2.0)
        assert (raster.pixel_width, raster.pixel_height) == (30, 40)
        assert raster.magnification == 2.0

    def test_size_mismatch(self):
        with pytest.raises(ValidationError):
            CapturedRaster(pixel_width=10, pixel_height=10, image=Image.new("RGB", (10, 20)))

    def test_crop_band_copy_on_read(self, small_raster: CapturedRaster):
        """行带为独立拷贝"""
        band = small_raster.crop_band(100, 50)
        assert band.size == (380, 50)
        assert band.getpixel((0, 0)) == (100, 100, 100)
        band.paste((255, 0, 0), (0, 0, 380, 50))
        assert small_raster.image.getpixel((0, 100)) == (100, 100, 100)

    @pytest.mark.parametrize("y,h", [(-1, 10), (0, 0), (150, 51)])
    def test_crop_band_out_of_range(self, small_raster: CapturedRaster, y: int, h: int):
        with pytest.raises(ValueError):
            small_raster.crop_band(y, h)


class TestPageModels:
    """版面模型测试"""

    def test_available_area(self, a4: PageFormat):
        assert a4.available_width_units == 190
        assert a4.available_height_units == 277

    def test_landscape(self, a4: PageFormat):
        landscape = a4.landscape()
        assert (landscape.width_units, landscape.height_units) == (297, 210)
        assert landscape.margin_units == a4.margin_units

    def test_with_margin(self, a4: PageFormat):
        assert a4.with_margin(0).available_width_units == 210

    def test_slice_end(self):
        page_slice = PageSlice(source_y_offset_px=554, height_px=554, order_index=1)
        assert page_slice.end_y_px == 1108

    def test_slice_rejects_empty(self):
        with pytest.raises(ValidationError):
            PageSlice(source_y_offset_px=0, height_px=0, order_index=0)


class TestExportJob:
    """导出任务测试"""

    def test_lifecycle(self, export_request: ExportRequest):
        job = ExportJob(request=export_request)
        assert job.status == ExportStatus.QUEUED

        job.mark_running()
        assert job.status == ExportStatus.RUNNING
        assert job.started_at is not None

        job.mark_succeeded()
        assert job.status == ExportStatus.SUCCEEDED
        assert job.progress.percent == 100

    def test_mark_failed(self, export_request: ExportRequest):
        job = ExportJob(request=export_request)
        job.mark_failed("内容不存在")
        assert job.status == ExportStatus.FAILED
        assert job.errors == ["内容不存在"]
        assert job.finished_at is not None

    def test_add_flag_dedup(self, export_request: ExportRequest):
        job = ExportJob(request=export_request)
        job.add_flag("阶段失败:CAPTURE")
        job.add_flag("阶段失败:CAPTURE")
        assert job.flags == ["阶段失败:CAPTURE"]

    def test_unique_ids(self, export_request: ExportRequest):
        assert ExportJob(request=export_request).job_id != ExportJob(request=export_request).job_id
