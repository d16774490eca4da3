"""
页面几何单元测试
"""

import pytest

from plan_export.interfaces import GeometryError
from plan_export.layout import compute_geometry
from plan_export.models import FitMode, PageFormat


class TestComputeGeometry:
    """几何计算测试"""

    def test_scale_ratio_width_fit(self, a4: PageFormat):
        """宽度撑满：缩放比 = 可用宽 / 像素宽"""
        geometry = compute_geometry(380, 3000, a4)
        assert geometry.scale_ratio == pytest.approx(0.5)
        assert geometry.placed_width_units == pytest.approx(190)
        assert geometry.placed_height_units == pytest.approx(1500)

    def test_scale_ratio_contain(self, a4: PageFormat):
        """CONTAIN：缩放比取 min(宽比, 高比)"""
        geometry = compute_geometry(380, 3000, a4, FitMode.CONTAIN)
        assert geometry.scale_ratio == pytest.approx(277 / 3000)
        assert geometry.placed_height_units == pytest.approx(277)
        assert geometry.placed_width_units < 190

    def test_contain_wide_content(self, a4: PageFormat):
        """矮宽内容在CONTAIN下仍由宽度决定"""
        geometry = compute_geometry(1900, 100, a4, "contain")
        assert geometry.scale_ratio == pytest.approx(0.1)

    def test_x_offset_centered(self, a4: PageFormat):
        """水平居中"""
        geometry = compute_geometry(380, 3000, a4, FitMode.CONTAIN)
        left = geometry.x_offset_units
        right = a4.width_units - left - geometry.placed_width_units
        assert left == pytest.approx(right)

    def test_width_fit_offset_equals_margin(self, a4: PageFormat):
        """宽度撑满时左右边距即为页边距"""
        geometry = compute_geometry(760, 500, a4)
        assert geometry.x_offset_units == pytest.approx(10)
        assert geometry.y_offset_units == pytest.approx(10)

    def test_page_dimensions_copied(self, a4: PageFormat):
        """页面尺寸来自纸张规格"""
        geometry = compute_geometry(100, 100, a4)
        assert geometry.page_width_units == 210
        assert geometry.page_height_units == 297
        assert geometry.available_height_units == pytest.approx(277)

    def test_landscape(self, a4: PageFormat):
        """横向纸张"""
        geometry = compute_geometry(277, 100, a4.landscape())
        assert geometry.page_width_units == 297
        assert geometry.scale_ratio == pytest.approx(1.0)

    @pytest.mark.parametrize("width,height", [(0, 100), (100, 0), (-5, 10)])
    def test_zero_dimension(self, a4: PageFormat, width: int, height: int):
        """退化尺寸抛GeometryError"""
        with pytest.raises(GeometryError):
            compute_geometry(width, height, a4)

    def test_margin_exceeds_page(self):
        """边距吃掉整页"""
        tiny = PageFormat(name="TINY", width_units=20, height_units=20, margin_units=10)
        with pytest.raises(GeometryError):
            compute_geometry(100, 100, tiny)

    def test_unknown_fit_mode(self, a4: PageFormat):
        """未知缩放策略"""
        with pytest.raises(ValueError):
            compute_geometry(100, 100, a4, "stretch")
