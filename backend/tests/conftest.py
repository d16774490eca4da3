"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(fake_renderer, a4):
        adapter = CaptureAdapter(renderer=fake_renderer)
        ...

渲染引擎统一使用 FakeRenderer（确定性、无浏览器），不依赖 playwright
"""

from __future__ import annotations

import io
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Iterator

import pytest
from PIL import Image

from plan_export.capture import CaptureAdapter, StyleOverride
from plan_export.config import RuntimeConfig, get_page_format
from plan_export.interfaces import IRenderer, IRenderSurface
from plan_export.models import CapturedRaster, ContentRef, ExportRequest, PageFormat


# ============================================================================
# 渲染引擎替身
# ============================================================================

class FakeSurface(IRenderSurface):
    """记录调用顺序的渲染表面"""

    def __init__(
        self,
        size: tuple[float, float] | None,
        magnification: float,
        calls: list[str],
        *,
        has_class: bool = False,
        fail_on_rasterize: Exception | None = None,
        transparent_rows: int = 0,
        shot_size: tuple[float, float] | None = None,
    ):
        self.size = size
        self.magnification = magnification
        self.calls = calls
        self.classes: set[str] = {"pdf-export-mode"} if has_class else set()
        self.styles: dict[str, str] = {}
        self.hidden: list[str] = []
        self.fail_on_rasterize = fail_on_rasterize
        self.transparent_rows = transparent_rows
        # 截图框的CSS尺寸（默认与测量值一致）
        self.shot_size = shot_size

    def measure(self):
        self.calls.append("measure")
        return self.size

    def add_class(self, css_class: str) -> bool:
        self.calls.append(f"add_class:{css_class}")
        if css_class in self.classes:
            return False
        self.classes.add(css_class)
        return True

    def remove_class(self, css_class: str) -> None:
        self.calls.append(f"remove_class:{css_class}")
        self.classes.discard(css_class)

    def inject_style(self, css: str) -> str:
        handle = f"style-{len(self.styles)}"
        self.calls.append("inject_style")
        self.styles[handle] = css
        return handle

    def remove_style(self, handle: str) -> None:
        self.calls.append("remove_style")
        self.styles.pop(handle, None)

    def hide(self, selectors: list[str]) -> int:
        self.calls.append("hide")
        self.hidden = list(selectors)
        return len(selectors)

    def unhide(self, selectors: list[str]) -> None:
        self.calls.append("unhide")
        self.hidden = []

    def wait_for_fonts(self) -> None:
        self.calls.append("wait_for_fonts")

    def rasterize(self) -> bytes:
        self.calls.append("rasterize")
        if self.fail_on_rasterize is not None:
            raise self.fail_on_rasterize
        width, height = self.shot_size or self.size
        px_w = round(width * self.magnification)
        px_h = round(height * self.magnification)

        # 上部透明（验证铺底色），其余为深灰
        image = Image.new("RGBA", (px_w, px_h), (40, 40, 40, 255))
        if self.transparent_rows:
            image.paste((0, 0, 0, 0), (0, 0, px_w, min(self.transparent_rows, px_h)))
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()


class FakeRenderer(IRenderer):
    """确定性渲染引擎：按给定的CSS尺寸生成PNG"""

    def __init__(
        self,
        size: tuple[float, float] | None = (800, 2000),
        *,
        has_class: bool = False,
        fail_on_rasterize: Exception | None = None,
        fail_on_open: Exception | None = None,
        transparent_rows: int = 0,
        shot_size: tuple[float, float] | None = None,
    ):
        self.size = size
        self.has_class = has_class
        self.fail_on_rasterize = fail_on_rasterize
        self.fail_on_open = fail_on_open
        self.transparent_rows = transparent_rows
        self.shot_size = shot_size
        self.calls: list[str] = []
        self.surfaces: list[FakeSurface] = []
        self.closed = 0

    @contextmanager
    def open(self, content_ref: ContentRef, magnification: float) -> Iterator[FakeSurface]:
        self.calls.append("open")
        if self.fail_on_open is not None:
            raise self.fail_on_open
        surface = FakeSurface(
            self.size,
            magnification,
            self.calls,
            has_class=self.has_class,
            fail_on_rasterize=self.fail_on_rasterize,
            transparent_rows=self.transparent_rows,
            shot_size=self.shot_size,
        )
        self.surfaces.append(surface)
        try:
            yield surface
        finally:
            self.closed += 1
            self.calls.append("close")


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config(temp_dir: Path) -> RuntimeConfig:
    """运行期配置（输出目录指向临时目录）"""
    config = RuntimeConfig()
    config.output.output_dir = temp_dir / "exports"
    return config


@pytest.fixture
def a4() -> PageFormat:
    """A4 纵向，10mm 边距"""
    return get_page_format("A4", margin_mm=10)


@pytest.fixture
def a4_no_margin() -> PageFormat:
    return PageFormat(name="A4", width_units=210, height_units=297, margin_units=0)


# ============================================================================
# 渲染 Fixtures
# ============================================================================

@pytest.fixture
def renderer_factory() -> type[FakeRenderer]:
    """按需构造渲染引擎替身：renderer_factory(size=None, ...)"""
    return FakeRenderer


@pytest.fixture
def surface_factory():
    """直接构造渲染表面（测试样式覆盖用）"""

    def _make(calls: list[str], **kwargs) -> FakeSurface:
        return FakeSurface((10, 10), 1.0, calls, **kwargs)

    return _make


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    """默认 800x2000 CSS像素的内容"""
    return FakeRenderer()


@pytest.fixture
def override() -> StyleOverride:
    """带字体覆盖的导出样式"""
    return StyleOverride(
        export_class="pdf-export-mode",
        font_family="'Sarabun', sans-serif",
        font_css_url="https://fonts.example.com/sarabun.css",
    )


@pytest.fixture
def adapter(fake_renderer: FakeRenderer, override: StyleOverride) -> CaptureAdapter:
    return CaptureAdapter(
        renderer=fake_renderer,
        override=override,
        hide_selectors=[".no-print"],
        background_color="#ffffff",
    )


@pytest.fixture
def content_ref() -> ContentRef:
    return ContentRef(html="<div id='plan'>教案</div>", selector="#plan")


@pytest.fixture
def export_request(content_ref: ContentRef) -> ExportRequest:
    return ExportRequest(content_ref=content_ref, title="Unit 1", subject="Physics")


# ============================================================================
# 栅格 Fixtures
# ============================================================================

def make_raster(width: int, height: int, magnification: float = 1.0) -> CapturedRaster:
    """生成纵向渐变的测试栅格（每行灰度不同，便于核对行带）"""
    image = Image.new("RGB", (width, height))
    for y in range(height):
        shade = y % 256
        image.paste((shade, shade, shade), (0, y, width, y + 1))
    return CapturedRaster.from_image(image, magnification=magnification)


@pytest.fixture
def small_raster() -> CapturedRaster:
    """单页内容"""
    return make_raster(380, 200)


@pytest.fixture
def tall_raster() -> CapturedRaster:
    """多页内容（380x1600，A4宽撑满后约3页）"""
    return make_raster(380, 1600)


# ============================================================================
# 文件系统 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
