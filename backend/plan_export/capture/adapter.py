"""
截图适配器 - 将可视子树栅格化为一张整幅截图

职责：
1. 通过渲染引擎（注入的协作者）加载内容
2. 在作用域内施加隐藏/导出样式，截图后必定还原
3. 校验子树存在且面积非零
4. 像素尺寸 = round(子树尺寸 * 放大倍率)，透明区铺底色
5. 截图与测量尺寸仅允许取整误差（<= 1 CSS像素），超出即报错，不拉伸

依赖：
- Pillow: PNG解码、铺底色、尺寸校正
- IRenderer: 渲染引擎（默认 PlaywrightRenderer）

测试要点：
- test_capture_pixel_size: 像素尺寸
- test_capture_missing_content: 子树不存在抛CaptureError
- test_capture_zero_area: 零面积抛CaptureError
- test_overrides_restored_on_error: 异常路径样式必定还原
- test_background_flattened: 透明区铺底色
- test_capture_truncated_shot: 截图短于内容时抛CaptureError
"""

from __future__ import annotations

import io
import logging
import math

from PIL import Image, ImageColor

from ..config import RuntimeConfig, get_config
from ..interfaces import CaptureError, ICaptureAdapter, IRenderer
from ..models import CapturedRaster, ContentRef
from .overrides import StyleOverride, export_mode, hidden_elements

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """四舍五入到整数像素"""
    return int(math.floor(value + 0.5))


class CaptureAdapter(ICaptureAdapter):
    """截图适配器实现"""

    def __init__(
        self,
        renderer: IRenderer | None = None,
        override: StyleOverride | None = None,
        hide_selectors: list[str] | None = None,
        background_color: str | None = None,
        config: RuntimeConfig | None = None,
    ):
        runtime_config = config or get_config()
        capture_config = runtime_config.capture
        if renderer is None:
            from .renderer import PlaywrightRenderer

            renderer = PlaywrightRenderer(config=runtime_config)
        self.renderer = renderer
        self.override = override or StyleOverride(
            export_class=capture_config.export_class,
            font_family=capture_config.font_family,
            font_css_url=capture_config.font_css_url,
        )
        self.hide_selectors = list(
            hide_selectors if hide_selectors is not None else capture_config.hide_selectors
        )
        self.background_color = background_color or capture_config.background_color

    def capture(self, content_ref: ContentRef, magnification: float) -> CapturedRaster:
        """截图"""
        if magnification <= 0:
            raise CaptureError(f"放大倍率必须为正数: {magnification}")

        logger.info(f"开始截图: {content_ref.describe()} (x{magnification})")
        try:
            with self.renderer.open(content_ref, magnification) as surface:
                # 1. 隐藏元素 + 导出样式（退出时必定还原）
                with hidden_elements(surface, self.hide_selectors), export_mode(
                    surface, self.override
                ):
                    # 2. 样式生效后再测量
                    size = surface.measure()
                    if size is None:
                        raise CaptureError(f"内容不存在: {content_ref.describe()}")
                    width, height = size
                    if width <= 0 or height <= 0:
                        raise CaptureError(
                            f"内容渲染面积为零: {content_ref.describe()} ({width}x{height})"
                        )

                    # 3. 栅格化
                    png_bytes = surface.rasterize()
        except CaptureError:
            raise
        except Exception as e:
            raise CaptureError(f"截图失败: {content_ref.describe()}: {e}") from e

        expected = (
            max(1, round_half_up(width * magnification)),
            max(1, round_half_up(height * magnification)),
        )
        image = self._decode(png_bytes, expected, magnification)

        logger.info(f"截图完成: {image.size[0]}x{image.size[1]} px")
        return CapturedRaster.from_image(image, magnification=magnification)

    def _decode(
        self, png_bytes: bytes, expected: tuple[int, int], magnification: float
    ) -> Image.Image:
        """解码、铺底色、校正尺寸"""
        if not png_bytes:
            raise CaptureError("渲染引擎未返回任何像素")
        try:
            with Image.open(io.BytesIO(png_bytes)) as raw:
                raw.load()
                image = self._flatten(raw)
        except (OSError, ValueError) as e:
            raise CaptureError(f"截图数据无法解码: {e}") from e

        tolerance = max(1, math.ceil(magnification))
        if any(abs(actual - want) > tolerance for actual, want in zip(image.size, expected)):
            # 截图框小于内容（内部滚动等），拉伸会丢失内容
            raise CaptureError(
                f"截图尺寸 {image.size[0]}x{image.size[1]} 与内容尺寸 "
                f"{expected[0]}x{expected[1]} 不一致"
            )
        if image.size != expected:
            # 设备像素取整差异，重采样到约定尺寸
            logger.debug(f"截图尺寸 {image.size} 校正为 {expected}")
            image = image.resize(expected, Image.Resampling.LANCZOS)
        return image

    def _flatten(self, image: Image.Image) -> Image.Image:
        """透明区域铺底色，输出RGB"""
        background = ImageColor.getrgb(self.background_color)[:3]
        if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
            rgba = image.convert("RGBA")
            canvas = Image.new("RGB", rgba.size, background)
            canvas.paste(rgba, mask=rgba.getchannel("A"))
            return canvas
        return image.convert("RGB")
