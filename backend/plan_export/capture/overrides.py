"""
截图期间的临时样式/可见性覆盖

覆盖作用于被截图子树（共享的外部状态），因此以作用域资源的方式获取：
进入时施加，退出时（含异常路径）必定还原。

导出class同时把子树根展开为完整内容高度（取消内部滚动），
使截图框覆盖测量到的全部内容。
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from pydantic import BaseModel

from ..interfaces import IRenderSurface

logger = logging.getLogger(__name__)


class StyleOverride(BaseModel):
    """截图期间的样式覆盖"""

    export_class: str | None = "pdf-export-mode"
    font_family: str | None = None
    font_css_url: str | None = None

    model_config = {"frozen": True}

    def build_css(self) -> str:
        """生成注入的样式文本（无class且无字体覆盖时为空）"""
        parts = []
        if self.font_family and self.font_css_url:
            # @import 必须位于样式表开头
            parts.append(f"@import url('{self.font_css_url}');")
        if self.export_class:
            parts.append(
                f".{self.export_class} {{\n"
                "  height: auto !important;\n"
                "  max-height: none !important;\n"
                "  overflow: visible !important;\n"
                "}"
            )
        if self.font_family:
            parts.append(
                "* {\n"
                f"  font-family: {self.font_family} !important;\n"
                "  -webkit-font-smoothing: antialiased;\n"
                "  -moz-osx-font-smoothing: grayscale;\n"
                "}"
            )
        return "\n".join(parts)


@contextmanager
def export_mode(surface: IRenderSurface, override: StyleOverride) -> Iterator[None]:
    """施加导出样式（class + 字体），退出时移除"""
    css = override.build_css()
    style_handle: str | None = None
    class_added = False
    try:
        if override.export_class:
            class_added = surface.add_class(override.export_class)
        if css:
            style_handle = surface.inject_style(css)
        if override.font_family:
            surface.wait_for_fonts()
        yield
    finally:
        if style_handle is not None:
            surface.remove_style(style_handle)
        if class_added:
            surface.remove_class(override.export_class)


@contextmanager
def hidden_elements(surface: IRenderSurface, selectors: list[str]) -> Iterator[int]:
    """隐藏调用方指定的元素，退出时还原"""
    if not selectors:
        yield 0
        return

    hidden = 0
    try:
        hidden = surface.hide(selectors)
        logger.debug(f"截图前隐藏元素 {hidden} 个: {selectors}")
        yield hidden
    finally:
        surface.unhide(selectors)
