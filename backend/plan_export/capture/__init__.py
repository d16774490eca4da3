"""
截图模块 - 可视子树栅格化

子模块：
- adapter: 截图适配器（尺寸校验、铺底色）
- overrides: 截图期间的临时样式/隐藏（作用域资源）
- renderer: Playwright 渲染引擎
"""

from .adapter import CaptureAdapter
from .overrides import StyleOverride, export_mode, hidden_elements

__all__ = [
    "CaptureAdapter",
    "StyleOverride",
    "export_mode",
    "hidden_elements",
]
