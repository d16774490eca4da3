"""
版面模块 - 页面几何与分页

子模块：
- geometry: 统一缩放比、边距、居中落版位置
- pager: 截图按页高切分为连续行带
"""

from .geometry import compute_geometry
from .pager import page_count, paginate

__all__ = [
    "compute_geometry",
    "page_count",
    "paginate",
]
