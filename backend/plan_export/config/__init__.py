"""
配置层 - 加载纸张规格与运行期配置

职责：
- 加载 documents/page_formats.yaml（纸张规格）
- 加载 documents/export_runtime.yaml（运行期参数）
- 提供类型安全的配置访问接口
"""

from .format_loader import FormatLoader, FormatSpec, get_page_format, load_formats
from .runtime_config import RuntimeConfig, get_config, reload_config

__all__ = [
    "FormatLoader",
    "FormatSpec",
    "load_formats",
    "get_page_format",
    "RuntimeConfig",
    "get_config",
    "reload_config",
]
