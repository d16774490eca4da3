"""
文档生成模块 - PDF组装/文件名派生

子模块：
- assembler: 切片 → 多页PDF，原子保存
- naming: 输出文件名与导出参数派生
"""

from .assembler import DocumentAssembler, jpeg_quality
from .naming import ResolvedOptions, resolve_filename, resolve_options, sanitize

__all__ = [
    "DocumentAssembler",
    "jpeg_quality",
    "ResolvedOptions",
    "resolve_filename",
    "resolve_options",
    "sanitize",
]
