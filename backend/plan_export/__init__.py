"""
教案PDF导出 - 后端核心模块

模块结构：
- config/     运行期配置与页面格式
- models/     数据模型定义
- capture/    可视子树截图（渲染器/导出样式覆盖）
- layout/     页面几何与分页
- doc_gen/    PDF组装与文件名派生
- pipeline/   流水线编排
"""

from .interfaces import AssemblyError, CaptureError, GeometryError, PlanExportError
from .pipeline import ExportExecutor, export_element_to_pdf

__version__ = "0.1.0"

__all__ = [
    "ExportExecutor",
    "export_element_to_pdf",
    "PlanExportError",
    "CaptureError",
    "GeometryError",
    "AssemblyError",
]
