"""
流水线模块 - 导出编排与执行

子模块：
- stages: 流水线各阶段定义
- executor: 流水线执行器与导出入口
"""

from .executor import ExportExecutor, export_element_to_pdf
from .stages import EXPORT_STAGES, PipelineStage, StageEnum

__all__ = [
    "PipelineStage",
    "StageEnum",
    "EXPORT_STAGES",
    "ExportExecutor",
    "export_element_to_pdf",
]
