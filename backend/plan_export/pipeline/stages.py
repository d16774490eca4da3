"""
流水线阶段定义

职责：
1. 定义各阶段的名称和进度区间
2. 阶段严格顺序执行，后一阶段只消费前一阶段的产物

测试要点：
- test_stage_order: 阶段顺序
- test_stage_progress_ranges: 进度区间首尾相接
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StageEnum(str, Enum):
    """流水线阶段枚举"""
    CAPTURE = "CAPTURE"
    COMPUTE_GEOMETRY = "COMPUTE_GEOMETRY"
    PAGINATE = "PAGINATE"
    ASSEMBLE = "ASSEMBLE"
    SAVE = "SAVE"


@dataclass(frozen=True)
class PipelineStage:
    """流水线阶段"""
    name: str
    progress_start: int  # 进度起点（0-100）
    progress_end: int    # 进度终点


# 导出流水线各阶段配置
EXPORT_STAGES: list[PipelineStage] = [
    PipelineStage(StageEnum.CAPTURE.value, 0, 40),
    PipelineStage(StageEnum.COMPUTE_GEOMETRY.value, 40, 45),
    PipelineStage(StageEnum.PAGINATE.value, 45, 50),
    PipelineStage(StageEnum.ASSEMBLE.value, 50, 90),
    PipelineStage(StageEnum.SAVE.value, 90, 100),
]
