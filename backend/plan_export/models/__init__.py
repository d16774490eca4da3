"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- ExportRequest / ContentRef: 导出输入
- CapturedRaster: 单次导出的整幅截图
- PageFormat / PageGeometry / PageSlice: 版面与分页
- ExportedDocument: 导出产物
- ExportJob: 任务状态与生命周期
"""

from .document import ExportedDocument, PageImage
from .job import ExportJob, ExportProgress, ExportStatus
from .page import FitMode, PageFormat, PageGeometry, PageSlice
from .raster import CapturedRaster
from .request import ContentRef, ExportRequest

__all__ = [
    "ContentRef",
    "ExportRequest",
    "CapturedRaster",
    "FitMode",
    "PageFormat",
    "PageGeometry",
    "PageSlice",
    "PageImage",
    "ExportedDocument",
    "ExportJob",
    "ExportProgress",
    "ExportStatus",
]
