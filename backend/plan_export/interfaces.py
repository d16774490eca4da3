"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 渲染引擎作为注入的协作者（IRenderer），测试时可替换为确定性的假实现
3. 便于单元测试和mock替换

使用方式：
    from plan_export.interfaces import IRenderer

    class MyRenderer(IRenderer):
        def open(self, content_ref, magnification):
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from .models import (
        CapturedRaster,
        ContentRef,
        ExportedDocument,
        PageFormat,
        PageGeometry,
        PageSlice,
    )


# ============================================================================
# 截图（渲染引擎）接口
# ============================================================================

class IRenderSurface(ABC):
    """已加载的渲染表面 - 对应一个可截图的可视子树"""

    @abstractmethod
    def measure(self) -> tuple[float, float] | None:
        """
        测量子树的滚动尺寸（CSS像素）

        Returns:
            (宽, 高)；选择器未命中任何元素时返回None
        """
        ...

    @abstractmethod
    def add_class(self, css_class: str) -> bool:
        """给子树根元素添加class，返回是否为新加（原已存在则为False）"""
        ...

    @abstractmethod
    def remove_class(self, css_class: str) -> None:
        """移除子树根元素上的class"""
        ...

    @abstractmethod
    def inject_style(self, css: str) -> str:
        """
        注入临时样式

        Returns:
            样式句柄（用于remove_style）
        """
        ...

    @abstractmethod
    def remove_style(self, handle: str) -> None:
        """移除inject_style注入的样式"""
        ...

    @abstractmethod
    def hide(self, selectors: list[str]) -> int:
        """隐藏匹配的元素，返回隐藏数量"""
        ...

    @abstractmethod
    def unhide(self, selectors: list[str]) -> None:
        """恢复hide隐藏的元素（还原原有内联display）"""
        ...

    @abstractmethod
    def wait_for_fonts(self) -> None:
        """等待字体加载完成"""
        ...

    @abstractmethod
    def rasterize(self) -> bytes:
        """
        将子树栅格化

        Returns:
            PNG字节（可带透明通道，由调用方铺底色）
        """
        ...


class IRenderer(ABC):
    """渲染引擎接口 - 加载内容并提供渲染表面"""

    @abstractmethod
    def open(
        self, content_ref: ContentRef, magnification: float
    ) -> AbstractContextManager[IRenderSurface]:
        """
        加载内容引用

        Args:
            content_ref: 内容引用（URL或HTML + 选择器）
            magnification: 放大倍率（设备像素比）

        Returns:
            上下文管理器，退出时释放渲染资源
        """
        ...


class ICaptureAdapter(ABC):
    """截图适配器接口"""

    @abstractmethod
    def capture(self, content_ref: ContentRef, magnification: float) -> CapturedRaster:
        """
        将可视子树栅格化为一张图像

        Raises:
            CaptureError: 子树不存在/零面积/渲染失败
        """
        ...


# ============================================================================
# 文档组装接口
# ============================================================================

class IDocumentAssembler(ABC):
    """文档组装器接口"""

    @abstractmethod
    def assemble(
        self,
        raster: CapturedRaster,
        slices: Iterable[PageSlice],
        geometry: PageGeometry,
        page_format: PageFormat,
        title: str,
        image_quality: float,
        output_name: str | None = None,
    ) -> ExportedDocument:
        """
        每个切片作为一页写入文档（内存中完成）

        Raises:
            AssemblyError: 组装失败
        """
        ...

    @abstractmethod
    def save(self, document: ExportedDocument, output_path: Path) -> Path:
        """原子写出文档，返回最终路径"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class PlanExportError(Exception):
    """基础异常"""
    pass


class CaptureError(PlanExportError):
    """截图错误（内容不存在或零面积，中止导出）"""
    pass


class GeometryError(PlanExportError):
    """版面几何错误（栅格尺寸退化）"""
    pass


class AssemblyError(PlanExportError):
    """组装/保存错误（丢弃内存中的页面）"""
    pass
