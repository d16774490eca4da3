"""
纸张规格加载器 - 读取 documents/page_formats.yaml

职责：
- 解析YAML并提供类型安全访问
- 文件不存在时使用内置规格（A3/A4/A5/LETTER/LEGAL）
- 缓存加载结果（避免重复解析）

使用方式：
    format_table = FormatLoader.load("documents/page_formats.yaml")
    a4 = format_table.get_format("A4")
    a4_landscape = get_page_format("A4", orientation="landscape")
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from ..models import PageFormat

DEFAULT_FORMATS_PATH = Path("documents/page_formats.yaml")

# 内置纸张规格（毫米，纵向）
BUILTIN_FORMATS: dict[str, tuple[float, float]] = {
    "A3": (297.0, 420.0),
    "A4": (210.0, 297.0),
    "A5": (148.0, 210.0),
    "LETTER": (215.9, 279.4),
    "LEGAL": (215.9, 355.6),
}


class FormatSpec(BaseModel):
    """纸张规格表（page_formats.yaml 的结构化表示）"""
    schema_version: str = "1.0"
    default_format: str = "A4"
    default_margin_mm: float = 10.0
    formats: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @classmethod
    def builtin(cls) -> FormatSpec:
        """内置规格表"""
        return cls(
            formats={name: {"W": w, "H": h} for name, (w, h) in BUILTIN_FORMATS.items()}
        )

    def names(self) -> list[str]:
        return sorted(self.formats)

    def get_format(self, name: str | None = None, margin_mm: float | None = None) -> PageFormat:
        """获取纸张规格（名称不区分大小写）"""
        key = (name or self.default_format).upper()
        table = {k.upper(): v for k, v in self.formats.items()}
        if key not in table:
            raise KeyError(f"未知纸张规格: {name}（可选: {', '.join(self.names())}）")

        raw = table[key]
        margin = margin_mm if margin_mm is not None else raw.get("margin", self.default_margin_mm)
        return PageFormat(
            name=key,
            width_units=float(raw["W"]),
            height_units=float(raw["H"]),
            margin_units=float(margin),
        )


class FormatLoader:
    """规格加载器（缓存）"""

    @staticmethod
    @lru_cache(maxsize=4)
    def load(formats_path: str | Path = DEFAULT_FORMATS_PATH) -> FormatSpec:
        """加载并缓存规格表"""
        path = Path(formats_path)
        if not path.exists():
            raise FileNotFoundError(f"纸张规格文件不存在: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        format_table = FormatSpec(**data)
        # 文件中未声明的内置规格仍可用
        merged = FormatSpec.builtin().formats
        merged.update(format_table.formats)
        return format_table.model_copy(update={"formats": merged})

    @staticmethod
    def reload(formats_path: str | Path = DEFAULT_FORMATS_PATH) -> FormatSpec:
        """强制重新加载（清除缓存）"""
        FormatLoader.load.cache_clear()
        return FormatLoader.load(formats_path)


# 便捷函数
def load_formats(formats_path: str | Path | None = None) -> FormatSpec:
    """加载纸张规格表，文件缺失时退回内置规格"""
    path = Path(formats_path) if formats_path else DEFAULT_FORMATS_PATH
    try:
        return FormatLoader.load(path)
    except FileNotFoundError:
        return FormatSpec.builtin()


def get_page_format(
    name: str | None = None,
    orientation: str = "portrait",
    margin_mm: float | None = None,
    formats_path: str | Path | None = None,
) -> PageFormat:
    """按名称/方向/边距获取纸张规格"""
    page_format = load_formats(formats_path).get_format(name, margin_mm)
    if orientation == "landscape":
        return page_format.landscape()
    if orientation != "portrait":
        raise ValueError(f"未知纸张方向: {orientation}")
    return page_format
