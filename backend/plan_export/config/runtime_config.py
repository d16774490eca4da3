"""
运行期配置 - 读取 documents/export_runtime.yaml

职责：
- 加载截图/渲染/纸张/输出/日志等运行参数
- 提供环境变量覆盖机制（PLAN_EXPORT_<SECTION>__<KEY>）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

DEFAULT_RUNTIME_PATH = Path("documents/export_runtime.yaml")


class CaptureConfig(BaseModel):
    """截图配置"""

    magnification: float = Field(1.5, gt=0)
    image_quality: float = Field(0.95, gt=0, le=1)
    background_color: str = "#ffffff"

    # 截图期间的临时样式
    export_class: str = "pdf-export-mode"
    font_family: str | None = "'Sarabun', 'Noto Sans Thai', 'Arial', sans-serif"
    font_css_url: str | None = (
        "https://fonts.googleapis.com/css2?family=Sarabun:wght@300;400;500;600;700&display=swap"
    )

    # 调用方指定的隐藏元素（如 .no-print）
    hide_selectors: list[str] = Field(default_factory=list)


class RendererConfig(BaseModel):
    """渲染引擎配置"""

    browser: str = "chromium"
    viewport_width: int = 1280
    viewport_height: int = 800
    wait_until: str = "networkidle"
    load_timeout_ms: int = 0  # 0 = 不设超时


class PageConfig(BaseModel):
    """纸张配置"""

    format: str = "A4"
    orientation: str = "portrait"
    margin_mm: float = 10.0
    fit: str = "width"


class OutputConfig(BaseModel):
    """输出配置"""

    output_dir: Path = Path("exports")
    filename_prefix: str = "lesson-plan"
    extension: str = ".pdf"
    title_max_length: int = 50
    default_filename: str = "document.pdf"


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: str = "logs/plan_export.log"


class RuntimeConfig(BaseSettings):
    """
    运行期配置（支持环境变量覆盖）

    优先级：环境变量 > YAML/构造参数 > 默认值
    """

    # 基础路径
    base_dir: Path = Path(".")
    formats_path: Path = Path("documents/page_formats.yaml")

    # 各子配置
    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    renderer: RendererConfig = Field(default_factory=RendererConfig)
    page: PageConfig = Field(default_factory=PageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "PLAN_EXPORT_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # 环境变量排在构造参数之前（嵌套段按键合并）
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        # 以普通dict传入，环境变量可逐键覆盖
        config = cls(
            **{
                section: cls._extract(runtime_opts, section)
                for section in ("capture", "renderer", "page", "output", "logging")
            }
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        if not self.formats_path.is_absolute():
            candidate = base_dir / self.formats_path.name
            if candidate.exists():
                self.formats_path = candidate.resolve()

    def ensure_dirs(self) -> None:
        """确保必要目录存在"""
        self.output.output_dir.mkdir(parents=True, exist_ok=True)


# 全局配置实例
_config: RuntimeConfig | None = None


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_RUNTIME_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_RUNTIME_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
