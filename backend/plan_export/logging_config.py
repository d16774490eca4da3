"""
日志配置 - 控制台 + 可选滚动文件

职责：
1. 配置根日志器（级别/格式）
2. 控制台输出到 stdout
3. log_to_file 开启时追加 RotatingFileHandler

依赖：
- config.runtime_config: logging 段
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

from .config import RuntimeConfig, get_config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_level: str | None = None,
    log_file: str | Path | None = None,
    config: RuntimeConfig | None = None,
) -> None:
    """配置全局日志（参数优先于配置文件）"""
    config = config or get_config()
    settings = config.logging

    level = (log_level or settings.log_level).upper()
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level, logging.INFO))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_path = None
    if log_file or settings.log_to_file:
        file_path = Path(log_file or settings.log_file)
        if not file_path.is_absolute():
            file_path = config.base_dir / file_path
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            file_path,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logger = logging.getLogger(__name__)
    logger.info(f"日志初始化: level={level}, file={file_path or '-'}")
