"""
文件名/选项派生 - 根据语义字段派生默认输出名并合并调用方参数

职责：
1. 标题去除文件系统非法字符、截断，拼接科目与日期
2. 合并导出请求与运行期默认值

派生规则：
- lesson-plan-{标题[:50]}[-{科目}]-{YYYY-MM-DD}.pdf
- 非法字符 / \\ ? % * : | " < > 替换为 -
- 不做重名检测（纯字符串处理）

测试要点：
- test_resolve_filename_example: Intro: Science/Math + Physics
- test_resolve_filename_truncate: 50字符截断
- test_resolve_filename_no_subject: 无科目
- test_resolve_options_defaults: 默认值合并
"""

from __future__ import annotations

import re
from datetime import date

from pydantic import BaseModel

from ..config import RuntimeConfig, get_config
from ..models import ExportRequest

_ILLEGAL_CHARS = re.compile(r'[/\\?%*:|"<>]')


class ResolvedOptions(BaseModel):
    """合并后的导出参数"""
    output_name: str
    title: str
    magnification: float
    image_quality: float


def sanitize(text: str) -> str:
    """替换文件名非法字符"""
    return _ILLEGAL_CHARS.sub("-", text)


def resolve_filename(
    title: str,
    subject: str | None = None,
    *,
    today: date | None = None,
    prefix: str = "lesson-plan",
    extension: str = ".pdf",
    max_length: int = 50,
) -> str:
    """派生输出文件名"""
    clean_title = sanitize(title)[:max_length]
    subject_part = f"-{sanitize(subject)}" if subject else ""
    stamp = (today or date.today()).isoformat()
    head = f"{prefix}-" if prefix else ""
    return f"{head}{clean_title}{subject_part}-{stamp}{extension}"


def resolve_options(
    request: ExportRequest,
    config: RuntimeConfig | None = None,
    *,
    today: date | None = None,
) -> ResolvedOptions:
    """合并请求参数与默认值"""
    config = config or get_config()
    output = config.output

    # 输出名：调用方 > 标题派生 > 默认
    if request.output_name:
        output_name = request.output_name
    elif request.title:
        output_name = resolve_filename(
            request.title,
            request.subject,
            today=today,
            prefix=output.filename_prefix,
            extension=output.extension,
            max_length=output.title_max_length,
        )
    else:
        output_name = output.default_filename

    # 文档标题：标题 > 输出名去扩展
    title = request.title or output_name.rsplit(".", 1)[0]

    return ResolvedOptions(
        output_name=output_name,
        title=title,
        magnification=request.magnification or config.capture.magnification,
        image_quality=request.image_quality or config.capture.image_quality,
    )
