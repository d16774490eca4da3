"""
导出请求模型 - 导出流水线的输入结构

流水线只消费这个结构化数据，与调用方的页面/路由完全解耦
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class ContentRef(BaseModel):
    """内容引用（可视子树句柄）"""

    url: str | None = Field(None, description="页面URL（含file://）")
    html: str | None = Field(None, description="内联HTML文档")
    selector: str = Field("body", description="子树根元素的CSS选择器")
    base_url: str | None = Field(None, description="内联HTML的相对资源基准URL")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_source(self) -> ContentRef:
        if (self.url is None) == (self.html is None):
            raise ValueError("url 与 html 必须且只能提供一个")
        if not self.selector.strip():
            raise ValueError("selector 不能为空")
        return self

    def describe(self) -> str:
        """日志用的简短描述"""
        source = self.url if self.url is not None else f"<html {len(self.html or '')} chars>"
        return f"{source} [{self.selector}]"


class ExportRequest(BaseModel):
    """导出请求（创建后不可变）"""

    content_ref: ContentRef
    output_name: str | None = Field(None, description="输出文件名，缺省时由标题派生")
    magnification: float | None = Field(None, gt=0, description="截图放大倍率，缺省取配置(1.5)")
    image_quality: float | None = Field(None, gt=0, le=1, description="JPEG压缩质量，缺省取配置(0.95)")

    # 文件名/元数据来源
    title: str | None = Field(None, description="文档标题（如单元名称）")
    subject: str | None = Field(None, description="科目")

    model_config = {"frozen": True}
