"""
流水线执行器 - 编排导出各阶段

职责：
1. 按顺序执行 截图 → 几何 → 分页 → 组装 → 保存
2. 更新任务进度（可选回调）
3. 任一阶段失败即中止整个导出，不暴露半成品
4. 结束后释放截图像素（成功/失败均释放）

测试要点：
- test_execute_full_pipeline: 完整流水线执行
- test_capture_failure_no_artifact: 截图失败不产出文件
- test_progress_tracking: 进度跟踪
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from ..capture import CaptureAdapter
from ..config import RuntimeConfig, get_config, get_page_format
from ..doc_gen import DocumentAssembler, resolve_options
from ..interfaces import ICaptureAdapter, IDocumentAssembler, IRenderer
from ..layout import compute_geometry, page_count, paginate
from ..models import ContentRef, ExportedDocument, ExportJob, ExportRequest, FitMode, PageFormat
from .stages import EXPORT_STAGES, PipelineStage, StageEnum

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ExportJob], None]


class ExportExecutor:
    """导出流水线执行器"""

    def __init__(
        self,
        capture_adapter: ICaptureAdapter | None = None,
        assembler: IDocumentAssembler | None = None,
        config: RuntimeConfig | None = None,
        page_format: PageFormat | None = None,
        fit: FitMode | str | None = None,
    ):
        self.config = config or get_config()
        self.capture_adapter = capture_adapter or CaptureAdapter(config=self.config)
        self.assembler = assembler or DocumentAssembler()

        page = self.config.page
        self.page_format = page_format or get_page_format(
            page.format,
            orientation=page.orientation,
            margin_mm=page.margin_mm,
            formats_path=self.config.formats_path,
        )
        self.fit = FitMode(fit or page.fit)

    def execute(
        self,
        job: ExportJob | ExportRequest,
        output_dir: str | Path | None = None,
        progress_cb: ProgressCallback | None = None,
    ) -> ExportedDocument:
        """执行导出流水线"""
        if isinstance(job, ExportRequest):
            job = ExportJob(request=job)

        options = resolve_options(job.request, self.config)
        target_dir = Path(output_dir) if output_dir else self.config.output.output_dir

        # 中间数据（仅本次调用持有）
        context: dict[str, Any] = {
            "options": options,
            "output_path": target_dir / options.output_name,
            "raster": None,
            "geometry": None,
            "slices": None,
            "document": None,
        }

        job.mark_running(EXPORT_STAGES[0].name)
        self._update_progress(job, progress_cb, message="导出开始")

        try:
            for stage in EXPORT_STAGES:
                self._execute_stage(job, stage, context, progress_cb)
            job.mark_succeeded()
            self._update_progress(job, progress_cb, message="导出完成")
        except Exception as e:
            logger.exception(f"导出失败: {job.job_id}")
            job.mark_failed(str(e))
            self._update_progress(job, progress_cb, message=f"导出失败: {e}")
            raise
        finally:
            raster = context.get("raster")
            if raster is not None:
                raster.close()

        return context["document"]

    def _execute_stage(
        self,
        job: ExportJob,
        stage: PipelineStage,
        context: dict[str, Any],
        progress_cb: ProgressCallback | None,
    ) -> None:
        """执行单个阶段"""
        job.progress.stage = stage.name
        job.progress.percent = stage.progress_start
        logger.info(f"[{job.job_id}] 开始阶段: {stage.name}")
        self._update_progress(job, progress_cb, message=f"开始阶段: {stage.name}")

        try:
            if stage.name == StageEnum.CAPTURE.value:
                self._stage_capture(job, context)

            elif stage.name == StageEnum.COMPUTE_GEOMETRY.value:
                self._stage_geometry(job, context)

            elif stage.name == StageEnum.PAGINATE.value:
                self._stage_paginate(job, context)

            elif stage.name == StageEnum.ASSEMBLE.value:
                self._stage_assemble(job, context)

            elif stage.name == StageEnum.SAVE.value:
                self._stage_save(job, context)

        except Exception as e:
            logger.error(f"[{job.job_id}] 阶段失败 {stage.name}: {e}")
            job.add_flag(f"阶段失败:{stage.name}")
            raise

        job.progress.percent = stage.progress_end
        self._update_progress(job, progress_cb, message=f"完成阶段: {stage.name}")

    def _stage_capture(self, job: ExportJob, context: dict[str, Any]) -> None:
        """截图"""
        options = context["options"]
        raster = self.capture_adapter.capture(job.request.content_ref, options.magnification)
        context["raster"] = raster
        job.progress.details.update(
            {"raster_width": raster.pixel_width, "raster_height": raster.pixel_height}
        )

    def _stage_geometry(self, job: ExportJob, context: dict[str, Any]) -> None:
        """页面几何（整次导出只算一次）"""
        raster = context["raster"]
        geometry = compute_geometry(
            raster.pixel_width, raster.pixel_height, self.page_format, self.fit
        )
        context["geometry"] = geometry
        job.progress.details["scale_ratio"] = geometry.scale_ratio
        logger.debug(
            f"[{job.job_id}] 缩放比 {geometry.scale_ratio:.5f} mm/px, "
            f"落版 {geometry.placed_width_units:.1f}x{geometry.placed_height_units:.1f} mm"
        )

    def _stage_paginate(self, job: ExportJob, context: dict[str, Any]) -> None:
        """分页（惰性切片，由组装阶段消费）"""
        raster = context["raster"]
        geometry = context["geometry"]
        job.progress.details["page_total"] = page_count(raster.pixel_height, geometry)
        context["slices"] = paginate(raster, geometry)

    def _stage_assemble(self, job: ExportJob, context: dict[str, Any]) -> None:
        """组装PDF"""
        options = context["options"]
        document = self.assembler.assemble(
            context["raster"],
            context["slices"],
            context["geometry"],
            self.page_format,
            options.title,
            options.image_quality,
            output_name=options.output_name,
        )
        context["document"] = document
        job.page_count = document.page_count

    def _stage_save(self, job: ExportJob, context: dict[str, Any]) -> None:
        """原子保存"""
        job.output_path = self.assembler.save(context["document"], context["output_path"])

    def _update_progress(
        self,
        job: ExportJob,
        progress_cb: ProgressCallback | None,
        *,
        message: str | None = None,
    ) -> None:
        if message is not None:
            job.progress.message = message
        if progress_cb:
            progress_cb(job)


def export_element_to_pdf(
    content_ref: ContentRef,
    *,
    output_name: str | None = None,
    magnification: float | None = None,
    image_quality: float | None = None,
    title: str | None = None,
    subject: str | None = None,
    output_dir: str | Path | None = None,
    renderer: IRenderer | None = None,
    config: RuntimeConfig | None = None,
) -> ExportedDocument:
    """导出入口：可视子树 → 多页PDF"""
    request = ExportRequest(
        content_ref=content_ref,
        output_name=output_name,
        magnification=magnification,
        image_quality=image_quality,
        title=title,
        subject=subject,
    )
    config = config or get_config()
    executor = ExportExecutor(
        capture_adapter=CaptureAdapter(renderer=renderer, config=config),
        config=config,
    )
    return executor.execute(request, output_dir=output_dir)
