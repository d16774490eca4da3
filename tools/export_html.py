"""
将本地HTML文件或URL中的可视子树导出为多页PDF（需要已安装 playwright 浏览器）。

示例：
  python tools/export_html.py --url https://example.com/plans/42 --selector "#lesson-plan"
  python tools/export_html.py --html-file test/plan.html --title "Unit 1" --subject Physics
  python tools/export_html.py --html-file test/plan.html --out-dir exports --magnification 2
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def main() -> int:
    parser = argparse.ArgumentParser(description="Export an HTML subtree to a paginated PDF.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--url", help="页面URL")
    source.add_argument("--html-file", help="本地HTML文件")
    parser.add_argument("--selector", default="body", help="子树根元素（默认：body）")
    parser.add_argument("--title", default=None, help="文档标题（用于派生文件名）")
    parser.add_argument("--subject", default=None, help="科目")
    parser.add_argument("--output-name", default=None, help="输出文件名")
    parser.add_argument("--out-dir", default=None, help="输出目录（默认取配置）")
    parser.add_argument("--magnification", type=float, default=None, help="截图放大倍率")
    parser.add_argument("--quality", type=float, default=None, help="JPEG质量 (0,1]")
    parser.add_argument("--config", default=None, help="运行期配置YAML")
    parser.add_argument("--log-level", default=None, help="日志级别")
    args = parser.parse_args()

    _add_backend_to_path()
    from plan_export.config import get_config, reload_config  # type: ignore
    from plan_export.interfaces import PlanExportError  # type: ignore
    from plan_export.logging_config import setup_logging  # type: ignore
    from plan_export.models import ContentRef  # type: ignore
    from plan_export.pipeline import export_element_to_pdf  # type: ignore

    config = reload_config(args.config) if args.config else get_config()
    setup_logging(args.log_level, config=config)

    if args.html_file:
        html_path = Path(args.html_file).resolve()
        if not html_path.exists():
            print(f"文件不存在: {html_path}")
            return 1
        content_ref = ContentRef(
            html=html_path.read_text(encoding="utf-8"),
            selector=args.selector,
            base_url=html_path.parent.as_uri() + "/",
        )
    else:
        content_ref = ContentRef(url=args.url, selector=args.selector)

    try:
        document = export_element_to_pdf(
            content_ref,
            output_name=args.output_name,
            magnification=args.magnification,
            image_quality=args.quality,
            title=args.title,
            subject=args.subject,
            output_dir=args.out_dir,
            config=config,
        )
    except (PlanExportError, ValueError) as exc:
        print(f"ERROR {exc}")
        return 1

    print(f"{document.output_path}: pages={document.page_count}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
