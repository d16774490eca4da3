"""
不启动浏览器，按给定栅格尺寸模拟分页结果，用于核对页数与切线位置。

示例：
  python tools/simulate_pagination.py --width 380 --height 3000
  python tools/simulate_pagination.py --width 1200 --height 3000 --format A4 --fit contain
  python tools/simulate_pagination.py --width 1200 --height 9000 --format LETTER --orientation landscape
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
    parser = argparse.ArgumentParser(description="Simulate raster pagination.")
    parser.add_argument("--width", type=int, required=True, help="栅格像素宽")
    parser.add_argument("--height", type=int, required=True, help="栅格像素高")
    parser.add_argument("--format", default="A4", help="纸张规格（默认：A4）")
    parser.add_argument(
        "--orientation",
        default="portrait",
        choices=["portrait", "landscape"],
        help="纸张方向（默认：portrait）",
    )
    parser.add_argument("--margin", type=float, default=None, help="页边距mm（默认取规格）")
    parser.add_argument(
        "--fit",
        default="width",
        choices=["width", "contain"],
        help="缩放策略（默认：width）",
    )
    args = parser.parse_args()

    _add_backend_to_path()
    from plan_export.config import get_page_format  # type: ignore
    from plan_export.interfaces import PlanExportError  # type: ignore
    from plan_export.layout import compute_geometry, paginate  # type: ignore

    try:
        page_format = get_page_format(args.format, args.orientation, args.margin)
        geometry = compute_geometry(args.width, args.height, page_format, args.fit)
        slices = list(paginate(args.height, geometry))
    except (PlanExportError, KeyError, ValueError) as exc:
        print(f"ERROR {exc}")
        return 1

    print(
        f"{page_format.name} {page_format.width_units}x{page_format.height_units}mm "
        f"margin={page_format.margin_units}mm fit={args.fit}"
    )
    print(
        f"scale={geometry.scale_ratio:.6f} mm/px "
        f"placed={geometry.placed_width_units:.2f}x{geometry.placed_height_units:.2f}mm "
        f"x_offset={geometry.x_offset_units:.2f}mm"
    )
    print(f"pages={len(slices)}")
    for page_slice in slices:
        print(
            f"  #{page_slice.order_index}: y={page_slice.source_y_offset_px} "
            f"h={page_slice.height_px}px "
            f"({page_slice.placed_height_units(geometry):.2f}mm)"
        )

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
