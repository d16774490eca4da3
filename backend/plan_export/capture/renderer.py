"""
Playwright 渲染引擎 - 无头浏览器加载页面并对元素截图

职责：
1. 加载URL或内联HTML（device_scale_factor = 放大倍率）
2. 在页面内施加/撤销临时class、样式、隐藏
3. 对子树根元素截图（PNG，保留透明，由截图适配器铺底色）

外部图片加载失败只记录WARNING，不中断截图（该图片像素缺失）。

依赖：
- playwright: 浏览器自动化（需执行 `playwright install chromium`）

测试要点：
- test_with_base: <base> 注入
- test_render_inline_html: 内联HTML截图
- test_render_missing_selector: 选择器未命中
- test_failed_image_ignored: 外部图片失败被吸收
"""

from __future__ import annotations

import logging
import re
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

from playwright.sync_api import Page, sync_playwright

from ..config import RuntimeConfig, get_config
from ..interfaces import IRenderer, IRenderSurface

if TYPE_CHECKING:
    from ..models import ContentRef

logger = logging.getLogger(__name__)

_MEASURE_JS = """
(selector) => {
  const el = document.querySelector(selector);
  if (!el) return null;
  return [el.scrollWidth, el.scrollHeight];
}
"""

_ADD_CLASS_JS = """
([selector, cls]) => {
  const el = document.querySelector(selector);
  if (!el || el.classList.contains(cls)) return false;
  el.classList.add(cls);
  return true;
}
"""

_REMOVE_CLASS_JS = """
([selector, cls]) => {
  const el = document.querySelector(selector);
  if (el) el.classList.remove(cls);
}
"""

_INJECT_STYLE_JS = """
([id, css]) => {
  const style = document.createElement('style');
  style.id = id;
  style.textContent = css;
  document.head.appendChild(style);
}
"""

_REMOVE_STYLE_JS = """
(id) => {
  const style = document.getElementById(id);
  if (style) style.remove();
}
"""

_HIDE_JS = """
(selectors) => {
  let count = 0;
  for (const sel of selectors) {
    for (const el of document.querySelectorAll(sel)) {
      if (el.dataset.planExportDisplay !== undefined) continue;
      el.dataset.planExportDisplay = el.style.display;
      el.style.display = 'none';
      count++;
    }
  }
  return count;
}
"""

_UNHIDE_JS = """
(selectors) => {
  for (const sel of selectors) {
    for (const el of document.querySelectorAll(sel)) {
      if (el.dataset.planExportDisplay === undefined) continue;
      el.style.display = el.dataset.planExportDisplay;
      delete el.dataset.planExportDisplay;
    }
  }
}
"""

_FONTS_READY_JS = "() => document.fonts.ready.then(() => true)"


class PlaywrightSurface(IRenderSurface):
    """Playwright 页面上的渲染表面"""

    def __init__(self, page: Page, selector: str):
        self.page = page
        self.selector = selector

    def measure(self) -> tuple[float, float] | None:
        size = self.page.evaluate(_MEASURE_JS, self.selector)
        if size is None:
            return None
        return float(size[0]), float(size[1])

    def add_class(self, css_class: str) -> bool:
        return bool(self.page.evaluate(_ADD_CLASS_JS, [self.selector, css_class]))

    def remove_class(self, css_class: str) -> None:
        self.page.evaluate(_REMOVE_CLASS_JS, [self.selector, css_class])

    def inject_style(self, css: str) -> str:
        handle = f"plan-export-style-{uuid.uuid4().hex[:8]}"
        self.page.evaluate(_INJECT_STYLE_JS, [handle, css])
        return handle

    def remove_style(self, handle: str) -> None:
        self.page.evaluate(_REMOVE_STYLE_JS, handle)

    def hide(self, selectors: list[str]) -> int:
        return int(self.page.evaluate(_HIDE_JS, selectors))

    def unhide(self, selectors: list[str]) -> None:
        self.page.evaluate(_UNHIDE_JS, selectors)

    def wait_for_fonts(self) -> None:
        self.page.evaluate(_FONTS_READY_JS)

    def rasterize(self) -> bytes:
        locator = self.page.locator(self.selector).first
        return locator.screenshot(type="png", omit_background=True, animations="disabled")


class PlaywrightRenderer(IRenderer):
    """Playwright 渲染引擎实现"""

    def __init__(
        self,
        browser: str | None = None,
        viewport: tuple[int, int] | None = None,
        wait_until: str | None = None,
        load_timeout_ms: int | None = None,
        config: RuntimeConfig | None = None,
    ):
        renderer_config = (config or get_config()).renderer
        self.browser = browser or renderer_config.browser
        self.viewport = viewport or (
            renderer_config.viewport_width,
            renderer_config.viewport_height,
        )
        self.wait_until = wait_until or renderer_config.wait_until
        self.load_timeout_ms = (
            load_timeout_ms if load_timeout_ms is not None else renderer_config.load_timeout_ms
        )

    @contextmanager
    def open(self, content_ref: ContentRef, magnification: float) -> Iterator[PlaywrightSurface]:
        """启动浏览器并加载内容，退出时关闭浏览器"""
        with sync_playwright() as p:
            browser_type = getattr(p, self.browser)
            browser = browser_type.launch(headless=True)
            try:
                context = browser.new_context(
                    viewport={"width": self.viewport[0], "height": self.viewport[1]},
                    device_scale_factor=magnification,
                )
                page = context.new_page()
                page.set_default_timeout(self.load_timeout_ms)
                page.set_default_navigation_timeout(self.load_timeout_ms)
                page.on("requestfailed", self._on_request_failed)

                self._load(page, content_ref)
                yield PlaywrightSurface(page, content_ref.selector)
            finally:
                browser.close()

    def _load(self, page: Page, content_ref: ContentRef) -> None:
        """加载URL或内联HTML"""
        logger.debug(f"加载内容: {content_ref.describe()}")
        if content_ref.url is not None:
            page.goto(content_ref.url, wait_until=self.wait_until)
            return

        html = content_ref.html or ""
        if content_ref.base_url:
            html = self._with_base(html, content_ref.base_url)
        page.set_content(html, wait_until=self.wait_until)

    @staticmethod
    def _with_base(html: str, base_url: str) -> str:
        """插入<base>，使内联HTML的相对资源可解析"""
        base_tag = f'<base href="{base_url}">'
        match = re.search(r"<head[^>]*>", html, flags=re.IGNORECASE)
        if match:
            return html[: match.end()] + base_tag + html[match.end():]
        return base_tag + html

    @staticmethod
    def _on_request_failed(request) -> None:
        # 外部资源失败不中断截图
        logger.warning(f"子资源加载失败（已忽略）: {request.url} {request.failure or ''}")
