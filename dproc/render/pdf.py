"""
PDF 渲染器

先生成中间 HTML，再用 Playwright 无头浏览器打印为 PDF
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from ..errors import RenderError
from ..models import ExportFormat, RenderOptions
from ..utils.logger import create_logger
from .html import HtmlRenderer


log = create_logger("pdf")

TEMP_SUFFIX = ".temp.html"
DEFAULT_TIMEOUT = 30.0
PAGE_FORMAT = "A4"
PAGE_MARGIN = {"top": "1cm", "right": "1cm", "bottom": "1cm", "left": "1cm"}


def temp_html_path(output_path: str | Path) -> Path:
    """中间 HTML 路径：同目录、同名、.temp.html 后缀"""
    output_path = Path(output_path)
    return output_path.with_name(output_path.stem + TEMP_SUFFIX)


def _launch_playwright():
    """返回 async_playwright() 上下文管理器"""
    try:
        from playwright.async_api import async_playwright
    except ImportError as e:
        raise RenderError(
            ExportFormat.PDF.value,
            "需要安装 playwright: pip install playwright && playwright install chromium",
        ) from e
    return async_playwright()


class PdfRenderer:
    """
    PDF 渲染器

    流程：
    1. HtmlRenderer 写出中间文件 {stem}.temp.html
    2. 无头 Chromium 打开该文件，等待 networkidle
    3. 以 A4、四边 1cm 边距打印 PDF
    4. 无论成功与否，关闭浏览器并删除中间文件
    """

    def __init__(
        self,
        html_renderer: HtmlRenderer | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        初始化渲染器

        Args:
            html_renderer: 生成中间 HTML 的渲染器
            timeout: 超时（秒），分别限制页面加载（networkidle）和 PDF 打印
        """
        self.html_renderer = html_renderer or HtmlRenderer()
        self.timeout = timeout

    async def render_async(
        self,
        markdown: str,
        output_path: str | Path,
        options: RenderOptions,
    ) -> Path:
        """
        异步渲染 Markdown 为 PDF

        Args:
            markdown: Markdown 源文本
            output_path: PDF 输出路径
            options: 渲染选项

        Returns:
            输出文件路径

        Raises:
            RenderError: 中间文件写入、浏览器启动、加载或打印失败
        """
        output_path = Path(output_path)
        temp_path = temp_html_path(output_path)

        try:
            self.html_renderer.render_to_file(markdown, temp_path, options)
            await self._print_pdf(temp_path, output_path)
        except Exception as e:
            message = e.message if isinstance(e, RenderError) else (str(e) or e.__class__.__name__)
            raise RenderError(ExportFormat.PDF.value, message) from e
        finally:
            if temp_path.exists():
                temp_path.unlink()

        return output_path

    async def _print_pdf(self, html_path: Path, output_path: Path) -> None:
        timeout_ms = self.timeout * 1000

        async with _launch_playwright() as playwright:
            browser = await playwright.chromium.launch(headless=True)
            try:
                page = await browser.new_page()
                log.debug("加载中间文件 %s", html_path)
                await page.goto(
                    html_path.resolve().as_uri(),
                    wait_until="networkidle",
                    timeout=timeout_ms,
                )
                # page.pdf 没有 timeout 参数，用 wait_for 限制打印时间
                try:
                    await asyncio.wait_for(
                        page.pdf(
                            path=str(output_path),
                            format=PAGE_FORMAT,
                            margin=PAGE_MARGIN,
                            print_background=True,
                        ),
                        timeout=self.timeout,
                    )
                except asyncio.TimeoutError as e:
                    raise RenderError(
                        ExportFormat.PDF.value,
                        f"打印 PDF 超时（{self.timeout:g} 秒）",
                    ) from e
            finally:
                await browser.close()

    def render(
        self,
        markdown: str,
        output_path: str | Path,
        options: RenderOptions,
    ) -> Path:
        """同步渲染 Markdown 为 PDF"""
        return asyncio.run(self.render_async(markdown, output_path, options))
