"""
导出调度器

读取一次 Markdown，按 html → pdf → mdx 的固定顺序调用各渲染器，
每个格式的成功 / 失败单独记录，互不影响
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable, Protocol

from ..errors import InputReadError, NoFormatSpecified, RenderError
from ..models import (
    ExportFormat,
    ExportOutcome,
    ExportReport,
    ExportTarget,
    RenderOptions,
)
from ..render import HtmlRenderer, MdxRenderer, PdfRenderer
from ..utils.logger import create_logger


log = create_logger("export")

MARKDOWN_SUFFIXES = (".md", ".markdown")


class ExportListener(Protocol):
    """导出进度回调"""

    def started(self, target: ExportTarget) -> None:
        ...

    def finished(self, outcome: ExportOutcome) -> None:
        ...


def output_path_for(input_path: str | Path, format: ExportFormat) -> Path:
    """
    {输入目录}/{输入文件名}.{格式}

    只去掉 .md / .markdown 扩展名，其他文件名原样保留（notes.mdx → notes.mdx.mdx），
    避免输出覆盖输入文件
    """
    input_path = Path(input_path)
    if input_path.suffix.lower() in MARKDOWN_SUFFIXES:
        base = input_path.stem
    else:
        base = input_path.name
    return input_path.with_name(f"{base}.{format.value}")


class ExportDispatcher:
    """
    导出调度器

    - 未指定格式时在任何 I/O 之前抛出 NoFormatSpecified
    - 输入文件读取失败抛出 InputReadError
    - 单个格式失败记录为失败结果，继续处理后续格式
    - 输出路径与输入文件相同时不写入，记录为失败结果
    """

    def __init__(
        self,
        html_renderer: HtmlRenderer | None = None,
        pdf_renderer: PdfRenderer | None = None,
        mdx_renderer: MdxRenderer | None = None,
    ):
        self.html_renderer = html_renderer or HtmlRenderer()
        self.pdf_renderer = pdf_renderer or PdfRenderer(html_renderer=self.html_renderer)
        self.mdx_renderer = mdx_renderer or MdxRenderer()

    def plan(
        self,
        input_path: str | Path,
        formats: Iterable[ExportFormat | str],
    ) -> list[ExportTarget]:
        """
        计算导出目标

        Raises:
            NoFormatSpecified: formats 为空
        """
        ordered = ExportFormat.ordered(formats)
        if not ordered:
            raise NoFormatSpecified()
        return [ExportTarget(format=f, output_path=output_path_for(input_path, f)) for f in ordered]

    @staticmethod
    def read_source(input_path: str | Path) -> str:
        try:
            with open(input_path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadError(f"无法读取输入文件 {input_path}: {e}") from e

    async def export_target(
        self,
        markdown: str,
        target: ExportTarget,
        options: RenderOptions,
    ) -> ExportOutcome:
        """导出单个目标，失败时返回失败结果而不是抛出异常"""
        try:
            if target.format == ExportFormat.HTML:
                self.html_renderer.render_to_file(markdown, target.output_path, options)
            elif target.format == ExportFormat.PDF:
                await self.pdf_renderer.render_async(markdown, target.output_path, options)
            elif target.format == ExportFormat.MDX:
                self.mdx_renderer.render_to_file(markdown, target.output_path, options)
        except RenderError as e:
            return ExportOutcome.failure(target, e.message)
        except OSError as e:
            return ExportOutcome.failure(target, str(e))

        return ExportOutcome.success(target)

    async def export_async(
        self,
        input_path: str | Path,
        formats: Iterable[ExportFormat | str],
        options: RenderOptions | None = None,
        listener: ExportListener | None = None,
    ) -> ExportReport:
        """
        执行导出

        Args:
            input_path: Markdown 输入文件
            formats: 需要导出的格式
            options: 渲染选项（所有格式共用）
            listener: 进度回调（可选）

        Returns:
            按 html → pdf → mdx 顺序排列的导出结果
        """
        targets = self.plan(input_path, formats)
        options = options or RenderOptions()
        markdown = self.read_source(input_path)
        source_path = Path(input_path).resolve()

        report = ExportReport()
        for target in targets:
            if listener:
                listener.started(target)

            if target.output_path.resolve() == source_path:
                outcome = ExportOutcome.failure(target, f"输出路径与输入文件相同，已跳过: {target.output_path}")
            else:
                outcome = await self.export_target(markdown, target, options)
            if outcome.succeeded:
                log.debug("导出成功: %s", outcome.path)
            else:
                log.debug("导出失败 [%s]: %s", outcome.format.value, outcome.error)

            report.outcomes.append(outcome)
            if listener:
                listener.finished(outcome)

        return report

    def export(
        self,
        input_path: str | Path,
        formats: Iterable[ExportFormat | str],
        options: RenderOptions | None = None,
        listener: ExportListener | None = None,
    ) -> ExportReport:
        """同步执行导出"""
        return asyncio.run(self.export_async(input_path, formats, options, listener))
