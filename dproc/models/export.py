"""
导出流水线数据模型：RenderOptions, ExportTarget, ExportOutcome 等
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_TITLE = "Report"


class ExportFormat(str, Enum):
    """导出格式（声明顺序即处理顺序）"""
    HTML = "html"
    PDF = "pdf"
    MDX = "mdx"

    @classmethod
    def ordered(cls, formats) -> list[ExportFormat]:
        """按固定顺序 html → pdf → mdx 排列，去重"""
        requested = {cls(f) for f in formats}
        return [f for f in cls if f in requested]


class RenderOptions(BaseModel):
    """渲染选项，一次导出中所有格式共用同一实例"""
    model_config = ConfigDict(frozen=True)

    title: str | None = Field(default=None, description="文档标题")
    author: str | None = Field(default=None, description="作者")
    include_toc: bool = Field(default=False, description="是否生成目录")

    @property
    def resolved_title(self) -> str:
        return self.title or DEFAULT_TITLE


class ExportTarget(BaseModel):
    """导出目标：格式 + 输出路径"""
    model_config = ConfigDict(frozen=True)

    format: ExportFormat
    output_path: Path


class ExportOutcome(BaseModel):
    """单个目标的导出结果"""
    format: ExportFormat
    path: Path
    error: str | None = Field(default=None, description="失败原因，成功时为空")

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, target: ExportTarget) -> ExportOutcome:
        return cls(format=target.format, path=target.output_path)

    @classmethod
    def failure(cls, target: ExportTarget, message: str) -> ExportOutcome:
        return cls(format=target.format, path=target.output_path, error=message or "unknown error")


class ExportReport(BaseModel):
    """一次导出的全部结果（有序）"""
    outcomes: list[ExportOutcome] = Field(default_factory=list)

    @property
    def succeeded(self) -> list[ExportOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> list[ExportOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def all_failed(self) -> bool:
        return bool(self.outcomes) and not self.succeeded
