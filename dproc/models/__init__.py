"""
数据模型模块
"""

from .export import (
    DEFAULT_TITLE,
    ExportFormat,
    ExportOutcome,
    ExportReport,
    ExportTarget,
    RenderOptions,
)

__all__ = [
    "DEFAULT_TITLE",
    "ExportFormat",
    "ExportOutcome",
    "ExportReport",
    "ExportTarget",
    "RenderOptions",
]
