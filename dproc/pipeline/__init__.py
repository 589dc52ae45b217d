"""
导出流水线模块
"""

from .dispatcher import ExportDispatcher, ExportListener, output_path_for

__all__ = [
    "ExportDispatcher",
    "ExportListener",
    "output_path_for",
]
