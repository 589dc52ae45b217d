"""
渲染模块

负责 HTML / PDF / MDX 三种格式的导出
"""

from .html import HtmlRenderer
from .mdx import MdxRenderer
from .pdf import PdfRenderer
from .toc import TocEntry, anchor_id, build_toc_entries, extract_headings, generate_toc

__all__ = [
    "HtmlRenderer",
    "MdxRenderer",
    "PdfRenderer",
    "TocEntry",
    "anchor_id",
    "build_toc_entries",
    "extract_headings",
    "generate_toc",
]
