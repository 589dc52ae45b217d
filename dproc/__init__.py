"""
dproc: AI-powered data processing CLI
Markdown 文档多格式导出（HTML / PDF / MDX）
"""

__version__ = "0.1.0"

from .errors import DprocError, NoFormatSpecified, InputReadError, RenderError, ConfigError
from .models import ExportFormat, ExportOutcome, ExportReport, ExportTarget, RenderOptions
from .config import load_config, CliConfig, ConfigManager
from .render import HtmlRenderer, PdfRenderer, MdxRenderer, generate_toc
from .pipeline import ExportDispatcher

__all__ = [
    # 版本
    "__version__",
    # 异常
    "DprocError",
    "NoFormatSpecified",
    "InputReadError",
    "RenderError",
    "ConfigError",
    # 模型
    "ExportFormat",
    "ExportOutcome",
    "ExportReport",
    "ExportTarget",
    "RenderOptions",
    # 配置
    "load_config",
    "CliConfig",
    "ConfigManager",
    # 渲染
    "HtmlRenderer",
    "PdfRenderer",
    "MdxRenderer",
    "generate_toc",
    # 导出
    "ExportDispatcher",
]
