"""
异常定义
"""

from __future__ import annotations


class DprocError(Exception):
    """dproc 所有异常的基类"""


class NoFormatSpecified(DprocError):
    """未指定任何导出格式"""

    def __init__(self, message: str = "No export format specified. Use --html, --pdf, or --mdx"):
        super().__init__(message)


class InputReadError(DprocError):
    """输入文件无法读取"""


class ConfigError(DprocError):
    """配置文件无法读取或格式错误"""


class RenderError(DprocError):
    """单个格式渲染失败（不影响其他格式）"""

    def __init__(self, format: str, message: str):
        super().__init__(message)
        self.format = format
        self.message = message

    def __str__(self) -> str:
        return f"{self.format}: {self.message}"
