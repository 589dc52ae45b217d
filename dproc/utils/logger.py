"""
日志工具

控制台输出带符号的彩色消息，同时写入标准 logging（dproc.cli.<prefix>）便于调试
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape


NAMESPACE = "dproc.cli"

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """
    配置调试日志

    verbose 为真或设置了 DPROC_DEBUG 时，以 DEBUG 级别输出到 stderr
    """
    enabled = verbose or os.getenv("DPROC_DEBUG", "").lower() in ("1", "true", "yes")
    root = logging.getLogger("dproc")
    if not enabled:
        root.setLevel(logging.WARNING)
        return

    root.setLevel(logging.DEBUG)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=err_console, show_path=False))


class Logger:
    """带前缀的控制台日志"""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self._logger = logging.getLogger(f"{NAMESPACE}.{prefix}")

    def info(self, message: str) -> None:
        console.print(f"[blue]ℹ[/blue] {escape(message)}")
        self._logger.debug("info: %s", message)

    def success(self, message: str) -> None:
        console.print(f"[green]✔[/green] {escape(message)}")
        self._logger.debug("success: %s", message)

    def warn(self, message: str) -> None:
        err_console.print(f"[yellow]⚠[/yellow] {escape(message)}")
        self._logger.debug("warn: %s", message)

    def error(self, message: str) -> None:
        err_console.print(f"[red]✖[/red] {escape(message)}")
        self._logger.debug("error: %s", message)

    def debug(self, message: str, *args) -> None:
        """仅写入调试日志，args 为 % 格式化参数"""
        self._logger.debug(message, *args)


def create_logger(prefix: str) -> Logger:
    return Logger(prefix)
