"""
控制台展示工具
"""

from __future__ import annotations

from typing import Iterable

from rich.markup import escape
from rich.panel import Panel

from .logger import console


class Display:
    """常用的控制台展示方法"""

    @staticmethod
    def banner() -> None:
        console.print(Panel(
            "[bold cyan]dproc CLI[/bold cyan]\n"
            "[dim]AI-powered data processing[/dim]",
            border_style="cyan",
            expand=False,
            padding=(1, 2),
        ))

    @staticmethod
    def welcome(message: str) -> None:
        console.print(Panel(message, border_style="green", expand=False, padding=(1, 2)))

    @staticmethod
    def section(title: str) -> None:
        console.print(f"\n[bold underline]{title}[/bold underline]\n")

    @staticmethod
    def list(items: Iterable[str], bullet: str = "•") -> None:
        for item in items:
            console.print(f"[cyan]{bullet}[/cyan] {escape(str(item))}", highlight=False)

    @staticmethod
    def empty() -> None:
        console.print()
