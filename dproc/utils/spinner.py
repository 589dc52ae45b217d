"""
终端 Spinner（基于 rich.status）
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.status import Status

from .logger import console as default_console


class Spinner:
    """加载状态提示，结束时输出 ✓ / ✗ / ⚠ / ℹ"""

    def __init__(self, text: str, console: Console | None = None):
        self.text = text
        self.console = console or default_console
        self._status: Status | None = None

    def start(self, text: str | None = None) -> "Spinner":
        if text:
            self.text = text
        if self._status is None:
            self._status = self.console.status(self.text, spinner="dots", spinner_style="cyan")
            self._status.start()
        else:
            self._status.update(self.text)
        return self

    def update(self, text: str) -> None:
        self.text = text
        if self._status is not None:
            self._status.update(text)

    def stop(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def _finish(self, symbol: str, text: str | None) -> None:
        self.stop()
        self.console.print(f"{symbol} {escape(text or self.text)}")

    def succeed(self, text: str | None = None) -> None:
        self._finish("[green]✓[/green]", text)

    def fail(self, text: str | None = None) -> None:
        self._finish("[red]✗[/red]", text)

    def warn(self, text: str | None = None) -> None:
        self._finish("[yellow]⚠[/yellow]", text)

    def info(self, text: str | None = None) -> None:
        self._finish("[blue]ℹ[/blue]", text)


def create_spinner(text: str) -> Spinner:
    return Spinner(text)
