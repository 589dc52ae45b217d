"""
测试公共 fixture
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from urllib.parse import unquote, urlparse

import pytest

from dproc.render import pdf as pdf_module


SAMPLE_MARKDOWN = """# Quarterly Report

Intro paragraph with **bold** text.

## Summary

| Metric | Value |
|--------|-------|
| rows   | 42    |

### Details

```python
print("hello")
```
"""


class FakePage:
    def __init__(self, browser: "FakeBrowser"):
        self.browser = browser

    async def goto(self, url: str, wait_until: str | None = None, timeout: float | None = None):
        self.browser.calls.append(("goto", url, wait_until, timeout))
        html_path = Path(unquote(urlparse(url).path))
        self.browser.loaded_html = html_path.read_text(encoding="utf-8")
        if self.browser.fail_on == "goto":
            raise TimeoutError("Timeout 30000ms exceeded waiting for networkidle")

    async def pdf(self, path: str, format: str, margin: dict, print_background: bool = False):
        self.browser.calls.append(("pdf", path, format, margin))
        if self.browser.fail_on == "pdf":
            raise RuntimeError("Printing failed")
        if self.browser.fail_on == "hang":
            await asyncio.sleep(60)
        Path(path).write_bytes(b"%PDF-1.4\n% fake\n")


class FakeBrowser:
    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.closed = False
        self.calls: list[tuple] = []
        self.loaded_html: str | None = None

    async def new_page(self) -> FakePage:
        return FakePage(self)

    async def close(self) -> None:
        self.closed = True


class FakeChromium:
    def __init__(self, browser: FakeBrowser):
        self.browser = browser
        self.launched = False

    async def launch(self, headless: bool = True) -> FakeBrowser:
        if self.browser.fail_on == "launch":
            raise RuntimeError("Executable doesn't exist, run playwright install")
        self.launched = True
        return self.browser


class FakePlaywright:
    """模拟 async_playwright() 返回的上下文管理器"""

    def __init__(self, fail_on: str | None = None):
        self.browser = FakeBrowser(fail_on)
        self.chromium = FakeChromium(self.browser)
        self.stopped = False

    async def __aenter__(self) -> "FakePlaywright":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.stopped = True


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """所有测试使用临时配置目录"""
    config_dir = tmp_path / "dproc-config"
    monkeypatch.setenv("DPROC_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def fake_playwright(monkeypatch):
    """替换浏览器启动函数，返回可检查状态的假浏览器"""
    def install(fail_on: str | None = None) -> FakePlaywright:
        fake = FakePlaywright(fail_on)
        monkeypatch.setattr(pdf_module, "_launch_playwright", lambda: fake)
        return fake
    return install


@pytest.fixture
def markdown_file(tmp_path) -> Path:
    path = tmp_path / "docs" / "report.md"
    path.parent.mkdir(parents=True)
    path.write_text(SAMPLE_MARKDOWN, encoding="utf-8")
    return path
