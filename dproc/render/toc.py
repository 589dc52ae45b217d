"""
目录（TOC）生成

从 Markdown 源文本中提取 1-3 级 ATX 标题，生成带锚点链接的导航片段。
HTML 正文中的标题 id 由同一组目录条目分配，见 html.HeadingIdExtension
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass


HEADING_RE = re.compile(r"^#{1,3}[ \t]+.+$")
FENCE_RE = re.compile(r"^(`{3,}|~{3,})")
HEADING_PREFIX_RE = re.compile(r"^(#+)\s+")
NON_WORD_RE = re.compile(r"\W+")
ID_COUNT_RE = re.compile(r"^(.*)_([0-9]+)$")

TOC_TITLE = "Table of Contents"
INDENT_REM = 1.5


@dataclass(frozen=True)
class TocEntry:
    """目录条目"""
    level: int
    text: str
    anchor: str


def extract_headings(markdown: str) -> list[str]:
    """
    提取 1-3 级标题行（按文档顺序），跳过围栏代码块中的行

    Args:
        markdown: Markdown 源文本

    Returns:
        标题行列表，没有标题时为空列表
    """
    headings = []
    fence = None
    for line in markdown.splitlines():
        m = FENCE_RE.match(line)
        if fence:
            # 同种字符、长度不短于开头的围栏才算结束
            if m and m.group(1)[0] == fence[0] and len(m.group(1)) >= len(fence):
                fence = None
        elif m:
            fence = m.group(1)
        elif HEADING_RE.match(line):
            headings.append(line.rstrip())
    return headings


def anchor_id(text: str) -> str:
    """标题文本 → 锚点 ID：小写，连续的非单词字符替换为一个连字符"""
    return NON_WORD_RE.sub("-", text.lower())


def unique_anchor(anchor: str, used: set[str]) -> str:
    """重复锚点追加 _1、_2 后缀"""
    while anchor in used or not anchor:
        m = ID_COUNT_RE.match(anchor)
        if m:
            anchor = f"{m.group(1)}_{int(m.group(2)) + 1}"
        else:
            anchor = f"{anchor}_1"
    used.add(anchor)
    return anchor


def parse_heading(heading: str) -> tuple[int, str]:
    """标题行 → (级别, 文本)"""
    m = HEADING_PREFIX_RE.match(heading)
    return len(m.group(1)), heading[m.end():].strip()


def build_toc_entries(markdown: str) -> list[TocEntry]:
    """解析标题为目录条目"""
    entries = []
    used: set[str] = set()
    for heading in extract_headings(markdown):
        level, text = parse_heading(heading)
        entries.append(TocEntry(level=level, text=text, anchor=unique_anchor(anchor_id(text), used)))
    return entries


def generate_toc(markdown: str) -> str:
    """
    生成目录 HTML 片段

    没有标题时返回空字符串，调用方应直接省略目录
    """
    entries = build_toc_entries(markdown)
    if not entries:
        return ""

    items = []
    for entry in entries:
        indent = (entry.level - 1) * INDENT_REM
        items.append(
            f'<li style="margin-left: {indent:g}rem">'
            f'<a href="#{html.escape(entry.anchor)}">{html.escape(entry.text)}</a></li>'
        )

    return (
        f'<nav class="toc"><h2>{TOC_TITLE}</h2><ul>\n'
        + "\n".join(items)
        + "\n</ul></nav><hr>"
    )
