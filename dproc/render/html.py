"""
HTML 渲染器

将 Markdown 转换为带默认样式的完整 HTML 文档，1-3 级标题的 id 与目录链接一一对应
"""

from __future__ import annotations

from pathlib import Path

import markdown as md
from jinja2 import Template
from markdown.blockprocessors import HashHeaderProcessor
from markdown.extensions import Extension
from markdown.extensions.toc import stashedHTML2text
from markdown.treeprocessors import Treeprocessor

from ..errors import RenderError
from ..models import ExportFormat, RenderOptions
from .toc import (
    HEADING_RE,
    TocEntry,
    anchor_id,
    build_toc_entries,
    generate_toc,
    parse_heading,
    unique_anchor,
)


# 默认 HTML 模板
DEFAULT_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ title }}</title>
  <style>
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, Cantarell, sans-serif;
      line-height: 1.6;
      max-width: 800px;
      margin: 0 auto;
      padding: 2rem;
      color: #333;
    }
    h1, h2, h3 { color: #2c3e50; }
    code { background: #f4f4f4; padding: 0.2rem 0.4rem; border-radius: 3px; }
    pre { background: #f4f4f4; padding: 1rem; border-radius: 5px; overflow-x: auto; }
    pre code { padding: 0; }
    table { border-collapse: collapse; width: 100%; margin: 1rem 0; }
    th, td { border: 1px solid #ddd; padding: 0.75rem; text-align: left; }
    th { background: #f8f9fa; font-weight: 600; }
    nav.toc ul { list-style: none; padding-left: 0; }
  </style>
</head>
<body>
{% if toc %}
{{ toc | safe }}
{% endif %}
{{ body | safe }}
{% if author %}
<hr><p><em>Author: {{ author }}</em></p>
{% endif %}
</body>
</html>
"""

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")


class TocHeadingProcessor(HashHeaderProcessor):
    """
    ATX 标题处理器：目录收录的标题使用目录条目的锚点作为 id

    按标题源码行（级别 + 文本）与目录条目对应，目录链接与标题 id 来自同一处
    """

    def __init__(self, parser, entries: list[TocEntry]):
        super().__init__(parser)
        self.pending = list(entries)

    def run(self, parent, blocks):
        m = self.RE.search(blocks[0])
        super().run(parent, blocks)
        if m is None:
            return

        entry = self._take(m.group(0).strip("\n").rstrip())
        if entry:
            parent[-1].set("id", entry.anchor)

    def _take(self, line: str) -> TocEntry | None:
        if not HEADING_RE.match(line):
            return None
        # 按锚点比较，Markdown 预处理把制表符展开成空格不影响对应关系
        level, text = parse_heading(line)
        key = anchor_id(text)
        for i, entry in enumerate(self.pending):
            if entry.level == level and anchor_id(entry.text) == key:
                return self.pending.pop(i)
        return None


class HeadingIdTreeprocessor(Treeprocessor):
    """其余标题（4 级以下、Setext 标题等）取不与目录锚点冲突的 id"""

    def __init__(self, md, entries: list[TocEntry]):
        super().__init__(md)
        self.entries = entries

    def run(self, root):
        used = {entry.anchor for entry in self.entries}
        for el in root.iter():
            if el.tag in HEADING_TAGS and "id" not in el.attrib:
                text = stashedHTML2text("".join(el.itertext()), self.md).strip()
                el.set("id", unique_anchor(anchor_id(text), used))


class HeadingIdExtension(Extension):
    """给标题元素分配 id，与 generate_toc 的链接一致"""

    def __init__(self, entries: list[TocEntry], **kwargs):
        self.entries = entries
        super().__init__(**kwargs)

    def extendMarkdown(self, md):
        md.parser.blockprocessors.register(
            TocHeadingProcessor(md.parser, self.entries), "hashheader", 70
        )
        # 在行内处理（priority 20）之后运行
        md.treeprocessors.register(HeadingIdTreeprocessor(md, self.entries), "heading_ids", 5)


class HtmlRenderer:
    """
    HTML 渲染器

    Markdown → HTML 正文 → 套用样式模板
    """

    def __init__(self, template_string: str | None = None):
        """
        初始化渲染器

        Args:
            template_string: 自定义 jinja2 模板字符串（变量：title, toc, body, author）
        """
        self.template = Template(template_string or DEFAULT_HTML_TEMPLATE, autoescape=True)

    def convert(self, markdown: str) -> str:
        """仅转换 Markdown 正文为 HTML 片段"""
        return md.markdown(
            markdown,
            extensions=MARKDOWN_EXTENSIONS + [HeadingIdExtension(build_toc_entries(markdown))],
            output_format="html",
        )

    def render(self, markdown: str, options: RenderOptions) -> str:
        """
        渲染完整 HTML 文档

        Args:
            markdown: Markdown 源文本
            options: 渲染选项

        Returns:
            完整 HTML 字符串
        """
        toc = generate_toc(markdown) if options.include_toc else ""
        return self.template.render(
            title=options.resolved_title,
            toc=toc,
            body=self.convert(markdown),
            author=options.author,
        )

    def render_to_file(
        self,
        markdown: str,
        output_path: str | Path,
        options: RenderOptions,
    ) -> Path:
        """
        渲染并写入文件（自动创建父目录，已存在则覆盖）

        Raises:
            RenderError: 文件写入失败
        """
        output_path = Path(output_path)
        content = self.render(markdown, options)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise RenderError(ExportFormat.HTML.value, f"无法写入 {output_path}: {e}") from e

        return output_path
