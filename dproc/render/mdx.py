"""
MDX 渲染器

在 Markdown 正文前加上 front matter（title / author / date）
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from ..errors import RenderError
from ..models import ExportFormat, RenderOptions


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC 时间，毫秒精度，Z 结尾，如 2026-10-19T08:00:00.000Z"""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _quote(value: str) -> str:
    # JSON 字符串同时也是合法的 YAML 双引号标量
    return json.dumps(value, ensure_ascii=False)


class MdxRenderer:
    """MDX 渲染器"""

    def render(
        self,
        markdown: str,
        options: RenderOptions,
        now: datetime | None = None,
    ) -> str:
        """
        生成 MDX 文本

        Args:
            markdown: Markdown 源文本（原样保留）
            options: 渲染选项
            now: 写入 date 字段的时间，默认当前时间

        Returns:
            MDX 字符串
        """
        now = now or datetime.now(timezone.utc)

        lines = ["---", f"title: {_quote(options.resolved_title)}"]
        if options.author:
            lines.append(f"author: {_quote(options.author)}")
        lines.append(f"date: {_quote(format_timestamp(now))}")
        lines.append("---")

        return "\n".join(lines) + "\n\n" + markdown + "\n"

    def render_to_file(
        self,
        markdown: str,
        output_path: str | Path,
        options: RenderOptions,
        now: datetime | None = None,
    ) -> Path:
        """
        生成 MDX 并写入文件（自动创建父目录，已存在则覆盖）

        Raises:
            RenderError: 文件写入失败
        """
        output_path = Path(output_path)
        content = self.render(markdown, options, now=now)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise RenderError(ExportFormat.MDX.value, f"无法写入 {output_path}: {e}") from e

        return output_path
