"""
测试 HTML 渲染器
"""

import re

import pytest

from dproc.errors import RenderError
from dproc.models import RenderOptions
from dproc.render import HtmlRenderer


def test_default_title_is_report():
    html = HtmlRenderer().render("hello", RenderOptions())
    assert "<title>Report</title>" in html
    assert html.startswith("<!DOCTYPE html>")


def test_custom_title_is_escaped():
    html = HtmlRenderer().render("hello", RenderOptions(title="Q3 <Sales> & Ops"))
    assert "<title>Q3 &lt;Sales&gt; &amp; Ops</title>" in html


def test_markdown_features_are_converted():
    source = (
        "# Title\n\n"
        "Some *emphasis* and a [link](https://example.com).\n\n"
        "| a | b |\n|---|---|\n| 1 | 2 |\n\n"
        "```\ncode block\n```\n"
    )
    html = HtmlRenderer().render(source, RenderOptions())
    assert "<em>emphasis</em>" in html
    assert '<a href="https://example.com">link</a>' in html
    assert "<table>" in html
    assert "<pre><code>code block" in html


def test_toc_is_placed_before_body():
    html = HtmlRenderer().render("# A\n## B\n### C\nbody", RenderOptions(include_toc=True))
    toc_pos = html.index('<nav class="toc">')
    body_pos = html.index('<h1 id="a">A</h1>')
    assert toc_pos < body_pos
    assert '<a href="#b">B</a>' in html
    assert '<h2 id="b">B</h2>' in html
    assert '<h3 id="c">C</h3>' in html


def test_toc_omitted_when_disabled_or_no_headings():
    renderer = HtmlRenderer()
    assert '<nav class="toc">' not in renderer.render("# A\nbody", RenderOptions())
    assert '<nav class="toc">' not in renderer.render("body only", RenderOptions(include_toc=True))


def test_duplicate_heading_links_resolve():
    html = HtmlRenderer().render("## Overview\n\n## Overview\n", RenderOptions(include_toc=True))
    assert '<a href="#overview_1">Overview</a>' in html
    assert '<h2 id="overview_1">Overview</h2>' in html


def toc_links_and_heading_ids(html: str) -> tuple[list[str], list[str]]:
    links = re.findall(r'<a href="#([^"]*)">', html)
    ids = re.findall(r'<h[1-6] id="([^"]*)"', html)
    return links, ids


def test_inline_markup_heading_link_matches_id():
    html = HtmlRenderer().render("## **Bold** title\n", RenderOptions(include_toc=True))
    links, ids = toc_links_and_heading_ids(html)
    assert links == ["-bold-title"]
    assert '<h2 id="-bold-title"><strong>Bold</strong> title</h2>' in html


def test_fenced_heading_is_not_in_toc():
    source = "```\n# Setup\n```\n\n# Setup\n\ntext\n"
    html = HtmlRenderer().render(source, RenderOptions(include_toc=True))
    links, ids = toc_links_and_heading_ids(html)
    assert links == ["setup"]
    assert ids == ["setup"]
    assert '<h1 id="setup">Setup</h1>' in html


def test_deep_heading_does_not_take_toc_anchor():
    html = HtmlRenderer().render("#### Notes\n\n## Notes\n", RenderOptions(include_toc=True))
    links, ids = toc_links_and_heading_ids(html)
    assert links == ["notes"]
    assert '<h2 id="notes">Notes</h2>' in html
    assert '<h4 id="notes_1">Notes</h4>' in html


def test_every_toc_link_has_a_heading():
    source = "# Intro\n\n#### Intro\n\n## Intro\n\n```\n## Intro\n```\n\n### *Why* it matters\n"
    html = HtmlRenderer().render(source, RenderOptions(include_toc=True))
    links, ids = toc_links_and_heading_ids(html)
    assert links == ["intro", "intro_1", "-why-it-matters"]
    assert set(links) <= set(ids)
    assert len(ids) == len(set(ids))


def test_author_byline():
    renderer = HtmlRenderer()
    html = renderer.render("body", RenderOptions(author="Jane Doe"))
    assert "<hr><p><em>Author: Jane Doe</em></p>" in html
    assert html.index("<p>body</p>") < html.index("Author: Jane Doe")
    assert "Author:" not in renderer.render("body", RenderOptions())


def test_render_to_file_creates_parents_and_overwrites(tmp_path):
    renderer = HtmlRenderer()
    output = tmp_path / "nested" / "dir" / "out.html"

    renderer.render_to_file("# First", output, RenderOptions())
    renderer.render_to_file("# Second", output, RenderOptions())

    content = output.read_text(encoding="utf-8")
    assert "Second" in content
    assert "First" not in content


def test_render_to_file_is_idempotent(tmp_path):
    renderer = HtmlRenderer()
    options = RenderOptions(title="T", author="A", include_toc=True)
    output = tmp_path / "out.html"

    renderer.render_to_file("# A\n## B\ntext", output, options)
    first = output.read_bytes()
    renderer.render_to_file("# A\n## B\ntext", output, options)
    assert output.read_bytes() == first


def test_render_to_file_write_failure(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(RenderError) as exc_info:
        HtmlRenderer().render_to_file("# A", blocker / "out.html", RenderOptions())
    assert exc_info.value.format == "html"


def test_options_are_not_mutated():
    options = RenderOptions(title="T", include_toc=True)
    HtmlRenderer().render("# A", options)
    assert options == RenderOptions(title="T", include_toc=True)
    with pytest.raises(Exception):
        options.title = "changed"
