from pathlib import Path

import click

from klb_describe.generator.style import LineBuffer, RenderOptions, format_markdown

FIXTURES = Path(__file__).parent / "fixtures"

PLAIN = RenderOptions(use_colors=False)
MARKDOWN = RenderOptions(use_colors=False, markdown=True)


class TestRenderOptions:
    def test_terminal_blocks(self):
        assert PLAIN.heading("Usage") == "Usage:"
        assert PLAIN.field("Type", "Resource") == "Type: Resource"
        assert PLAIN.code("User") == "User"
        assert PLAIN.error("boom") == "Error: boom"

    def test_markdown_blocks(self):
        assert MARKDOWN.heading("Usage") == "### Usage"
        assert MARKDOWN.heading("Usage", 4) == "#### Usage"
        assert MARKDOWN.field("Type", "Resource") == "**Type:** Resource"
        assert MARKDOWN.code("User") == "`User`"
        assert MARKDOWN.error("boom") == "**Error:** boom"

    def test_colors(self):
        options = RenderOptions()
        assert options.style("x", fg="red") == click.style("x", fg="red")
        assert options.method("DELETE") == click.style("DELETE", fg="red")
        assert options.method("OPTIONS") == click.style("OPTIONS", fg="cyan")

    def test_no_colors(self):
        assert PLAIN.style("x", fg="red", bold=True) == "x"

    def test_fences_only_in_markdown(self):
        buffer = LineBuffer()
        options = RenderOptions(output=buffer, use_colors=False)
        options.fence_open("json")
        options.fence_close()
        assert buffer.lines == []

        options = RenderOptions(output=buffer, markdown=True)
        options.fence_open("json")
        options.fence_close()
        assert buffer.lines == ["```json", "```"]


class TestLineBuffer:
    def test_getvalue(self):
        buffer = LineBuffer()
        buffer("a")
        buffer("")
        buffer("b")
        assert buffer.getvalue() == "a\n\nb\n"


class TestFormatMarkdown:
    def test_plain_rendering(self):
        text = format_markdown((FIXTURES / "readme.md").read_text(encoding="utf-8"), PLAIN)
        lines = text.splitlines()
        assert lines[0] == "klbfw"
        assert "Framework helpers for the KLB API." in lines
        assert "Usage" in lines
        assert "  • call klbfw.rest()" in lines
        assert "  • see docs (https://example.com/docs)" in lines

    def test_code_block(self):
        assert format_markdown("```js\nlet a = 1;\n```", PLAIN) == "let a = 1;"

    def test_colored_header(self):
        assert format_markdown("# Title", RenderOptions()) == click.style("Title", fg="blue", bold=True)
