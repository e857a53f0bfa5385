"""Presentation settings shared by every renderer.

Renderers never decide how text looks: they ask RenderOptions for a heading,
a label or a colored value, and the options pick terminal or markdown syntax
and whether ANSI colors are applied.
"""

import re
from typing import Callable

import click
from pydantic import BaseModel, ConfigDict

Sink = Callable[[str], None]

METHOD_COLORS = {
    "GET": "green",
    "POST": "yellow",
    "DELETE": "red",
    "PUT": "magenta",
    "PATCH": "magenta",
}


class RenderOptions(BaseModel):
    """Per-call output sink and presentation mode."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    output: Sink = click.echo
    use_colors: bool = True
    markdown: bool = False

    def emit(self, line: str = "") -> None:
        self.output(line)

    def style(
        self,
        text: str,
        fg: str | None = None,
        bold: bool = False,
        dim: bool = False,
        underline: bool = False,
    ) -> str:
        if not self.use_colors:
            return text
        return click.style(text, fg=fg, bold=bold or None, dim=dim or None, underline=underline or None)

    # -- building blocks ------------------------------------------------------

    def heading(self, text: str, level: int = 3) -> str:
        if self.markdown:
            return f"{'#' * level} {text}"
        return self.style(f"{text}:", fg="blue", bold=True)

    def field(self, label: str, value: str) -> str:
        if self.markdown:
            return f"**{label}:** {value}"
        return f"{self.style(label + ':', bold=True)} {value}"

    def code(self, text: str) -> str:
        return f"`{text}`" if self.markdown else text

    def method(self, verb: str) -> str:
        return self.style(verb, fg=METHOD_COLORS.get(verb.upper(), "cyan"))

    def muted(self, text: str) -> str:
        return self.style(text, dim=True)

    def error(self, message: str) -> str:
        if self.markdown:
            return f"**Error:** {message}"
        return self.style(f"Error: {message}", fg="red")

    def fence_open(self, lang: str = "") -> None:
        if self.markdown:
            self.emit(f"```{lang}")

    def fence_close(self) -> None:
        if self.markdown:
            self.emit("```")


class LineBuffer:
    """A sink that keeps lines in memory, for callers that need one string."""

    def __init__(self):
        self.lines: list[str] = []

    def __call__(self, line: str) -> None:
        self.lines.append(line)

    def getvalue(self) -> str:
        return "".join(line + "\n" for line in self.lines)


_HEADER_STYLES = {1: "blue", 2: "cyan", 3: "green", 4: "yellow"}


def format_markdown(markdown: str, options: RenderOptions) -> str:
    """Apply basic markdown formatting for terminal display."""

    def header(match: re.Match) -> str:
        level = len(match.group(1))
        return options.style(match.group(2), fg=_HEADER_STYLES.get(level), bold=True)

    text = re.sub(r"^(#{1,4}) (.*?)$", header, markdown, flags=re.MULTILINE)
    text = re.sub(r"```[^\n]*\n(.*?)```", lambda m: options.muted(m.group(1).rstrip("\n")), text, flags=re.DOTALL)
    text = re.sub(r"\*\*(.*?)\*\*", lambda m: options.style(m.group(1), bold=True), text)
    text = re.sub(r"(?<![*\w])\*([^*\n]+)\*(?!\*)", lambda m: options.style(m.group(1), underline=True), text)
    text = re.sub(r"`([^`\n]+)`", lambda m: options.muted(m.group(1)), text)
    text = re.sub(
        r"\[(.*?)\]\((.*?)\)",
        lambda m: f"{options.style(m.group(1), underline=True)} ({options.style(m.group(2), fg='cyan')})",
        text,
    )
    text = re.sub(r"^  - (.*?)$", r"    • \1", text, flags=re.MULTILINE)
    text = re.sub(r"^- (.*?)$", r"  • \1", text, flags=re.MULTILINE)
    return text
