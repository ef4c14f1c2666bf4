"""Render raw assistant replies and snippet previews as HTML for rich-text viewers."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pastechat.core.errors import require_text
from pastechat.render.escaping import escape_html
from pastechat.render.highlighting import LineHighlighter, SyntaxPalette, language_for_filename

if TYPE_CHECKING:
    from pastechat.ai.snippets import Snippet
    from pastechat.core.config import ConfigManager

FENCE = "```"
HEADING_MARKER = "###"

BODY_STYLE = (
    "font-family: sans-serif; font-size: {font_size}px; background-color: #2b2b2b; "
    "color: #a9b7c6; padding: 10px;"
)
PRE_STYLE = "background-color:#3c3f41; color:#a9b7c6; padding:10px; border: 1px solid #555;"
SNIPPET_BODY_STYLE = (
    "font-family: monospace; font-size: {font_size}px; background-color: #2b2b2b; color: #a9b7c6;"
)

_BOLD_PATTERN = re.compile(r"\*\*(.*?)\*\*")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    """Split on any line terminator, keeping a trailing empty line."""

    return _LINE_BREAK.split(text)


class LineKind(Enum):
    FENCE_OPEN = "fence_open"
    FENCE_CLOSE = "fence_close"
    CODE = "code"
    HEADING = "heading"
    BOLD = "bold"
    PLAIN = "plain"


@dataclass(frozen=True)
class RenderState:
    """Scanner state: either plain prose or inside a fence with a language tag."""

    in_fence: bool = False
    language: str = ""


PLAIN_STATE = RenderState()


def classify(state: RenderState, line: str) -> LineKind:
    stripped = line.strip()
    if state.in_fence:
        return LineKind.FENCE_CLOSE if stripped == FENCE else LineKind.CODE
    if stripped.startswith(FENCE):
        return LineKind.FENCE_OPEN
    if stripped.startswith(HEADING_MARKER):
        return LineKind.HEADING
    if _BOLD_PATTERN.search(line):
        return LineKind.BOLD
    return LineKind.PLAIN


class FenceRenderer:
    """Converts a semi-structured reply into an HTML document, one line at a time."""

    def __init__(self, highlighter: LineHighlighter | None = None, *, font_size: int = 12) -> None:
        self.highlighter = highlighter or LineHighlighter()
        self.font_size = font_size

    @classmethod
    def from_config(cls, config: ConfigManager) -> FenceRenderer:
        render_cfg = config.section("render")
        palette = SyntaxPalette.from_mapping(render_cfg.get("colors"))
        return cls(LineHighlighter(palette), font_size=int(render_cfg.get("font_size") or 12))

    def render(self, raw_text: str) -> str:
        raw_text = require_text(raw_text, "raw_text")
        parts = [f'<html><body style="{BODY_STYLE.format(font_size=self.font_size)}">']
        state = PLAIN_STATE
        for line in split_lines(raw_text):
            state, markup = self.advance(state, line)
            parts.append(markup)
        if state.in_fence:
            parts.append("</pre>")
        parts.append("</body></html>")
        return "".join(parts)

    def advance(self, state: RenderState, line: str) -> tuple[RenderState, str]:
        """Consume one line and return the next state with the markup it produces."""

        kind = classify(state, line)
        if kind is LineKind.FENCE_OPEN:
            language = line.strip()[len(FENCE):].strip().lower()
            return RenderState(in_fence=True, language=language), f'<pre style="{PRE_STYLE}">'
        if kind is LineKind.FENCE_CLOSE:
            return PLAIN_STATE, "</pre>"
        if kind is LineKind.CODE:
            return state, self.highlighter.highlight(state.language, line) + "\n"
        if kind is LineKind.HEADING:
            heading = line.strip()[len(HEADING_MARKER):].strip()
            return state, f"<h3>{escape_html(heading)}</h3>"
        if kind is LineKind.BOLD:
            bolded = _BOLD_PATTERN.sub(r"<b>\1</b>", escape_html(line))
            return state, f"<p>{bolded}</p>"
        return state, f"<p>{escape_html(line)}</p>"

    def render_snippet(self, snippet: Snippet) -> str:
        """Standalone preview page for a tracked snippet, highlighted by file extension."""

        language = language_for_filename(snippet.file_name)
        code = "\n".join(self.highlighter.highlight(language, line) for line in split_lines(snippet.code))
        body_style = SNIPPET_BODY_STYLE.format(font_size=self.font_size)
        return (
            f'<html><body style="{body_style}">'
            f'<pre style="margin: 0; padding: 5px;">{code}</pre>'
            "</body></html>"
        )


__all__ = ["FenceRenderer", "LineKind", "RenderState", "classify", "split_lines"]
