"""Regex-driven HTML syntax highlighting for single lines of code.

Each supported language has one static, ordered table of :class:`HighlightRule`.
The rules run one after another over the same string: comments, then strings,
then shell variables, then one pass per keyword. Later passes see the spans
inserted by earlier ones, so a keyword inside a comment is highlighted again and
a quote inside a shell comment can open a string span. Pass order is part of
the output format and must not change.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Pattern

from pastechat.core.errors import require_text
from pastechat.render.escaping import escape_html


@dataclass(frozen=True)
class SyntaxPalette:
    """Hex colors for each highlight role."""

    comment: str = "#808080"
    string: str = "#6A8759"
    variable: str = "#9876AA"
    keyword: str = "#CC7832"

    @classmethod
    def from_mapping(cls, colors: Mapping[str, Any] | None) -> SyntaxPalette:
        if not colors:
            return cls()
        known = {key: str(value) for key, value in colors.items() if key in cls.__dataclass_fields__ and value}
        return cls(**known)

    def color(self, role: str) -> str:
        return getattr(self, role)


@dataclass(frozen=True)
class HighlightRule:
    """A pattern plus the template used to rebuild each match inside a colored span.

    ``template`` is a ``str.format`` string; ``{0}`` is the whole match and
    ``{1}``... are the pattern's groups.
    """

    pattern: Pattern[str]
    role: str
    template: str = "{0}"

    def apply(self, text: str, palette: SyntaxPalette) -> str:
        color = palette.color(self.role)

        def _wrap(match: re.Match[str]) -> str:
            groups = [group or "" for group in match.groups()]
            inner = self.template.format(match.group(0), *groups)
            return f"<span style='color:{color}'>{inner}</span>"

        return self.pattern.sub(_wrap, text)


def _keyword_rules(keywords: Iterable[str]) -> tuple[HighlightRule, ...]:
    return tuple(HighlightRule(re.compile(rf"\b{re.escape(kw)}\b"), "keyword") for kw in keywords)


STRING_RULE = HighlightRule(re.compile(r'"(.*?)"'), "string", "&quot;{1}&quot;")

JAVA_KEYWORDS = (
    "public", "class", "static", "void", "int", "long", "if", "else",
    "return", "new", "private", "protected", "boolean", "String",
    "package", "import", "override", "fun", "val", "var",
)

BASH_KEYWORDS = (
    "echo", "cd", "ls", "pwd", "rm", "mkdir", "touch", "cat",
    "sudo", "chmod", "chown", "git", "export",
)

JAVA_RULES: tuple[HighlightRule, ...] = (
    HighlightRule(re.compile(r"(//.*)$"), "comment", "{1}"),
    STRING_RULE,
    *_keyword_rules(JAVA_KEYWORDS),
)

BASH_RULES: tuple[HighlightRule, ...] = (
    HighlightRule(re.compile(r"#.*"), "comment"),
    STRING_RULE,
    HighlightRule(re.compile(r"\$[A-Za-z_][A-Za-z0-9_]*"), "variable"),
    *_keyword_rules(BASH_KEYWORDS),
)

LANGUAGE_RULES: dict[str, tuple[HighlightRule, ...]] = {
    "java": JAVA_RULES,
    "kotlin": JAVA_RULES,
    "kt": JAVA_RULES,
    "bash": BASH_RULES,
    "shell": BASH_RULES,
    "sh": BASH_RULES,
}

EXTENSION_LANGUAGES = {
    ".java": "java",
    ".kt": "kotlin",
    ".kts": "kotlin",
    ".sh": "bash",
}


def language_for_filename(file_name: str) -> str:
    """Guess a highlight language from a file name, or ``""`` when unsupported."""

    lowered = file_name.lower()
    for extension, language in EXTENSION_LANGUAGES.items():
        if lowered.endswith(extension):
            return language
    return ""


class LineHighlighter:
    """Applies a language's rule table to one line at a time."""

    def __init__(self, palette: SyntaxPalette | None = None) -> None:
        self.palette = palette or SyntaxPalette()

    def supports(self, language: str | None) -> bool:
        return (language or "").lower() in LANGUAGE_RULES

    def highlight_escaped(self, language: str | None, escaped_line: str) -> str:
        """Highlight a line that has already been HTML-escaped."""

        escaped_line = require_text(escaped_line, "line")
        rules = LANGUAGE_RULES.get((language or "").lower())
        if not rules:
            return escaped_line
        for rule in rules:
            escaped_line = rule.apply(escaped_line, self.palette)
        return escaped_line

    def highlight(self, language: str | None, line: str) -> str:
        """Escape a raw line once, then highlight it."""

        return self.highlight_escaped(language, escape_html(line))


__all__ = [
    "BASH_RULES",
    "HighlightRule",
    "JAVA_RULES",
    "LANGUAGE_RULES",
    "LineHighlighter",
    "SyntaxPalette",
    "language_for_filename",
]
