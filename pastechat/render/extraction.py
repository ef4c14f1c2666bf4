"""Pull fenced code out of a raw assistant reply for insertion into a document."""
from __future__ import annotations

from dataclasses import dataclass

from pastechat.core.errors import require_text
from pastechat.render.markup import FENCE, split_lines


@dataclass(frozen=True)
class CodeBlock:
    language: str
    code: str


def extract_blocks(raw_response: str) -> list[CodeBlock]:
    """Return every fenced block in order of appearance.

    Any line that starts with a fence toggles the block state, so a tagged fence
    line inside a block closes it. An unterminated final block is still returned.
    Lines are kept verbatim; nothing is escaped.
    """

    raw_response = require_text(raw_response, "raw_response")
    blocks: list[CodeBlock] = []
    language = ""
    current: list[str] | None = None
    for line in split_lines(raw_response):
        stripped = line.strip()
        if stripped.startswith(FENCE):
            if current is None:
                language = stripped[len(FENCE):].strip().lower()
                current = []
            else:
                blocks.append(CodeBlock(language, "".join(current)))
                current = None
        elif current is not None:
            current.append(line + "\n")
    if current is not None:
        blocks.append(CodeBlock(language, "".join(current)))
    return blocks


def extract_code(raw_response: str) -> str:
    """Concatenate all fenced blocks, separated by a blank line, and trim the result."""

    return "\n".join(block.code for block in extract_blocks(raw_response)).strip()


__all__ = ["CodeBlock", "extract_blocks", "extract_code"]
