"""Prompt builder that appends tracked snippets to the user's request."""
from __future__ import annotations

from typing import Iterable

from pastechat.ai.snippets import Snippet
from pastechat.core.errors import InvalidInputError, require_text

SNIPPET_SECTION_HEADER = "--- Code Snippets ---"


class PromptAssembler:
    """Builds the outbound prompt from free text and snippets with their provenance."""

    def assemble(self, free_text: str, snippets: Iterable[Snippet]) -> str:
        free_text = require_text(free_text, "free_text").strip()
        if snippets is None:
            raise InvalidInputError("snippets must be an iterable of Snippet, got None")
        ordered = sorted(snippets, key=lambda snippet: snippet.start_line)
        if not ordered:
            return free_text

        blocks = [free_text] if free_text else []
        blocks.append(SNIPPET_SECTION_HEADER)
        blocks.extend(self.provenance_block(snippet) for snippet in ordered)
        return "\n\n".join(blocks)

    @staticmethod
    def provenance_block(snippet: Snippet) -> str:
        return f"// From {snippet.file_name} (lines {snippet.start_line}-{snippet.end_line})\n{snippet.code}"


__all__ = ["PromptAssembler", "SNIPPET_SECTION_HEADER"]
