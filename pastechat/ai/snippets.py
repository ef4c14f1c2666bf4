"""Track code pasted from an open document together with its line range."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from pastechat.core.errors import InvalidInputError, require_text
from pastechat.core.logging import get_logger
from pastechat.render.highlighting import language_for_filename

logger = get_logger(__name__)


@dataclass(frozen=True)
class Snippet:
    """Snapshot of pasted code and where it came from. Lines are 1-based and inclusive."""

    file_name: str
    start_line: int
    end_line: int
    code: str

    def __post_init__(self) -> None:
        if self.start_line < 1 or self.end_line < self.start_line:
            raise InvalidInputError(f"invalid line range {self.start_line}-{self.end_line}")

    @property
    def label(self) -> str:
        return f"{self.file_name} (lines {self.start_line}-{self.end_line})"

    @property
    def language(self) -> str:
        return language_for_filename(self.file_name)


class ActiveSnippetSet:
    """Ordered snippets for one session. Membership is by identity, not value."""

    def __init__(self) -> None:
        self._items: list[Snippet] = []

    def add(self, snippet: Snippet) -> None:
        if not self.contains(snippet):
            self._items.append(snippet)

    def contains(self, snippet: Snippet) -> bool:
        return any(item is snippet for item in self._items)

    def discard(self, snippet: Snippet) -> bool:
        for index, item in enumerate(self._items):
            if item is snippet:
                del self._items[index]
                return True
        return False

    def clear(self) -> None:
        self._items.clear()

    def ordered(self) -> list[Snippet]:
        """Snippets sorted by start line; ties keep insertion order."""

        return sorted(self._items, key=lambda snippet: snippet.start_line)

    def __iter__(self) -> Iterator[Snippet]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


def line_number_at(text: str, offset: int) -> int:
    """1-based line containing ``offset``: one more than the newlines before it."""

    return text.count("\n", 0, offset) + 1


class SnippetTracker:
    """Matches freshly pasted text against a document snapshot."""

    def capture(self, document_text: str, pasted_text: str, file_name: str) -> Snippet | None:
        document_text = require_text(document_text, "document_text")
        pasted_text = require_text(pasted_text, "pasted_text")
        file_name = require_text(file_name, "file_name")

        code = pasted_text.strip()
        if not code or "\n" not in code:
            logger.debug("Ignoring paste of %d chars: not a multi-line block", len(code))
            return None

        start = document_text.find(code)
        if start == -1:
            logger.debug("Pasted block not found in %s", file_name)
            return None

        snippet = Snippet(
            file_name=file_name,
            start_line=line_number_at(document_text, start),
            end_line=line_number_at(document_text, start + len(code)),
            code=code,
        )
        logger.debug("Captured snippet %s", snippet.label)
        return snippet

    def track(
        self, snippets: ActiveSnippetSet, document_text: str, pasted_text: str, file_name: str
    ) -> Snippet | None:
        snippet = self.capture(document_text, pasted_text, file_name)
        if snippet is not None:
            snippets.add(snippet)
        return snippet

    def remove_from_set(self, snippets: ActiveSnippetSet, snippet: Snippet) -> ActiveSnippetSet:
        snippets.discard(snippet)
        return snippets


__all__ = ["ActiveSnippetSet", "Snippet", "SnippetTracker", "line_number_at"]
