"""Session state for one chat tool window: snippets, the pending request and the last reply."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from pastechat.ai.prompt_builder import PromptAssembler
from pastechat.ai.snippets import ActiveSnippetSet, Snippet, SnippetTracker
from pastechat.core.errors import RequestInFlightError
from pastechat.core.logging import get_logger
from pastechat.render.extraction import extract_code
from pastechat.render.markup import FenceRenderer

EMPTY_RESPONSE_TEXT = "Error receiving response."


@dataclass(frozen=True)
class DocumentSnapshot:
    text: str
    file_name: str


@dataclass(frozen=True)
class EditPlan:
    """How extracted code is written back: over a line range, or at the cursor."""

    mode: str
    text: str
    start_line: int | None = None
    end_line: int | None = None


class DocumentEditor(Protocol):
    def snapshot(self) -> DocumentSnapshot | None: ...

    def replace_lines(self, start_line: int, end_line: int, text: str) -> bool: ...

    def insert_at_cursor(self, text: str) -> None: ...


class AssistantSession:
    """Owns the active snippet set and at most one in-flight request.

    Not thread-safe; callers keep it on the UI thread.
    """

    def __init__(
        self,
        renderer: FenceRenderer | None = None,
        tracker: SnippetTracker | None = None,
        assembler: PromptAssembler | None = None,
    ) -> None:
        self.logger = get_logger(__name__)
        self.renderer = renderer or FenceRenderer()
        self.tracker = tracker or SnippetTracker()
        self.assembler = assembler or PromptAssembler()
        self.snippets = ActiveSnippetSet()
        self.last_raw_response: str | None = None
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def has_response(self) -> bool:
        return bool(self.last_raw_response and self.last_raw_response.strip())

    def on_paste(self, document: DocumentSnapshot | None, pasted_text: str) -> Snippet | None:
        if document is None:
            self.logger.debug("Paste ignored: no active document")
            return None
        snippet = self.tracker.track(self.snippets, document.text, pasted_text, document.file_name)
        if snippet is not None:
            self.logger.info("Tracking snippet %s", snippet.label)
        return snippet

    def remove_snippet(self, snippet: Snippet) -> None:
        self.tracker.remove_from_set(self.snippets, snippet)

    def build_prompt(self, free_text: str) -> str:
        return self.assembler.assemble(free_text, self.snippets)

    def begin_request(self, free_text: str) -> str | None:
        if self._in_flight:
            raise RequestInFlightError("a request is already waiting for a response")
        prompt = self.build_prompt(free_text)
        if not prompt.strip():
            return None
        self._in_flight = True
        self.last_raw_response = None
        self.logger.info("Starting request with %d snippet(s), %d chars", len(self.snippets), len(prompt))
        return prompt

    def complete_request(self, raw_text: str | None) -> str:
        self._in_flight = False
        self.last_raw_response = raw_text
        if not raw_text or not raw_text.strip():
            self.logger.warning("Empty response from backend")
            return self.renderer.render(EMPTY_RESPONSE_TEXT)
        return self.renderer.render(raw_text)

    def fail_request(self, message: str) -> str:
        self._in_flight = False
        self.last_raw_response = None
        self.logger.error("Request failed: %s", message)
        return self.renderer.render(f"Error: {message}")

    def plan_accept(self) -> EditPlan | None:
        if not self.last_raw_response:
            return None
        code = extract_code(self.last_raw_response)
        if not code.strip():
            return None
        ordered = self.snippets.ordered()
        if ordered:
            end_line = max(snippet.end_line for snippet in ordered)
            return EditPlan("replace", code, ordered[0].start_line, end_line)
        return EditPlan("insert", code)

    def accept(self, editor: DocumentEditor | None) -> EditPlan | None:
        """Write the reply's code into ``editor`` and reset the session.

        When the snippets' line range is gone from the document nothing is
        written and the reply and snippets are kept, so the user can retry or reject.
        """

        if editor is None or self.last_raw_response is None:
            return None
        plan = self.plan_accept()
        if plan is not None:
            if plan.mode == "replace":
                if not editor.replace_lines(plan.start_line, plan.end_line, plan.text):
                    self.logger.warning(
                        "Could not replace lines %d-%d; keeping the reply", plan.start_line, plan.end_line
                    )
                    return None
            else:
                editor.insert_at_cursor(plan.text)
            self.logger.info("Applied %s of %d chars", plan.mode, len(plan.text))
        self.last_raw_response = None
        self.snippets.clear()
        return plan

    def reject(self) -> None:
        self.last_raw_response = None


__all__ = ["AssistantSession", "DocumentEditor", "DocumentSnapshot", "EditPlan"]
