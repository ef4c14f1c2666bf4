"""Chat tool window: tracked snippet cards, the rendered reply and the prompt box."""
from __future__ import annotations

from PySide6.QtCore import QObject, QThread, Qt, Signal, Slot
from PySide6.QtGui import QGuiApplication, QTextCursor
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QScrollArea,
    QTextBrowser,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from pastechat.ai.ai_client import AIClient
from pastechat.ai.session import AssistantSession, DocumentEditor
from pastechat.ai.snippets import Snippet
from pastechat.core.errors import RequestInFlightError
from pastechat.core.logging import get_logger
from pastechat.render.escaping import escape_html
from pastechat.render.extraction import CodeBlock, extract_blocks

WAITING_HTML = "<html><body><p>Waiting for response...</p></body></html>"


class PasteAwareEdit(QPlainTextEdit):
    """Prompt box that reports multi-line pastes instead of inserting them."""

    code_pasted = Signal(str)

    def insertFromMimeData(self, source) -> None:  # noqa: N802 - Qt override
        text = source.text() if source.hasText() else ""
        if "\n" in text.strip():
            self.code_pasted.emit(text)
            return
        super().insertFromMimeData(source)


class SnippetCard(QFrame):
    """Card showing one tracked snippet with a remove button."""

    removed = Signal(object)

    def __init__(self, snippet: Snippet, preview_html: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.snippet = snippet
        self.setObjectName("snippetCard")
        self.setFrameShape(QFrame.StyledPanel)
        self.setMaximumHeight(150)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 10, 10, 10)
        layout.setSpacing(5)

        header = QHBoxLayout()
        self.label = QLabel(f"<b>{escape_html(snippet.label)}</b>", self)
        self.label.setTextFormat(Qt.RichText)
        header.addWidget(self.label, 1)
        self.remove_button = QToolButton(self)
        self.remove_button.setText("x")
        self.remove_button.setAutoRaise(True)
        self.remove_button.setToolTip("Stop sending this snippet")
        self.remove_button.clicked.connect(lambda: self.removed.emit(self.snippet))
        header.addWidget(self.remove_button)
        layout.addLayout(header)

        self.preview = QTextBrowser(self)
        self.preview.setHtml(preview_html)
        layout.addWidget(self.preview)


class CodeBlockRow(QFrame):
    """One fenced block from the reply with Copy and Insert controls."""

    insert_requested = Signal(str)

    def __init__(self, block: CodeBlock, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.block = block
        self.setObjectName("codeBlockRow")
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        line_count = len(block.code.splitlines())
        noun = "line" if line_count == 1 else "lines"
        self.label = QLabel(f"{escape_html(block.language or 'code')} ({line_count} {noun})", self)
        layout.addWidget(self.label, 1)
        self.copy_button = QPushButton("Copy", self)
        self.copy_button.clicked.connect(lambda: QGuiApplication.clipboard().setText(self.block.code))
        layout.addWidget(self.copy_button)
        self.insert_button = QPushButton("Insert at cursor", self)
        self.insert_button.clicked.connect(lambda: self.insert_requested.emit(self.block.code))
        layout.addWidget(self.insert_button)


class _AIRequestWorker(QObject):
    """Background worker to prevent blocking the UI thread."""

    finished = Signal(str)
    failed = Signal(str)
    partial = Signal(str)

    def __init__(self, client: AIClient, prompt: str) -> None:
        super().__init__()
        self.client = client
        self.prompt = prompt
        self.logger = get_logger(__name__)

    @Slot()
    def run(self) -> None:
        self.logger.info("[AI_WORKER] Request started, prompt length %d chars", len(self.prompt))
        try:
            text = ""
            for chunk in self.client.stream(self.prompt):
                text += chunk
                self.partial.emit(chunk)
            self.logger.info("[AI_WORKER] Stream complete, %d chars", len(text))
            self.finished.emit(text)
        except Exception as exc:  # noqa: BLE001
            self.logger.exception("[AI_WORKER] Request failed")
            self.failed.emit(str(exc))


class AIChatPanel(QWidget):
    def __init__(self, client: AIClient, session: AssistantSession, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.client = client
        self.session = session
        self.logger = get_logger(__name__)
        self.document_editor: DocumentEditor | None = None
        self.snippet_cards: list[SnippetCard] = []
        self._active_thread: QThread | None = None
        self._active_worker: _AIRequestWorker | None = None
        self._streamed_text = ""

        self.setObjectName("aiChatPanel")
        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 10, 10, 10)
        layout.setSpacing(10)

        self.snippet_container = QWidget(self)
        self.snippet_layout = QVBoxLayout(self.snippet_container)
        self.snippet_layout.setContentsMargins(0, 0, 0, 0)
        self.snippet_layout.addStretch(1)
        snippet_scroll = QScrollArea(self)
        snippet_scroll.setWidgetResizable(True)
        snippet_scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        snippet_scroll.setWidget(self.snippet_container)
        layout.addWidget(snippet_scroll, 1)

        self.result_view = QTextBrowser(self)
        self.result_view.setOpenExternalLinks(True)
        layout.addWidget(self.result_view, 2)

        self.block_rows: list[CodeBlockRow] = []
        self.blocks_container = QWidget(self)
        self.blocks_layout = QVBoxLayout(self.blocks_container)
        self.blocks_layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.blocks_container)

        self.actions_row = QWidget(self)
        actions_layout = QHBoxLayout(self.actions_row)
        actions_layout.setContentsMargins(0, 0, 0, 0)
        actions_layout.addStretch(1)
        self.accept_button = QPushButton("Accept All", self.actions_row)
        self.accept_button.clicked.connect(self._accept_all)
        self.reject_button = QPushButton("Reject All", self.actions_row)
        self.reject_button.clicked.connect(self._reject_all)
        actions_layout.addWidget(self.accept_button)
        actions_layout.addWidget(self.reject_button)
        self.actions_row.setVisible(False)
        layout.addWidget(self.actions_row)

        bottom = QHBoxLayout()
        self.input = PasteAwareEdit(self)
        self.input.setPlaceholderText("Ask about your code. Paste lines from the editor to attach them.")
        self.input.setFixedHeight(90)
        self.input.code_pasted.connect(self.handle_paste)
        bottom.addWidget(self.input, 1)
        self.send_button = QPushButton("Ask", self)
        self.send_button.clicked.connect(self._send)
        bottom.addWidget(self.send_button)
        layout.addLayout(bottom)

    def set_document_editor(self, editor: DocumentEditor | None) -> None:
        self.document_editor = editor

    def handle_paste(self, text: str) -> Snippet | None:
        document = self.document_editor.snapshot() if self.document_editor else None
        snippet = self.session.on_paste(document, text)
        if snippet is None:
            self.input.insertPlainText(text)
            return None
        self._add_snippet_card(snippet)
        return snippet

    def _add_snippet_card(self, snippet: Snippet) -> None:
        card = SnippetCard(snippet, self.session.renderer.render_snippet(snippet), self.snippet_container)
        card.removed.connect(self._remove_snippet)
        self.snippet_layout.insertWidget(self.snippet_layout.count() - 1, card)
        self.snippet_cards.append(card)

    def _remove_snippet(self, snippet: Snippet) -> None:
        self.session.remove_snippet(snippet)
        for card in list(self.snippet_cards):
            if card.snippet is snippet:
                self.snippet_cards.remove(card)
                self.snippet_layout.removeWidget(card)
                card.deleteLater()

    def _clear_snippet_cards(self) -> None:
        for card in self.snippet_cards:
            self.snippet_layout.removeWidget(card)
            card.deleteLater()
        self.snippet_cards.clear()

    def _set_busy(self, busy: bool) -> None:
        self.send_button.setEnabled(not busy)
        self.input.setReadOnly(busy)

    def _send(self) -> None:
        try:
            prompt = self.session.begin_request(self.input.toPlainText())
        except RequestInFlightError:
            self.logger.info("Ignoring send while a request is in flight")
            return
        if prompt is None:
            return
        self._start_request(prompt)

    def _start_request(self, prompt: str) -> None:
        self.result_view.setHtml(WAITING_HTML)
        self.actions_row.setVisible(False)
        self._clear_block_rows()
        self._streamed_text = ""
        self._set_busy(True)

        thread = QThread(self)
        worker = _AIRequestWorker(self.client, prompt)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(self._on_worker_finished, Qt.QueuedConnection)
        worker.failed.connect(self._on_worker_failed, Qt.QueuedConnection)
        worker.partial.connect(self._on_worker_partial, Qt.QueuedConnection)
        thread.finished.connect(thread.deleteLater)
        thread.start()
        self._active_thread = thread
        self._active_worker = worker

    @Slot(str)
    def _on_worker_partial(self, delta: str) -> None:
        self._streamed_text += delta
        self.result_view.setHtml(self.session.renderer.render(self._streamed_text))

    @Slot(str)
    def _on_worker_finished(self, text: str) -> None:
        self.show_response(text)
        self._finish_thread()
        self.input.clear()

    @Slot(str)
    def _on_worker_failed(self, error: str) -> None:
        self.result_view.setHtml(self.session.fail_request(error))
        self.actions_row.setVisible(False)
        self._finish_thread()

    def show_response(self, text: str | None) -> None:
        self.result_view.setHtml(self.session.complete_request(text))
        self.result_view.moveCursor(QTextCursor.Start)
        self.actions_row.setVisible(self.session.has_response)
        self._show_block_rows()

    def _show_block_rows(self) -> None:
        self._clear_block_rows()
        if not self.session.has_response:
            return
        for block in extract_blocks(self.session.last_raw_response):
            row = CodeBlockRow(block, self.blocks_container)
            row.insert_requested.connect(self._insert_block)
            self.blocks_layout.addWidget(row)
            self.block_rows.append(row)

    def _clear_block_rows(self) -> None:
        for row in self.block_rows:
            self.blocks_layout.removeWidget(row)
            row.deleteLater()
        self.block_rows.clear()

    def _insert_block(self, code: str) -> None:
        if self.document_editor is None:
            self.logger.info("Insert ignored: no active editor")
            return
        self.document_editor.insert_at_cursor(code)

    def _finish_thread(self) -> None:
        thread, worker = self._active_thread, self._active_worker
        if thread and worker:
            worker.deleteLater()
            thread.quit()
        self._active_thread = None
        self._active_worker = None
        self._set_busy(False)

    def _accept_all(self) -> None:
        if self.document_editor is None:
            self.logger.info("Accept ignored: no active editor")
            return
        self.session.accept(self.document_editor)
        if self.session.has_response:
            self.logger.warning("Accept did not apply; the reply is kept")
            return
        self.result_view.clear()
        self.actions_row.setVisible(False)
        self._clear_block_rows()
        self._clear_snippet_cards()

    def _reject_all(self) -> None:
        self.session.reject()
        self.result_view.clear()
        self.actions_row.setVisible(False)
        self._clear_block_rows()


__all__ = ["AIChatPanel", "CodeBlockRow", "PasteAwareEdit", "SnippetCard"]
