"""Main window: a plain-text editor with the chat panel docked beside it."""
from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QKeySequence, QTextCursor
from PySide6.QtWidgets import QDockWidget, QFileDialog, QMainWindow, QMessageBox, QPlainTextEdit

from pastechat.ai.ai_client import AIClient
from pastechat.ai.session import AssistantSession, DocumentSnapshot
from pastechat.core.config import ConfigManager
from pastechat.core.logging import get_logger
from pastechat.ui.chat_panel import AIChatPanel

UNTITLED = "Untitled"


class PlainTextDocumentEditor:
    """Exposes a ``QPlainTextEdit`` through the session's document editor interface."""

    def __init__(self, editor: QPlainTextEdit, window: MainWindow) -> None:
        self.editor = editor
        self.main_window = window
        self.logger = get_logger(__name__)

    def snapshot(self) -> DocumentSnapshot | None:
        path = self.main_window.current_path
        return DocumentSnapshot(self.editor.toPlainText(), path.name if path else UNTITLED)

    def replace_lines(self, start_line: int, end_line: int, text: str) -> bool:
        """Replace whole lines ``start_line``..``end_line``; False if the range is gone."""
        document = self.editor.document()
        first = document.findBlockByNumber(start_line - 1)
        last = document.findBlockByNumber(end_line - 1)
        if not first.isValid() or not last.isValid():
            self.logger.warning("Line range %d-%d is outside the document", start_line, end_line)
            return False
        cursor = QTextCursor(document)
        cursor.beginEditBlock()
        cursor.setPosition(first.position())
        cursor.setPosition(last.position() + last.length() - 1, QTextCursor.KeepAnchor)
        cursor.insertText(text)
        cursor.endEditBlock()
        return True

    def insert_at_cursor(self, text: str) -> None:
        self.editor.textCursor().insertText(text)


class MainWindow(QMainWindow):
    def __init__(self, config: ConfigManager, client: AIClient, session: AssistantSession) -> None:
        super().__init__()
        self.config = config
        self.logger = get_logger(__name__)
        self.current_path: Path | None = None
        self._base_title = str(config.section("ui").get("window_title") or "Pastechat")
        self.setWindowTitle(self._base_title)
        self.resize(1200, 800)

        self.editor = QPlainTextEdit(self)
        self.editor.setLineWrapMode(QPlainTextEdit.NoWrap)
        self.setCentralWidget(self.editor)
        self.document_editor = PlainTextDocumentEditor(self.editor, self)

        self.chat_panel = AIChatPanel(client, session, self)
        self.chat_panel.set_document_editor(self.document_editor)
        dock = QDockWidget("Pastechat", self)
        dock.setObjectName("pastechatDock")
        dock.setWidget(self.chat_panel)
        dock.setFeatures(dock.features() & ~QDockWidget.DockWidgetClosable)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

        self._build_menus()

    def _build_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        open_action = QAction("&Open...", self)
        open_action.setShortcut(QKeySequence.Open)
        open_action.triggered.connect(self._prompt_open)
        file_menu.addAction(open_action)
        save_action = QAction("&Save", self)
        save_action.setShortcut(QKeySequence.Save)
        save_action.triggered.connect(self.save_file)
        file_menu.addAction(save_action)
        file_menu.addSeparator()
        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    def _prompt_open(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open File")
        if path:
            self.open_file(path)

    def open_file(self, path: str) -> None:
        target = Path(path)
        try:
            text = target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.error("Failed to open %s: %s", target, exc)
            QMessageBox.warning(self, "Open File", f"Could not open {target}:\n{exc}")
            return
        self.editor.setPlainText(text)
        self.current_path = target
        self.setWindowTitle(f"{target.name} - {self._base_title}")
        self.logger.info("Opened %s", target)

    def save_file(self) -> None:
        if self.current_path is None:
            path, _ = QFileDialog.getSaveFileName(self, "Save File")
            if not path:
                return
            self.current_path = Path(path)
        try:
            self.current_path.write_text(self.editor.toPlainText(), encoding="utf-8")
        except OSError as exc:
            self.logger.error("Failed to save %s: %s", self.current_path, exc)
            QMessageBox.warning(self, "Save File", f"Could not save {self.current_path}:\n{exc}")
            return
        self.setWindowTitle(f"{self.current_path.name} - {self._base_title}")
        self.logger.info("Saved %s", self.current_path)
