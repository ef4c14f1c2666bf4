"""Application bootstrap for Pastechat."""
from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path

from PySide6.QtWidgets import QApplication, QMessageBox

from pastechat.ai.ai_client import AIClient
from pastechat.ai.session import AssistantSession
from pastechat.core.config import ConfigManager
from pastechat.core.logging import configure_logging, get_logger
from pastechat.render.markup import FenceRenderer
from pastechat.ui.main_window import MainWindow
from pastechat.ui.theme import ThemeManager


class PastechatApplication:
    """Owns application-wide objects and startup sequence."""

    def __init__(self, argv: list[str] | None = None) -> None:
        self.args = self._parse_args(argv)
        configure_logging(logging.DEBUG if self.args.verbose else logging.INFO)
        self.logger = get_logger(__name__)
        self.qt_app = QApplication.instance() or QApplication(sys.argv)
        self._install_exception_hook()
        self.theme = ThemeManager()
        self.theme.apply(self.qt_app)
        self.config = ConfigManager()
        self.client = AIClient(self.config)
        self.session = AssistantSession(renderer=FenceRenderer.from_config(self.config))
        self.main_window = MainWindow(self.config, self.client, self.session)

    def _parse_args(self, argv: list[str] | None) -> argparse.Namespace:
        parser = argparse.ArgumentParser(description="Pastechat")
        parser.add_argument("path", nargs="?", help="File to open")
        parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
        return parser.parse_args(argv)

    def run(self) -> int:
        if self.args.path:
            target = Path(self.args.path)
            if target.is_file():
                self.main_window.open_file(str(target))
            else:
                self.logger.warning("Ignoring %s: not a file", target)
        self.main_window.show()
        try:
            return self.qt_app.exec()
        except Exception:
            self.logger.exception("Unhandled exception in main loop")
            return 1

    # Error handling
    def _install_exception_hook(self) -> None:
        sys.excepthook = self._handle_exception  # type: ignore[assignment]

    def _handle_exception(self, exc_type, exc_value, exc_tb) -> None:
        """Log uncaught exceptions and show them without crashing the event loop."""
        formatted = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
        logging.error("Uncaught exception:\n%s", formatted)
        dialog = QMessageBox()
        dialog.setWindowTitle("Unexpected Error")
        dialog.setIcon(QMessageBox.Critical)
        dialog.setText("An unexpected error occurred. Details have been written to the log file.")
        dialog.setDetailedText(formatted)
        dialog.exec()
