"""Theme helpers for Pastechat."""
from __future__ import annotations

from PySide6.QtGui import QColor, QFont, QFontDatabase, QPalette
from PySide6.QtWidgets import QApplication


class ThemeManager:
    """Applies the dark tool-window theme."""

    def __init__(self) -> None:
        self._palette = self._build_dark_palette()

    def apply(self, app: QApplication) -> None:
        """Apply the dark theme and fonts to the application."""
        app.setStyle("Fusion")
        self._palette = self._build_dark_palette()
        app.setPalette(self._palette)
        app.setFont(self._preferred_font())

    def color(self, role: QPalette.ColorRole) -> QColor:
        return self._palette.color(role)

    def _build_dark_palette(self) -> QPalette:
        palette = QPalette()
        palette.setColor(QPalette.Window, QColor("#2b2b2b"))
        palette.setColor(QPalette.WindowText, QColor("#a9b7c6"))
        palette.setColor(QPalette.Base, QColor("#2b2b2b"))
        palette.setColor(QPalette.AlternateBase, QColor("#3c3f41"))
        palette.setColor(QPalette.ToolTipBase, QColor("#2b2b2b"))
        palette.setColor(QPalette.ToolTipText, QColor("#a9b7c6"))
        palette.setColor(QPalette.Text, QColor("#a9b7c6"))
        palette.setColor(QPalette.Button, QColor("#3c3f41"))
        palette.setColor(QPalette.ButtonText, QColor("#a9b7c6"))
        palette.setColor(QPalette.BrightText, QColor("#ffffff"))
        palette.setColor(QPalette.Highlight, QColor("#214283"))
        palette.setColor(QPalette.HighlightedText, QColor("#ffffff"))
        palette.setColor(QPalette.Link, QColor("#589df6"))
        palette.setColor(QPalette.Dark, QColor("#232525"))
        return palette

    def _preferred_font(self) -> QFont:
        size = 11
        preferred = "JetBrains Mono"
        if preferred in QFontDatabase.families():
            return QFont(preferred, size)
        font = QFontDatabase.systemFont(QFontDatabase.FixedFont)
        font.setPointSize(size)
        return font
