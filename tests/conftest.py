"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pastechat.core.config as config_mod
from pastechat.ai.session import DocumentSnapshot


@pytest.fixture(scope="session")
def qt_app():
    from PySide6.QtWidgets import QApplication

    return QApplication.instance() or QApplication([])


@pytest.fixture
def config(monkeypatch, tmp_path: Path) -> config_mod.ConfigManager:
    """A ConfigManager whose user settings live in a temporary directory."""

    config_root = tmp_path / "config"
    monkeypatch.setattr(config_mod, "CONFIG_DIR", config_root)
    monkeypatch.setattr(config_mod, "USER_SETTINGS_PATH", config_root / "settings.yaml")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return config_mod.ConfigManager()


class FakeEditor:
    """In-memory stand-in for the editing surface."""

    def __init__(self, text: str = "", file_name: str = "Demo.java") -> None:
        self.text = text
        self.file_name = file_name
        self.replacements: list[tuple[int, int, str]] = []
        self.insertions: list[str] = []
        self.range_missing = False

    def snapshot(self) -> DocumentSnapshot | None:
        return DocumentSnapshot(self.text, self.file_name)

    def replace_lines(self, start_line: int, end_line: int, text: str) -> bool:
        if self.range_missing:
            return False
        self.replacements.append((start_line, end_line, text))
        return True

    def insert_at_cursor(self, text: str) -> None:
        self.insertions.append(text)


@pytest.fixture
def fake_editor() -> FakeEditor:
    return FakeEditor(
        "package demo\n\nclass Demo {\n    fun a() = 1\n    fun b() = 2\n}\n",
        "Demo.kt",
    )
