"""Configuration management for Pastechat."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "pastechat"
DEFAULTS_PATH = Path(__file__).resolve().parent.parent / "settings" / "defaults.yaml"
USER_SETTINGS_PATH = CONFIG_DIR / "settings.yaml"


class ConfigManager:
    """Loads default and user configuration and provides helpers to query values."""

    def __init__(self) -> None:
        self.defaults = self._load_yaml(DEFAULTS_PATH)
        if USER_SETTINGS_PATH.exists():
            self.user_settings = self._load_yaml(USER_SETTINGS_PATH)
        else:
            self.user_settings = {}
        self.settings = self._deep_merge(self.defaults, self.user_settings)

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    def get(self, key: str, default: Any | None = None) -> Any:
        return self.settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.settings[key] = value

    def section(self, key: str) -> dict[str, Any]:
        """Return a nested mapping, or an empty dict when the key is missing or not a mapping."""

        value = self.settings.get(key)
        return value if isinstance(value, dict) else {}

    def save(self) -> None:
        USER_SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
        with USER_SETTINGS_PATH.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(self.settings, handle)

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        merged: dict[str, Any] = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def api_key(self) -> str | None:
        """API key for the completion backend, falling back to ``OPENAI_API_KEY``."""

        return self.section("ai").get("api_key") or os.environ.get("OPENAI_API_KEY")
