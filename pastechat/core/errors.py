"""Error types shared across Pastechat."""
from __future__ import annotations

from typing import Any


class InvalidInputError(ValueError):
    """Raised when a text-processing entry point is called without text."""


class BackendConfigurationError(RuntimeError):
    """Raised when the selected completion backend is missing required settings."""


class RequestInFlightError(RuntimeError):
    """Raised when a second request is started before the first one resolves."""


def require_text(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise InvalidInputError(f"{name} must be a string, got {type(value).__name__}")
    return value
