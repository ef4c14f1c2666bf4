"""HTML escaping for text emitted into chat markup."""
from __future__ import annotations

from pastechat.core.errors import require_text


def escape_html(text: str) -> str:
    """Escape ``&``, ``<`` and ``>``. Apply once to raw text, never to markup."""

    text = require_text(text, "text")
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


__all__ = ["escape_html"]
