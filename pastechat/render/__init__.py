"""Response rendering exports."""

from .escaping import escape_html
from .extraction import CodeBlock, extract_blocks, extract_code
from .highlighting import HighlightRule, LineHighlighter, SyntaxPalette, language_for_filename
from .markup import FenceRenderer, RenderState

__all__ = [
    "CodeBlock",
    "FenceRenderer",
    "HighlightRule",
    "LineHighlighter",
    "RenderState",
    "SyntaxPalette",
    "escape_html",
    "extract_blocks",
    "extract_code",
    "language_for_filename",
]
