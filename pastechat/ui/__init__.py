"""PySide6 shell around the chat session."""
