"""Pastechat: track pasted code, ask a chat model about it and apply the reply."""

__version__ = "0.1.0"
