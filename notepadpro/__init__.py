"""Notepad Pro, a plain text editor with AI assisted editing."""

__version__ = "1.0.0"
