"""Textual host for the relative gutter."""

from .controller import GutterFrame, GutterRow, TextualGutterAdapter, TextualGutterHooks

__all__ = ["GutterFrame", "GutterRow", "TextualGutterAdapter", "TextualGutterHooks"]
