"""Viewport calculation, label formatting, and margin sizing."""

from .calculator import VisibleLine, cursor_line, visible_lines
from .formatter import EMPTY_LABEL, Label, LabelFormatter, digits, format_label
from .width import WidthTracker, apply_margin_width

__all__ = [
    "EMPTY_LABEL",
    "Label",
    "LabelFormatter",
    "VisibleLine",
    "WidthTracker",
    "apply_margin_width",
    "cursor_line",
    "digits",
    "format_label",
    "visible_lines",
]
