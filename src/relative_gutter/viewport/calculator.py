"""Visible-line enumeration for a display surface."""

from __future__ import annotations

from typing import List, Tuple

from relative_gutter.host import DisplaySurface, Position, TextBuffer

VisibleLine = Tuple[Position, int]


def visible_lines(buffer: TextBuffer, surface: DisplaySurface) -> List[VisibleLine]:
    """Return ``(line_start, line_number)`` for each line shown in ``surface``.

    The walk starts at the line holding the top of the visible range and stops
    before the line containing its bottom boundary; hidden lines are left out
    by the buffer. An empty buffer yields nothing.
    """

    lines: List[VisibleLine] = []
    buffer.for_each_visible_line(
        surface.visible_range(),
        lambda position, number: lines.append((position, number)),
    )
    return lines


def cursor_line(buffer: TextBuffer, surface: DisplaySurface) -> int:
    return buffer.line_number_at(surface.cursor_position())


__all__ = ["VisibleLine", "cursor_line", "visible_lines"]
