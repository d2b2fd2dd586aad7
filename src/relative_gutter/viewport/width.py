"""Margin width tracking for a refresh cycle."""

from __future__ import annotations

from relative_gutter.host import LEFT_MARGIN, DisplaySurface, opposite_side


class WidthTracker:
    """Maximum label length seen so far in the current cycle."""

    __slots__ = ("width",)

    def __init__(self) -> None:
        self.width = 0

    def observe(self, text: str) -> str:
        if len(text) > self.width:
            self.width = len(text)
        return text


def apply_margin_width(
    surface: DisplaySurface, width: int, *, side: str = LEFT_MARGIN
) -> None:
    """Size the gutter margin, leaving the opposite margin as it was."""

    other = opposite_side(side)
    kept = surface.get_margin_width(other)
    surface.set_margin_width(side, width)
    if surface.get_margin_width(other) != kept:
        surface.set_margin_width(other, kept)


__all__ = ["WidthTracker", "apply_margin_width"]
