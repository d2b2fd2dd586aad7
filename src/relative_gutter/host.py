"""Protocols a host editor implements to carry a relative gutter."""

from __future__ import annotations

from typing import Any, Callable, Hashable, Iterable, Protocol, Tuple

Position = int
VisibleRange = Tuple[Position, Position]

LEFT_MARGIN = "left"
RIGHT_MARGIN = "right"


def opposite_side(side: str) -> str:
    return RIGHT_MARGIN if side == LEFT_MARGIN else LEFT_MARGIN


class DisplaySurface(Protocol):
    """A window or pane rendering part of a buffer.

    Every method may raise :class:`~relative_gutter.errors.SurfaceInvalidError`
    once the surface has been closed by the host.
    """

    def visible_range(self) -> VisibleRange:
        """Return ``(start, end)`` positions of the displayed region."""
        ...

    def cursor_position(self) -> Position:
        """Return the surface's insertion point."""
        ...

    def set_margin_width(self, side: str, width: int) -> None:
        ...

    def get_margin_width(self, side: str) -> int:
        ...


class TextBuffer(Protocol):
    """Read access to a buffer's line structure."""

    def total_line_count(self) -> int:
        ...

    def line_number_at(self, position: Position) -> int:
        """Return the 1-based number of the line containing ``position``."""
        ...

    def for_each_visible_line(
        self, visible: VisibleRange, fn: Callable[[Position, int], None]
    ) -> None:
        """Call ``fn(line_start, line_number)`` for each unhidden line in range."""
        ...

    def surfaces(self) -> Iterable[DisplaySurface]:
        """Return the surfaces currently showing this buffer, in display order."""
        ...


class DecorationHost(Protocol):
    """Margin decoration primitive (an overlay with a margin string)."""

    def create(self, surface: DisplaySurface, position: Position) -> Hashable:
        ...

    def move(self, handle: Hashable, position: Position) -> None:
        ...

    def destroy(self, handle: Hashable) -> None:
        ...

    def set_content(self, handle: Hashable, text: str, style: str) -> None:
        ...


class IdleScheduler(Protocol):
    """Runs a callback once on a later idle turn of the host loop."""

    def schedule(self, callback: Callable[[], None]) -> Any:
        ...


class ErrorChannel(Protocol):
    """The host's user-visible error reporting channel."""

    def report(self, message: str) -> None:
        ...


__all__ = [
    "DecorationHost",
    "DisplaySurface",
    "ErrorChannel",
    "IdleScheduler",
    "LEFT_MARGIN",
    "Position",
    "RIGHT_MARGIN",
    "TextBuffer",
    "VisibleRange",
    "opposite_side",
]
