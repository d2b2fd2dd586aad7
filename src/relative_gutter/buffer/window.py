"""In-memory display surface implementing the ``DisplaySurface`` protocol."""

from __future__ import annotations

from typing import Dict, Tuple

from relative_gutter.errors import SurfaceInvalidError
from relative_gutter.host import LEFT_MARGIN, RIGHT_MARGIN

from .buffer import Buffer


class Window:
    """A fixed-height view onto a buffer with its own cursor and margins.

    ``top_line`` is the 1-based number of the first displayed line and
    ``height`` the number of text rows. Once :meth:`close` is called every
    surface method raises :class:`SurfaceInvalidError`.
    """

    def __init__(
        self,
        buffer: Buffer,
        *,
        height: int = 10,
        top_line: int = 1,
        name: str = "window",
    ) -> None:
        self.buffer = buffer
        self.height = height
        self.top_line = top_line
        self.name = name
        self.closed = False
        self._cursor = 0
        self._margins: Dict[str, int] = {LEFT_MARGIN: 0, RIGHT_MARGIN: 0}
        buffer.attach(self)

    def __repr__(self) -> str:
        return f"Window(name={self.name!r}, buffer={self.buffer.name!r})"

    def _check(self) -> None:
        if self.closed:
            raise SurfaceInvalidError(f"{self.name} is closed", surface=self)

    # -- DisplaySurface protocol ---------------------------------------------

    def visible_range(self) -> Tuple[int, int]:
        self._check()
        document = self.buffer.document
        top = min(max(self.top_line, 1), document.line_count)
        start = document.line_start(top - 1)
        end = document.line_start(top - 1 + self.height)
        return start, end

    def cursor_position(self) -> int:
        self._check()
        return min(self._cursor, self.buffer.document.length)

    def set_margin_width(self, side: str, width: int) -> None:
        self._check()
        self._margins[side] = width

    def get_margin_width(self, side: str) -> int:
        self._check()
        return self._margins[side]

    # -- host-side operations ------------------------------------------------

    @property
    def cursor_line(self) -> int:
        return self.buffer.line_number_at(self.cursor_position())

    def goto_line(self, line: int, column: int = 0) -> None:
        document = self.buffer.document
        index = min(max(line, 1), document.line_count) - 1
        column = min(column, len(document.get_line(index)))
        self._cursor = document.line_start(index) + column

    def goto_position(self, position: int) -> None:
        self._cursor = min(max(position, 0), self.buffer.document.length)

    def move_lines(self, delta: int) -> None:
        self.goto_line(self.cursor_line + delta)

    def scroll_to(self, top_line: int) -> None:
        self.top_line = max(top_line, 1)

    def scroll_by(self, delta: int) -> None:
        self.scroll_to(self.top_line + delta)

    def keep_cursor_visible(self) -> bool:
        """Scroll so the cursor line is displayed; return whether it scrolled."""

        line = self.cursor_line
        if line < self.top_line:
            self.scroll_to(line)
            return True
        if line >= self.top_line + self.height:
            self.scroll_to(line - self.height + 1)
            return True
        return False

    def track_edit(self, start: int, end: int, inserted: int) -> None:
        if self._cursor >= end:
            self._cursor += inserted - (end - start)
        elif self._cursor > start:
            self._cursor = start + inserted

    def close(self) -> None:
        self.closed = True
        self.buffer.detach(self)
