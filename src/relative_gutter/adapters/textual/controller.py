"""Adapter that drives the gutter engine from Textual key events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from relative_gutter.buffer import Buffer, MarginDecorations, Window
from relative_gutter.bus import DISABLED, REFRESHED
from relative_gutter.engine import (
    BufferEditEvent,
    CursorOrCommandEvent,
    ModeDisableEvent,
    ModeEnableEvent,
    ScrollEvent,
    UpdateScheduler,
)
from relative_gutter.host import LEFT_MARGIN
from relative_gutter.viewport import visible_lines


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(frozen=True, slots=True)
class GutterRow:
    line_number: int
    margin: str
    text: str
    current: bool


@dataclass(frozen=True, slots=True)
class GutterFrame:
    """Everything the host widget needs to paint one screen."""

    rows: Tuple[GutterRow, ...]
    margin_width: int
    cursor: Tuple[int, int]  # (line, column), both 1-based
    enabled: bool


@dataclass(slots=True)
class TextualGutterHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_view: Callable[[GutterFrame], None]
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


TOGGLE_KEY = "f2"


class TextualGutterAdapter:
    """Turns keys into buffer commands and feeds the resulting events in.

    Every handled key becomes, in order: the buffer edit (if any), a scroll
    event when the window had to follow the cursor, and the post-command
    event. The view is repainted after each key and whenever the engine
    finishes a refresh, so delayed refreshes show up once they run.
    """

    def __init__(
        self,
        scheduler: UpdateScheduler,
        window: Window,
        decorations: MarginDecorations,
        hooks: TextualGutterHooks,
    ) -> None:
        self.scheduler = scheduler
        self.window = window
        self.buffer: Buffer = window.buffer
        self.decorations = decorations
        self.hooks = hooks
        bus = scheduler.engine.bus
        bus.subscribe(REFRESHED, lambda _payload: self.render())
        bus.subscribe(DISABLED, lambda _payload: self.render())

    @property
    def enabled(self) -> bool:
        return self.scheduler.engine.is_enabled(self.buffer)

    def enable(self) -> None:
        self.scheduler.dispatch(ModeEnableEvent(self.buffer))
        self.hooks.update_status("relative numbers on")

    def disable(self) -> None:
        self.scheduler.dispatch(ModeDisableEvent(self.buffer))
        self.hooks.update_status("relative numbers off")

    def toggle(self) -> None:
        if self.enabled:
            self.disable()
        else:
            self.enable()

    def resize(self, height: int) -> None:
        self.window.height = max(height, 1)
        self.window.keep_cursor_visible()
        self.scheduler.dispatch(ScrollEvent(self.buffer, self.window))
        self.render()

    def handle_textual_key(self, key: str, *, text: Optional[str] = None) -> bool:
        """Apply one key; return whether it was consumed."""

        self.hooks.log(f"key -> key={key!r} text={text!r}")
        if key == TOGGLE_KEY:
            self.toggle()
            self.render()
            return True
        if not self._apply_key(key, text):
            return False
        if self.window.keep_cursor_visible():
            self.scheduler.dispatch(ScrollEvent(self.buffer, self.window))
        self.scheduler.dispatch(CursorOrCommandEvent(self.buffer))
        self.render()
        return True

    def scroll(self, lines: int) -> None:
        self.window.scroll_by(lines)
        self.scheduler.dispatch(ScrollEvent(self.buffer, self.window))
        self.render()

    def _apply_key(self, key: str, text: Optional[str]) -> bool:
        window = self.window
        position = window.cursor_position()
        if key == "up":
            window.move_lines(-1)
        elif key == "down":
            window.move_lines(1)
        elif key == "left":
            window.goto_position(position - 1)
        elif key == "right":
            window.goto_position(position + 1)
        elif key == "pageup":
            window.move_lines(-window.height)
        elif key == "pagedown":
            window.move_lines(window.height)
        elif key == "home":
            window.goto_line(window.cursor_line)
        elif key == "end":
            window.goto_line(window.cursor_line, column=len(self._cursor_text()))
        elif key == "enter":
            self._edit(position, position, "\n")
        elif key == "backspace":
            if position == 0:
                return True
            self._edit(position - 1, position, "")
        elif key == "delete":
            if position >= self.buffer.document.length:
                return True
            self._edit(position, position + 1, "")
        elif text and text.isprintable():
            self._edit(position, position, text)
        else:
            return False
        return True

    def _edit(self, start: int, end: int, text: str) -> None:
        delta = self.buffer.replace_range(start, end, text)
        self.scheduler.dispatch(BufferEditEvent.from_delta(self.buffer, delta))

    def _cursor_text(self) -> str:
        document = self.buffer.document
        return document.get_line(self.window.cursor_line - 1)

    def render(self) -> GutterFrame:
        window = self.window
        labels = self.decorations.labels(window)
        width = window.get_margin_width(LEFT_MARGIN)
        current = window.cursor_line
        document = self.buffer.document
        rows = tuple(
            GutterRow(
                line_number=number,
                margin=labels.get(position, "").rjust(width),
                text=document.get_line(number - 1),
                current=number == current,
            )
            for position, number in visible_lines(self.buffer, window)
        )
        column = window.cursor_position() - document.line_start(current - 1) + 1
        frame = GutterFrame(
            rows=rows,
            margin_width=width,
            cursor=(current, column),
            enabled=self.enabled,
        )
        self.hooks.update_view(frame)
        return frame


__all__ = ["GutterFrame", "GutterRow", "TextualGutterAdapter", "TextualGutterHooks"]
