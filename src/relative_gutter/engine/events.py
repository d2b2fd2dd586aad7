"""Host events understood by the update scheduler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from relative_gutter.host import DisplaySurface, TextBuffer


@dataclass(frozen=True, slots=True)
class CursorOrCommandEvent:
    """Fired after every user command in ``buffer``."""

    buffer: TextBuffer


@dataclass(frozen=True, slots=True)
class BufferEditEvent:
    """A change to ``buffer``; ``start``..``end`` spans the inserted text."""

    buffer: TextBuffer
    start: int
    end: int
    inserted: str
    touches_end: bool = False

    @property
    def is_deletion(self) -> bool:
        return self.start == self.end

    @property
    def changes_lines(self) -> bool:
        """Whether the edit can move any line relative to the cursor line."""

        return self.is_deletion or self.touches_end or "\n" in self.inserted

    @classmethod
    def from_delta(cls, buffer: TextBuffer, delta) -> "BufferEditEvent":
        return cls(
            buffer=buffer,
            start=delta.start,
            end=delta.end,
            inserted=delta.inserted,
            touches_end=delta.touches_end,
        )


@dataclass(frozen=True, slots=True)
class ScrollEvent:
    buffer: TextBuffer
    surface: DisplaySurface


@dataclass(frozen=True, slots=True)
class LayoutChangeEvent:
    """Windows were split, resized or closed; every enabled buffer refreshes."""


@dataclass(frozen=True, slots=True)
class ModeEnableEvent:
    buffer: TextBuffer


@dataclass(frozen=True, slots=True)
class ModeDisableEvent:
    buffer: TextBuffer


@dataclass(frozen=True, slots=True)
class BufferCloseEvent:
    buffer: TextBuffer


GutterEvent = Union[
    CursorOrCommandEvent,
    BufferEditEvent,
    ScrollEvent,
    LayoutChangeEvent,
    ModeEnableEvent,
    ModeDisableEvent,
    BufferCloseEvent,
]

__all__ = [
    "BufferCloseEvent",
    "BufferEditEvent",
    "CursorOrCommandEvent",
    "GutterEvent",
    "LayoutChangeEvent",
    "ModeDisableEvent",
    "ModeEnableEvent",
    "ScrollEvent",
]
