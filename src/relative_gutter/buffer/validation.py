"""Validation helpers shared by the reference host."""

from __future__ import annotations

from relative_gutter.errors import GutterError

from .document import BufferDocument


class BufferValidationError(GutterError):
    """Raised when a caller passes an out-of-bounds position or range."""

    def __init__(self, message: str, *, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


def ensure_position(document: BufferDocument, position: int) -> int:
    if position < 0 or position > document.length:
        raise BufferValidationError("Position out of range", position=position)
    return position


def ensure_range(document: BufferDocument, start: int, end: int) -> tuple[int, int]:
    ensure_position(document, start)
    ensure_position(document, end)
    if start > end:
        raise BufferValidationError("Range start after end", position=start)
    return start, end
