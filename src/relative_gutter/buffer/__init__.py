"""In-memory reference host: buffers, windows, decorations, idle queue."""

from .buffer import Buffer, BufferDelta
from .decorations import Decoration, DecorationOp, MarginDecorations
from .document import BufferDocument
from .loop import DeferredQueue, MessageArea
from .validation import BufferValidationError, ensure_position, ensure_range
from .window import Window

__all__ = [
    "Buffer",
    "BufferDelta",
    "BufferDocument",
    "BufferValidationError",
    "Decoration",
    "DecorationOp",
    "DeferredQueue",
    "MarginDecorations",
    "MessageArea",
    "Window",
    "ensure_position",
    "ensure_range",
]
