"""In-memory buffer façade implementing the ``TextBuffer`` host protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional, Tuple

from relative_gutter.runtime import telemetry

from .document import BufferDocument
from .validation import BufferValidationError, ensure_range

if TYPE_CHECKING:  # pragma: no cover
    from .window import Window


@dataclass(slots=True)
class BufferDelta:
    """Outcome of one edit, in post-edit coordinates.

    ``start``..``end`` spans the inserted text; ``length`` is the buffer
    length after the edit.
    """

    version: int
    start: int
    end: int
    inserted: str
    removed: str
    length: int
    label: str

    @property
    def touches_end(self) -> bool:
        return self.end == self.length


class Buffer:
    def __init__(
        self, *, name: str = "default", document: Optional[BufferDocument] = None
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self._windows: List["Window"] = []

    @classmethod
    def from_text(cls, text: str, *, name: str = "default") -> "Buffer":
        return cls(name=name, document=BufferDocument.from_text(text))

    @classmethod
    def with_lines(cls, count: int, *, name: str = "default") -> "Buffer":
        """Buffer of ``count`` lines ``line 1`` .. ``line N`` ending in a newline."""

        return cls.from_text(
            "".join(f"line {n}\n" for n in range(1, count + 1)), name=name
        )

    def __repr__(self) -> str:
        return f"Buffer(name={self.name!r}, lines={self.total_line_count()})"

    @property
    def text(self) -> str:
        return self.document.text

    # -- TextBuffer protocol -------------------------------------------------

    def total_line_count(self) -> int:
        return self.document.total_line_count()

    def line_number_at(self, position: int) -> int:
        return self.document.line_index_at(position) + 1

    def for_each_visible_line(
        self, visible: Tuple[int, int], fn: Callable[[int, int], None]
    ) -> None:
        self.document.for_each_visible_line(visible, fn)

    def surfaces(self) -> Iterable["Window"]:
        return tuple(window for window in self._windows if not window.closed)

    # -- window bookkeeping --------------------------------------------------

    def attach(self, window: "Window") -> None:
        if window not in self._windows:
            self._windows.append(window)

    def detach(self, window: "Window") -> None:
        if window in self._windows:
            self._windows.remove(window)

    # -- editing -------------------------------------------------------------

    def replace_range(
        self, start: int, end: int, text: str, *, label: str = "replace_range"
    ) -> BufferDelta:
        start, end = ensure_range(self.document, start, end)
        with telemetry.span(
            f"buffer::{label}",
            component="buffer",
            metadata={"buffer": self.name},
        ):
            removed = self.document.text[start:end]
            self.document = self.document.replace(start, end, text)
            for window in self._windows:
                window.track_edit(start, end, len(text))
        return BufferDelta(
            version=self.document.version,
            start=start,
            end=start + len(text),
            inserted=text,
            removed=removed,
            length=self.document.length,
            label=label,
        )

    def insert_text(self, position: int, text: str) -> BufferDelta:
        return self.replace_range(position, position, text, label="insert_text")

    def delete_range(self, start: int, end: int) -> BufferDelta:
        return self.replace_range(start, end, "", label="delete_range")

    def fold(self, first_line: int, last_line: int) -> None:
        """Hide 1-based lines ``first_line``..``last_line`` inclusive."""

        if first_line < 1 or last_line > self.document.line_count:
            raise BufferValidationError("Fold outside buffer")
        hidden = set(self.document.hidden)
        hidden.update(range(first_line - 1, last_line))
        self.document = self.document.with_hidden(frozenset(hidden))

    def unfold_all(self) -> None:
        self.document = self.document.with_hidden(frozenset())
