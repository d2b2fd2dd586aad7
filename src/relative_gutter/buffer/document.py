"""Line storage for the in-memory reference host."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Tuple


@dataclass(slots=True)
class BufferDocument:
    """Immutable-ish text stored as a list of lines plus line-start offsets.

    Positions are character offsets into the joined text. ``hidden`` holds
    0-based indices of folded lines, which are skipped when walking the
    visible lines of a range.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0
    hidden: FrozenSet[int] = frozenset()
    _starts: List[int] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        starts = []
        offset = 0
        for line in self._lines:
            starts.append(offset)
            offset += len(line) + 1
        self._starts = starts

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(_lines=text.split("\n"))

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def length(self) -> int:
        return self._starts[-1] + len(self._lines[-1])

    @property
    def line_count(self) -> int:
        """Number of stored lines, including an empty trailing line."""

        return len(self._lines)

    def total_line_count(self) -> int:
        """Lines holding text; a trailing newline does not open a new line."""

        if self.length == 0:
            return 0
        if self._lines[-1] == "":
            return len(self._lines) - 1
        return len(self._lines)

    def get_line(self, index: int) -> str:
        return self._lines[index]

    def line_start(self, index: int) -> int:
        if index >= len(self._starts):
            return self.length
        return self._starts[max(index, 0)]

    def line_index_at(self, position: int) -> int:
        index = bisect_right(self._starts, position) - 1
        return min(max(index, 0), len(self._lines) - 1)

    def for_each_visible_line(
        self, visible: Tuple[int, int], fn: Callable[[int, int], None]
    ) -> None:
        start, end = visible
        limit = min(end, self.length)
        index = self.line_index_at(start)
        while index < len(self._lines) and self._starts[index] < limit:
            if index not in self.hidden:
                fn(self._starts[index], index + 1)
            index += 1

    def replace(self, start: int, end: int, text: str) -> "BufferDocument":
        """Return a document with ``[start:end]`` replaced and a bumped version."""

        current = self.text
        updated = current[:start] + text + current[end:]
        # Folds are line indices; any change in line structure drops them.
        same_lines = "\n" not in text and "\n" not in current[start:end]
        return BufferDocument(
            _lines=updated.split("\n"),
            version=self.version + 1,
            hidden=self.hidden if same_lines else frozenset(),
        )

    def with_hidden(self, hidden: FrozenSet[int]) -> "BufferDocument":
        return BufferDocument(
            _lines=list(self._lines), version=self.version + 1, hidden=hidden
        )
