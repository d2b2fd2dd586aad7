"""Recording decoration host used by tests and the Textual demo."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from typing import Dict, Iterator, List, Optional

from relative_gutter.host import DisplaySurface


@dataclass(slots=True)
class Decoration:
    surface: DisplaySurface
    position: int
    text: str = ""
    style: str = ""


@dataclass(frozen=True, slots=True)
class DecorationOp:
    kind: str  # create, move, destroy, set_content
    handle: int
    position: Optional[int] = None
    text: Optional[str] = None


class MarginDecorations:
    """Keeps live margin decorations and a log of every operation."""

    def __init__(self) -> None:
        self._ids: Iterator[int] = count(1)
        self.live: Dict[int, Decoration] = {}
        self.operations: List[DecorationOp] = []

    def create(self, surface: DisplaySurface, position: int) -> int:
        handle = next(self._ids)
        self.live[handle] = Decoration(surface=surface, position=position)
        self.operations.append(DecorationOp("create", handle, position))
        return handle

    def move(self, handle: int, position: int) -> None:
        self.live[handle].position = position
        self.operations.append(DecorationOp("move", handle, position))

    def destroy(self, handle: int) -> None:
        del self.live[handle]
        self.operations.append(DecorationOp("destroy", handle))

    def set_content(self, handle: int, text: str, style: str) -> None:
        decoration = self.live[handle]
        decoration.text = text
        decoration.style = style
        self.operations.append(DecorationOp("set_content", handle, text=text))

    def count(self, *kinds: str) -> int:
        if not kinds:
            return len(self.operations)
        return sum(1 for op in self.operations if op.kind in kinds)

    def clear_log(self) -> None:
        self.operations.clear()

    def on_surface(self, surface: DisplaySurface) -> List[Decoration]:
        return [d for d in self.live.values() if d.surface is surface]

    def labels(self, surface: DisplaySurface) -> Dict[int, str]:
        """Map decorated position -> margin text for ``surface``."""

        return {d.position: d.text for d in self.on_surface(surface)}
