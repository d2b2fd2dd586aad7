"""Map from buffer identity to its annotation state."""

from __future__ import annotations

from typing import Dict, Iterator, Optional

from relative_gutter.annotations import BufferState
from relative_gutter.config import FormatConfig
from relative_gutter.host import TextBuffer


class GutterModeRegistry:
    """Tracks which buffers have the gutter mode enabled."""

    def __init__(self) -> None:
        self._states: Dict[int, BufferState] = {}

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[BufferState]:
        return iter(list(self._states.values()))

    def get(self, buffer: TextBuffer) -> Optional[BufferState]:
        return self._states.get(id(buffer))

    def is_enabled(self, buffer: TextBuffer) -> bool:
        return id(buffer) in self._states

    def create(self, buffer: TextBuffer, format: FormatConfig) -> BufferState:
        if self.is_enabled(buffer):
            raise ValueError(f"gutter mode already enabled for {buffer!r}")
        state = BufferState(buffer=buffer, format=format)
        self._states[id(buffer)] = state
        return state

    def remove(self, buffer: TextBuffer) -> Optional[BufferState]:
        return self._states.pop(id(buffer), None)


__all__ = ["GutterModeRegistry"]
