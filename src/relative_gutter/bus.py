"""Tiny synchronous event bus used for gutter hook points."""

from __future__ import annotations

from typing import Callable, Dict

BEFORE_NUMBERING = "gutter.before_numbering"
REFRESHED = "gutter.refreshed"
DISABLED = "gutter.disabled"


class GutterBus:
    """Lets collaborators observe refreshes and adjust state before them."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


__all__ = ["BEFORE_NUMBERING", "DISABLED", "REFRESHED", "GutterBus"]
