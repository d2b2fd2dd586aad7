"""Idle queue and message area standing in for a host event loop."""

from __future__ import annotations

from collections import deque
from typing import Callable, Deque, List


class DeferredQueue:
    """One-shot callbacks run on the next call to :meth:`run_pending`."""

    def __init__(self) -> None:
        self._queue: Deque[Callable[[], None]] = deque()

    def schedule(self, callback: Callable[[], None]) -> None:
        self._queue.append(callback)

    @property
    def pending(self) -> int:
        return len(self._queue)

    def run_pending(self) -> int:
        """Run callbacks queued so far; ones they schedule wait for next turn."""

        batch = len(self._queue)
        for _ in range(batch):
            self._queue.popleft()()
        return batch


class MessageArea:
    """Collects user-visible error reports (an echo area)."""

    def __init__(self) -> None:
        self.messages: List[str] = []

    def report(self, message: str) -> None:
        self.messages.append(message)

    @property
    def last(self) -> str:
        return self.messages[-1] if self.messages else ""
