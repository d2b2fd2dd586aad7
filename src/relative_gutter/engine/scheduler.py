"""Decides when the engine refreshes, from the stream of host events."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Set

from relative_gutter.config import GutterSettings
from relative_gutter.host import IdleScheduler, TextBuffer
from relative_gutter.runtime import telemetry

from .events import (
    BufferCloseEvent,
    BufferEditEvent,
    CursorOrCommandEvent,
    GutterEvent,
    LayoutChangeEvent,
    ModeDisableEvent,
    ModeEnableEvent,
    ScrollEvent,
)
from .refresh import LOGGER_NAME, ViewportAnnotationEngine


class UpdatePhase(str, Enum):
    IDLE = "idle"
    PENDING_IMMEDIATE = "pending_immediate"
    PENDING_DELAYED = "pending_delayed"
    DISABLED = "disabled"


class UpdateScheduler:
    """Single dispatch point the host feeds every gutter event into.

    ``PENDING_IMMEDIATE`` covers a synchronous refresh in progress, so events
    raised from inside it (a before-numbering hook editing the buffer, say)
    do not nest a second refresh. ``PENDING_DELAYED`` means one idle callback
    is armed; further command events coalesce into it.
    """

    def __init__(
        self,
        engine: ViewportAnnotationEngine,
        idle: IdleScheduler,
        *,
        settings: Optional[GutterSettings] = None,
    ) -> None:
        self.engine = engine
        self.idle = idle
        self.settings = settings or engine.settings
        self._phases: Dict[int, UpdatePhase] = {}
        self._refreshing: Set[int] = set()
        self.logger = telemetry.get_logger(LOGGER_NAME)

    def phase(self, buffer: TextBuffer) -> UpdatePhase:
        if not self.engine.is_enabled(buffer):
            return UpdatePhase.DISABLED
        return self._phases.get(id(buffer), UpdatePhase.IDLE)

    def dispatch(self, event: GutterEvent) -> None:
        if isinstance(event, CursorOrCommandEvent):
            self._on_command(event.buffer)
        elif isinstance(event, BufferEditEvent):
            self._on_edit(event)
        elif isinstance(event, ScrollEvent):
            self._refresh_now(event.buffer)
        elif isinstance(event, LayoutChangeEvent):
            for state in self.engine.registry:
                self._refresh_now(state.buffer)
        elif isinstance(event, ModeEnableEvent):
            self.enable(event.buffer)
        elif isinstance(event, (ModeDisableEvent, BufferCloseEvent)):
            self.disable(event.buffer)
        else:
            raise TypeError(f"unsupported gutter event {event!r}")

    def enable(self, buffer: TextBuffer) -> None:
        if self.engine.is_enabled(buffer):
            return
        self.engine.enable(buffer)
        self._phases[id(buffer)] = UpdatePhase.IDLE
        self._refresh_now(buffer)

    def disable(self, buffer: TextBuffer) -> None:
        """Tear the mode down; failures are reported, never raised."""

        self._phases.pop(id(buffer), None)
        try:
            self.engine.disable(buffer)
        except Exception as exc:
            telemetry.record_event(
                "disable.failed",
                level="error",
                data={"buffer": buffer, "error": repr(exc)},
                logger_name=LOGGER_NAME,
            )
            self.engine.errors.report(f"relative gutter: disable failed: {exc}")

    def _on_command(self, buffer: TextBuffer) -> None:
        if not self.settings.eager or not self.engine.is_enabled(buffer):
            return
        if not self.settings.delay:
            self._refresh_now(buffer)
            return
        if self.phase(buffer) is UpdatePhase.PENDING_DELAYED:
            return
        self._phases[id(buffer)] = UpdatePhase.PENDING_DELAYED
        self.idle.schedule(lambda: self._run_delayed(buffer))
        telemetry.record_event(
            "schedule.delayed",
            level="debug",
            data={"buffer": buffer},
            logger_name=LOGGER_NAME,
        )

    def _on_edit(self, event: BufferEditEvent) -> None:
        if self.settings.eager:
            return
        if event.changes_lines:
            self._refresh_now(event.buffer)

    def _run_delayed(self, buffer: TextBuffer) -> None:
        # The mode may have been disabled since the callback was armed.
        if self.phase(buffer) is not UpdatePhase.PENDING_DELAYED:
            return
        self._phases[id(buffer)] = UpdatePhase.IDLE
        self._refresh_now(buffer)

    def _refresh_now(self, buffer: TextBuffer) -> None:
        phase = self.phase(buffer)
        if phase is UpdatePhase.DISABLED or id(buffer) in self._refreshing:
            return
        self._phases[id(buffer)] = UpdatePhase.PENDING_IMMEDIATE
        self._refreshing.add(id(buffer))
        try:
            self.engine.refresh(buffer)
        except Exception as exc:
            self._fail(buffer, exc)
        finally:
            self._refreshing.discard(id(buffer))
            if not self.engine.is_enabled(buffer):
                self._phases.pop(id(buffer), None)
            elif self._phases.get(id(buffer)) is UpdatePhase.PENDING_IMMEDIATE:
                self._phases[id(buffer)] = phase
            # Otherwise a command during the refresh armed a delayed one.

    def _fail(self, buffer: TextBuffer, exc: Exception) -> None:
        telemetry.record_event(
            "refresh.failed",
            level="error",
            data={"buffer": buffer, "error": repr(exc)},
            logger_name=LOGGER_NAME,
        )
        self.engine.errors.report(
            f"relative gutter disabled for {buffer!r}: {exc}"
        )
        self.disable(buffer)


__all__ = ["UpdatePhase", "UpdateScheduler"]
