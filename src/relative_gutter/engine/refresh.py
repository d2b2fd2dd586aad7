"""Viewport annotation engine: one refresh walks every surface of a buffer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from relative_gutter.annotations import BufferState
from relative_gutter.bus import BEFORE_NUMBERING, DISABLED, REFRESHED, GutterBus
from relative_gutter.config import (
    DynamicFormat,
    FormatConfig,
    GutterSettings,
    resolve_format,
)
from relative_gutter.errors import (
    ConfigurationInvalid,
    CustomFormatterFailure,
    GutterError,
    SurfaceInvalidError,
)
from relative_gutter.host import (
    LEFT_MARGIN,
    DecorationHost,
    DisplaySurface,
    ErrorChannel,
    TextBuffer,
)
from relative_gutter.runtime import telemetry
from relative_gutter.viewport import (
    EMPTY_LABEL,
    Label,
    LabelFormatter,
    WidthTracker,
    apply_margin_width,
    cursor_line,
    visible_lines,
)

from .registry import GutterModeRegistry

LOGGER_NAME = "relative_gutter.engine"


@dataclass(frozen=True, slots=True)
class SurfaceCycle:
    """Payload of the before-numbering hook."""

    buffer: TextBuffer
    surface: DisplaySurface


@dataclass(slots=True)
class RefreshReport:
    """What one refresh did, for callers and tests."""

    surfaces: int = 0
    skipped: int = 0
    lines: int = 0
    widths: Tuple[Tuple[DisplaySurface, int], ...] = ()
    failure: Optional[CustomFormatterFailure] = None


class _TelemetryChannel:
    def report(self, message: str) -> None:
        telemetry.record_event(
            "gutter.error",
            level="error",
            data={"message": message},
            logger_name=LOGGER_NAME,
        )


class ViewportAnnotationEngine:
    """Keeps each enabled buffer's margin labels in step with its surfaces."""

    def __init__(
        self,
        decorations: DecorationHost,
        *,
        settings: Optional[GutterSettings] = None,
        registry: Optional[GutterModeRegistry] = None,
        errors: Optional[ErrorChannel] = None,
        bus: Optional[GutterBus] = None,
        side: str = LEFT_MARGIN,
    ) -> None:
        self.decorations = decorations
        self.settings = settings or GutterSettings()
        self.registry = registry or GutterModeRegistry()
        self.errors: ErrorChannel = errors or _TelemetryChannel()
        self.bus = bus or GutterBus()
        self.side = side
        self.logger = telemetry.get_logger(LOGGER_NAME)

    # -- mode lifecycle ------------------------------------------------------

    def is_enabled(self, buffer: TextBuffer) -> bool:
        return self.registry.is_enabled(buffer)

    def enable(self, buffer: TextBuffer) -> BufferState:
        """Create fresh state for ``buffer``; the caller runs the first refresh."""

        state = self.registry.create(buffer, self._resolve_format())
        telemetry.record_event(
            "mode.enable",
            data={"buffer": buffer, "format": type(state.format).__name__},
            logger_name=LOGGER_NAME,
        )
        return state

    def disable(self, buffer: TextBuffer) -> bool:
        """Zero the margins and destroy every annotation of ``buffer``."""

        state = self.registry.remove(buffer)
        if state is None:
            return False
        self.release(state)
        telemetry.record_event(
            "mode.disable", data={"buffer": buffer}, logger_name=LOGGER_NAME
        )
        return True

    def release(self, state: BufferState) -> None:
        """Zero every margin and destroy every pool; host errors are reported.

        Each surface and each pool is torn down on its own, so one failing
        host call never leaves the others decorated.
        """

        with state.lock:
            surfaces = [pool.surface for pool in state.pools()]
            surfaces += [s for s in state.buffer.surfaces() if s not in surfaces]
            for surface in surfaces:
                try:
                    self._apply_width(surface, 0)
                except SurfaceInvalidError as exc:
                    self._surface_lost(state, surface, exc)
                except Exception as exc:
                    self._teardown_failed("width.reset_failed", surface, exc)
            for pool in state.pools():
                expected = len(pool)
                released = pool.abandon()
                if released < expected:
                    self._teardown_failed(
                        "pool.release_incomplete",
                        pool.surface,
                        GutterError(
                            f"{expected - released} of {expected} margin "
                            "annotations could not be destroyed"
                        ),
                    )
            state.retire()
        self.bus.emit(DISABLED, state.buffer)

    def _teardown_failed(
        self, event: str, surface: DisplaySurface, exc: Exception
    ) -> None:
        telemetry.record_event(
            event,
            level="error",
            data={"surface": surface, "error": repr(exc)},
            logger_name=LOGGER_NAME,
        )
        self.errors.report(f"relative gutter: {exc}")

    def _resolve_format(self) -> FormatConfig:
        try:
            return resolve_format(self.settings.format)
        except ConfigurationInvalid as exc:
            self.errors.report(f"relative gutter: {exc}; using dynamic format")
            telemetry.record_event(
                "config.invalid",
                level="warning",
                data={"value": exc.value},
                logger_name=LOGGER_NAME,
            )
            return DynamicFormat()

    # -- refresh -------------------------------------------------------------

    def refresh(self, buffer: TextBuffer) -> Optional[RefreshReport]:
        """Re-label every surface showing ``buffer``; no-op when disabled."""

        state = self.registry.get(buffer)
        if state is None:
            return None
        report = RefreshReport()
        with state.lock, telemetry.span(
            "gutter::refresh",
            logger_name=LOGGER_NAME,
            component="engine",
            metadata={"buffer": buffer},
        ) as span:
            surfaces = list(buffer.surfaces())
            for pool in state.stale_pools(surfaces):
                pool.abandon()
            formatter = self._formatter(state)
            widths: List[Tuple[DisplaySurface, int]] = []
            for surface in surfaces:
                if state.retired:
                    break
                try:
                    width = self._number_surface(
                        state, buffer, surface, formatter, report
                    )
                except SurfaceInvalidError as exc:
                    self._surface_lost(state, surface, exc)
                    report.skipped += 1
                    continue
                widths.append((surface, width))
            if state.retired:
                widths = []
            applied = []
            for surface, width in widths:
                try:
                    self._apply_width(surface, width)
                except SurfaceInvalidError as exc:
                    self._surface_lost(state, surface, exc)
                    report.skipped += 1
                    continue
                applied.append((surface, width))
            report.widths = tuple(applied)
            report.surfaces = len(applied)
            span.add_metadata("surfaces", report.surfaces)
            span.add_metadata("lines", report.lines)
        if report.failure is not None:
            self.errors.report(f"relative gutter: {report.failure}")
        self.bus.emit(REFRESHED, report)
        return report

    def refresh_all(self) -> int:
        count = 0
        for state in self.registry:
            if self.refresh(state.buffer) is not None:
                count += 1
        return count

    def _formatter(self, state: BufferState) -> LabelFormatter:
        settings = self.settings
        return LabelFormatter(
            state.format,
            total_lines=state.buffer.total_line_count(),
            current_symbol=settings.current_symbol,
            offset=settings.offset,
            relative=settings.relative,
            style=settings.style,
            current_style=settings.current_style,
        )

    def _number_surface(
        self,
        state: BufferState,
        buffer: TextBuffer,
        surface: DisplaySurface,
        formatter: LabelFormatter,
        report: RefreshReport,
    ) -> int:
        self.bus.emit(BEFORE_NUMBERING, SurfaceCycle(buffer, surface))
        if state.retired:
            return 0
        lines = visible_lines(buffer, surface)
        cursor = cursor_line(buffer, surface)
        pool = state.pool_for(surface, self.decorations)
        tracker = WidthTracker()
        pool.begin_cycle()
        try:
            for position, number in lines:
                label = self._label(formatter, number, cursor, report)
                tracker.observe(label.text)
                pool.acquire(position, label)
        except Exception:
            state.drop_pool(surface)
            pool.abandon()
            raise
        stats = pool.end_cycle()
        report.lines += len(lines)
        telemetry.record_event(
            "pool.cycle",
            level="debug",
            data={"surface": surface, "width": tracker.width, **stats.as_dict()},
            logger_name=LOGGER_NAME,
        )
        return tracker.width

    def _label(
        self,
        formatter: LabelFormatter,
        number: int,
        cursor: int,
        report: RefreshReport,
    ) -> Label:
        try:
            return formatter.label(number, cursor)
        except CustomFormatterFailure as exc:
            if report.failure is None:
                report.failure = exc
                telemetry.record_event(
                    "formatter.failure",
                    level="error",
                    data={"line": number, "cause": exc.cause},
                    logger_name=LOGGER_NAME,
                )
            return EMPTY_LABEL

    def _surface_lost(
        self, state: BufferState, surface: DisplaySurface, exc: SurfaceInvalidError
    ) -> None:
        pool = state.drop_pool(surface)
        released = pool.abandon() if pool is not None else 0
        telemetry.record_event(
            "surface.lost",
            level="warning",
            data={"surface": surface, "reason": str(exc), "released": released},
            logger_name=LOGGER_NAME,
        )

    def _apply_width(self, surface: DisplaySurface, width: int) -> None:
        apply_margin_width(surface, width, side=self.side)


__all__ = ["RefreshReport", "SurfaceCycle", "ViewportAnnotationEngine"]
