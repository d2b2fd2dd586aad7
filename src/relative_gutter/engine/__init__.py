"""Refresh engine, mode registry, and update scheduling."""

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
from .refresh import RefreshReport, SurfaceCycle, ViewportAnnotationEngine
from .registry import GutterModeRegistry
from .scheduler import UpdatePhase, UpdateScheduler

__all__ = [
    "BufferCloseEvent",
    "BufferEditEvent",
    "CursorOrCommandEvent",
    "GutterEvent",
    "GutterModeRegistry",
    "LayoutChangeEvent",
    "ModeDisableEvent",
    "ModeEnableEvent",
    "RefreshReport",
    "ScrollEvent",
    "SurfaceCycle",
    "UpdatePhase",
    "UpdateScheduler",
    "ViewportAnnotationEngine",
]
