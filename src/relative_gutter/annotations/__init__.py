"""Annotation pooling and per-buffer state."""

from .pool import Annotation, AnnotationPool, CycleStats
from .state import BufferState

__all__ = ["Annotation", "AnnotationPool", "BufferState", "CycleStats"]
