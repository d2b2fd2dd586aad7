"""Reusable margin annotations for one (buffer, surface) pair."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Hashable, List

from relative_gutter.host import DecorationHost, DisplaySurface, Position
from relative_gutter.runtime import telemetry
from relative_gutter.viewport.formatter import Label

LOGGER_NAME = "relative_gutter.annotations"


@dataclass(slots=True, eq=False)
class Annotation:
    """A placed decoration plus the anchor and label it was last drawn with."""

    anchor: Position
    label: Label
    handle: Hashable


@dataclass(slots=True)
class CycleStats:
    reused: int = 0
    rerendered: int = 0
    moved: int = 0
    created: int = 0
    destroyed: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "reused": self.reused,
            "rerendered": self.rerendered,
            "moved": self.moved,
            "created": self.created,
            "destroyed": self.destroyed,
        }


@dataclass(slots=True)
class AnnotationPool:
    """Active and recycled annotations of one surface.

    A cycle moves every active annotation to the recycled set, then each
    visible line acquires one: an exact (anchor, label) match is reused
    untouched, a recycled annotation at the same anchor is re-rendered in
    place, any other recycled annotation is moved there, and only when none
    is left is a new decoration created. Leftovers are destroyed when the
    cycle ends.
    """

    surface: DisplaySurface
    decorations: DecorationHost
    _active: List[Annotation] = field(default_factory=list)
    _recycled: Dict[Position, List[Annotation]] = field(default_factory=dict)
    in_cycle: bool = False
    stats: CycleStats = field(default_factory=CycleStats)

    @property
    def active(self) -> tuple[Annotation, ...]:
        return tuple(self._active)

    @property
    def recycled_count(self) -> int:
        return sum(len(bucket) for bucket in self._recycled.values())

    def __len__(self) -> int:
        return len(self._active) + self.recycled_count

    def begin_cycle(self) -> None:
        if self.in_cycle:
            raise RuntimeError("annotation cycle already in progress")
        for annotation in self._active:
            self._recycled.setdefault(annotation.anchor, []).append(annotation)
        self._active = []
        self.stats = CycleStats()
        self.in_cycle = True

    def acquire(self, anchor: Position, label: Label) -> Annotation:
        if not self.in_cycle:
            raise RuntimeError("acquire() outside of an annotation cycle")
        annotation = self._take_at(anchor, label)
        if annotation is not None and annotation.label == label:
            self.stats.reused += 1
        elif annotation is not None:
            self._render(annotation, label)
            self.stats.rerendered += 1
        elif self._recycled:
            annotation = self._pop_any()
            self.decorations.move(annotation.handle, anchor)
            annotation.anchor = anchor
            self._render(annotation, label)
            self.stats.moved += 1
        else:
            handle = self.decorations.create(self.surface, anchor)
            annotation = Annotation(anchor=anchor, label=label, handle=handle)
            self.decorations.set_content(handle, label.text, label.style)
            self.stats.created += 1
        self._active.append(annotation)
        return annotation

    def end_cycle(self) -> CycleStats:
        leftovers = [a for bucket in self._recycled.values() for a in bucket]
        self._recycled = {}
        self.in_cycle = False
        for annotation in leftovers:
            self.decorations.destroy(annotation.handle)
            self.stats.destroyed += 1
        return self.stats

    def abandon(self) -> int:
        """Destroy every annotation, active or recycled; return how many.

        A handle the host refuses to destroy is logged and skipped so the
        rest are still released.
        """

        doomed = self._active + [a for b in self._recycled.values() for a in b]
        self._active = []
        self._recycled = {}
        self.in_cycle = False
        destroyed = 0
        for annotation in doomed:
            try:
                self.decorations.destroy(annotation.handle)
            except Exception as exc:
                telemetry.record_event(
                    "pool.destroy_failed",
                    level="error",
                    data={"surface": self.surface, "error": repr(exc)},
                    logger_name=LOGGER_NAME,
                )
                continue
            destroyed += 1
        return destroyed

    def _take_at(self, anchor: Position, label: Label) -> Annotation | None:
        bucket = self._recycled.get(anchor)
        if not bucket:
            return None
        index = next(
            (i for i, candidate in enumerate(bucket) if candidate.label == label),
            len(bucket) - 1,
        )
        annotation = bucket.pop(index)
        if not bucket:
            del self._recycled[anchor]
        return annotation

    def _pop_any(self) -> Annotation:
        anchor, bucket = self._recycled.popitem()
        annotation = bucket.pop()
        if bucket:
            self._recycled[anchor] = bucket
        return annotation

    def _render(self, annotation: Annotation, label: Label) -> None:
        self.decorations.set_content(annotation.handle, label.text, label.style)
        annotation.label = label


__all__ = ["Annotation", "AnnotationPool", "CycleStats"]
