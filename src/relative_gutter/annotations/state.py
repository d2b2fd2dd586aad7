"""Per-buffer annotation state owned by the mode registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock
from typing import Dict, Iterable, List

from relative_gutter.config import DynamicFormat, FormatConfig
from relative_gutter.host import DecorationHost, DisplaySurface, TextBuffer

from .pool import AnnotationPool


@dataclass(eq=False)
class BufferState:
    """Annotation pools of every surface showing ``buffer``.

    Created when the mode is enabled and torn down when it is disabled or
    the buffer is closed. ``lock`` serializes refresh cycles for the buffer.
    """

    buffer: TextBuffer
    format: FormatConfig = field(default_factory=DynamicFormat)
    lock: RLock = field(default_factory=RLock)
    retired: bool = False
    _pools: Dict[int, AnnotationPool] = field(default_factory=dict)

    def pool_for(
        self, surface: DisplaySurface, decorations: DecorationHost
    ) -> AnnotationPool:
        pool = self._pools.get(id(surface))
        if pool is None:
            pool = AnnotationPool(surface=surface, decorations=decorations)
            self._pools[id(surface)] = pool
        return pool

    def drop_pool(self, surface: DisplaySurface) -> AnnotationPool | None:
        return self._pools.pop(id(surface), None)

    def pools(self) -> List[AnnotationPool]:
        return list(self._pools.values())

    def stale_pools(self, surfaces: Iterable[DisplaySurface]) -> List[AnnotationPool]:
        """Remove and return pools whose surface is not in ``surfaces``."""

        keep = {id(surface) for surface in surfaces}
        stale = [key for key in self._pools if key not in keep]
        return [self._pools.pop(key) for key in stale]

    def retire(self) -> None:
        """Forget every pool; a refresh still running on this state stops."""

        self._pools.clear()
        self.retired = True


__all__ = ["BufferState"]
