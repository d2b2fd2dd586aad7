"""Runtime services (telemetry) shared by every gutter component."""

from . import telemetry

__all__ = ["telemetry"]
