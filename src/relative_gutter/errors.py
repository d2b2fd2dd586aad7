"""Exception taxonomy shared by the gutter engine and its hosts."""

from __future__ import annotations

from typing import Any


class GutterError(RuntimeError):
    """Base class for every error raised by relative_gutter."""


class SurfaceInvalidError(GutterError):
    """Raised by a host when a display surface disappears mid-cycle."""

    def __init__(self, message: str, *, surface: Any = None) -> None:
        super().__init__(message)
        self.surface = surface


class ConfigurationInvalid(GutterError):
    """Raised when a ``format`` setting cannot be interpreted."""

    def __init__(self, message: str, *, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


class CustomFormatterFailure(GutterError):
    """Wraps an exception raised by a user supplied label function."""

    def __init__(self, line_number: int, cause: BaseException) -> None:
        super().__init__(
            f"custom line formatter failed on line {line_number}: {cause!r}"
        )
        self.line_number = line_number
        self.cause = cause


__all__ = [
    "GutterError",
    "SurfaceInvalidError",
    "ConfigurationInvalid",
    "CustomFormatterFailure",
]
