"""Gutter settings and label format configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from relative_gutter.errors import ConfigurationInvalid
from relative_gutter.runtime.telemetry import env, env_flag

LineFunction = Callable[[int], str]


@dataclass(frozen=True, slots=True)
class DynamicFormat:
    """Right-align numbers to the digit count of the buffer's line count."""


@dataclass(frozen=True, slots=True)
class FixedFormat:
    """Apply a printf-style numeric pattern such as ``"%3d"``."""

    pattern: str


@dataclass(frozen=True, slots=True)
class CustomFormat:
    """Delegate to ``function(line_number)``; receives the raw line number."""

    function: LineFunction


FormatConfig = Union[DynamicFormat, FixedFormat, CustomFormat]

DEFAULT_STYLE = "line-number"
DEFAULT_CURRENT_STYLE = "line-number-current"


def resolve_format(value: object) -> FormatConfig:
    """Turn a raw ``format`` setting into a :data:`FormatConfig`."""

    if isinstance(value, (DynamicFormat, FixedFormat, CustomFormat)):
        return value
    if value is None or value == "dynamic":
        return DynamicFormat()
    if isinstance(value, str):
        try:
            rendered = value % 0
        except (TypeError, ValueError) as exc:
            raise ConfigurationInvalid(
                f"format pattern {value!r} does not accept a number", value=value
            ) from exc
        if not isinstance(rendered, str):
            raise ConfigurationInvalid(f"bad format pattern {value!r}", value=value)
        return FixedFormat(value)
    if callable(value):
        return CustomFormat(value)
    raise ConfigurationInvalid(f"unrecognized format {value!r}", value=value)


@dataclass(slots=True)
class GutterSettings:
    """User-facing options for the relative line-number margin.

    ``format`` holds the raw value as configured; the engine resolves it once
    per enable and falls back to dynamic numbering when it is invalid.
    ``eager`` refreshes after every command, ``delay`` defers that refresh to
    the host's idle time. ``current_symbol`` replaces the cursor line's label
    when non-empty, ``offset`` is added to every other distance and
    ``relative=False`` switches the built-in formats to absolute numbers.
    """

    format: object = "dynamic"
    eager: bool = True
    delay: bool = False
    current_symbol: str = ""
    offset: int = 0
    relative: bool = True
    style: str = DEFAULT_STYLE
    current_style: str = DEFAULT_CURRENT_STYLE

    @classmethod
    def from_env(cls) -> "GutterSettings":
        raw_offset = env("OFFSET")
        try:
            offset = int(raw_offset) if raw_offset else 0
        except ValueError as exc:
            raise ConfigurationInvalid(
                f"offset {raw_offset!r} is not an integer", value=raw_offset
            ) from exc
        return cls(
            format=env("FORMAT") or "dynamic",
            eager=env_flag("EAGER", True),
            delay=env_flag("DELAY", False),
            current_symbol=env("CURRENT_SYMBOL") or "",
            offset=offset,
            relative=env_flag("RELATIVE", True),
        )


__all__ = [
    "CustomFormat",
    "DynamicFormat",
    "FixedFormat",
    "FormatConfig",
    "GutterSettings",
    "LineFunction",
    "resolve_format",
]
