"""Label formatting for relative line numbers."""

from __future__ import annotations

from dataclasses import dataclass

from relative_gutter.config import (
    DEFAULT_CURRENT_STYLE,
    DEFAULT_STYLE,
    CustomFormat,
    DynamicFormat,
    FixedFormat,
    FormatConfig,
)
from relative_gutter.errors import CustomFormatterFailure


@dataclass(frozen=True, slots=True)
class Label:
    """Margin text plus the style it is drawn with; compared as a whole."""

    text: str
    style: str = DEFAULT_STYLE


EMPTY_LABEL = Label("")


def digits(count: int) -> int:
    return len(str(count))


def format_label(
    line_number: int, cursor_line: int, config: FormatConfig, *, total_lines: int = 0
) -> str:
    """Render the margin text for ``line_number``.

    Fixed and dynamic formats show ``abs(cursor_line - line_number)``; a custom
    function is called with ``line_number`` itself. ``total_lines`` sizes the
    dynamic format.
    """

    if isinstance(config, CustomFormat):
        return _call_custom(config, line_number)
    distance = abs(cursor_line - line_number)
    if isinstance(config, FixedFormat):
        return config.pattern % distance
    return "%*d" % (digits(total_lines), distance)


def _call_custom(config: CustomFormat, line_number: int) -> str:
    try:
        text = config.function(line_number)
    except Exception as exc:
        raise CustomFormatterFailure(line_number, exc) from exc
    if not isinstance(text, str):
        raise CustomFormatterFailure(
            line_number, TypeError(f"expected str, got {type(text).__name__}")
        )
    return text


class LabelFormatter:
    """Formats every label of one refresh cycle.

    Built once per refresh so the dynamic width is derived from the buffer's
    line count exactly once and never carried over to the next refresh.
    """

    def __init__(
        self,
        config: FormatConfig,
        *,
        total_lines: int,
        current_symbol: str = "",
        offset: int = 0,
        relative: bool = True,
        style: str = DEFAULT_STYLE,
        current_style: str = DEFAULT_CURRENT_STYLE,
    ) -> None:
        self.config = config
        self.total_lines = total_lines
        self.current_symbol = current_symbol
        self.offset = offset
        self.relative = relative
        self.style = style
        self.current_style = current_style
        if isinstance(config, DynamicFormat):
            self._pattern = f"%{digits(total_lines)}d"
        elif isinstance(config, FixedFormat):
            self._pattern = config.pattern
        else:
            self._pattern = ""

    @property
    def numeric_width(self) -> int:
        return len(self._pattern % 0) if self._pattern else 0

    def label(self, line_number: int, cursor_line: int) -> Label:
        current = line_number == cursor_line
        style = self.current_style if current else self.style
        if isinstance(self.config, CustomFormat):
            return Label(_call_custom(self.config, line_number), style)
        if current and self.current_symbol:
            return Label(self.current_symbol.rjust(self.numeric_width), style)
        if not self.relative:
            return Label(self._pattern % line_number, style)
        distance = abs(cursor_line - line_number)
        if not current:
            distance += self.offset
        return Label(self._pattern % distance, style)


__all__ = ["EMPTY_LABEL", "Label", "LabelFormatter", "digits", "format_label"]
