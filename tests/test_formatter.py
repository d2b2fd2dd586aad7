from __future__ import annotations

import pytest

from relative_gutter.config import (
    CustomFormat,
    DynamicFormat,
    FixedFormat,
    GutterSettings,
    resolve_format,
)
from relative_gutter.errors import ConfigurationInvalid, CustomFormatterFailure
from relative_gutter.viewport import Label, LabelFormatter, format_label


@pytest.mark.parametrize(
    ("line", "cursor", "total", "expected"),
    [
        (1, 1, 20, " 0"),
        (10, 1, 20, " 9"),
        (1, 15, 20, "14"),
        (7, 7, 5, "0"),
        (3, 250, 1000, " 247"),
        (1, 1, 0, "0"),
    ],
)
def test_dynamic_format_pads_to_line_count_digits(
    line: int, cursor: int, total: int, expected: str
) -> None:
    assert format_label(line, cursor, DynamicFormat(), total_lines=total) == expected


def test_fixed_format_applies_pattern_to_distance() -> None:
    assert format_label(4, 10, FixedFormat("%3d")) == "  6"
    assert format_label(10, 4, FixedFormat("%-3d|")) == "6  |"


def test_custom_format_receives_raw_line_number() -> None:
    seen: list[int] = []

    def fmt(line: int) -> str:
        seen.append(line)
        return f"L{line}"

    assert format_label(8, 10, CustomFormat(fmt)) == "L8"
    assert seen == [8]


def test_custom_format_failure_is_wrapped() -> None:
    def broken(line: int) -> str:
        raise ZeroDivisionError(line)

    with pytest.raises(CustomFormatterFailure) as info:
        format_label(3, 1, CustomFormat(broken))

    assert info.value.line_number == 3
    assert isinstance(info.value.cause, ZeroDivisionError)


def test_custom_format_must_return_text() -> None:
    with pytest.raises(CustomFormatterFailure):
        format_label(3, 1, CustomFormat(lambda line: line))  # type: ignore[arg-type]


def test_label_formatter_styles_cursor_line() -> None:
    formatter = LabelFormatter(DynamicFormat(), total_lines=20)

    assert formatter.label(5, 5) == Label(" 0", "line-number-current")
    assert formatter.label(7, 5) == Label(" 2", "line-number")


def test_label_formatter_current_symbol_and_offset() -> None:
    formatter = LabelFormatter(
        DynamicFormat(), total_lines=120, current_symbol="->", offset=1
    )

    assert formatter.label(10, 10).text == " ->"
    assert formatter.label(12, 10).text == "  3"
    assert formatter.label(8, 10).text == "  3"


def test_label_formatter_absolute_numbering() -> None:
    formatter = LabelFormatter(FixedFormat("%4d"), total_lines=50, relative=False)

    assert formatter.label(42, 3).text == "  42"


def test_labels_with_different_styles_are_not_equal() -> None:
    assert Label("3", "line-number") != Label("3", "line-number-current")


@pytest.mark.parametrize("value", ["dynamic", None, DynamicFormat()])
def test_resolve_format_dynamic(value: object) -> None:
    assert resolve_format(value) == DynamicFormat()


def test_resolve_format_pattern_and_callable() -> None:
    assert resolve_format("%3d ") == FixedFormat("%3d ")
    fn = str
    assert resolve_format(fn) == CustomFormat(fn)


@pytest.mark.parametrize("value", [42, "%q", "no placeholder", "%d %d"])
def test_resolve_format_rejects_unknown_values(value: object) -> None:
    with pytest.raises(ConfigurationInvalid):
        resolve_format(value)


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RELATIVE_GUTTER_FORMAT", "%4d")
    monkeypatch.setenv("RELATIVE_GUTTER_EAGER", "no")
    monkeypatch.setenv("RELATIVE_GUTTER_DELAY", "1")
    monkeypatch.setenv("RELATIVE_GUTTER_OFFSET", "1")

    settings = GutterSettings.from_env()

    assert settings.format == "%4d"
    assert settings.eager is False
    assert settings.delay is True
    assert settings.offset == 1
    assert settings.relative is True


def test_settings_from_env_rejects_non_numeric_offset(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("RELATIVE_GUTTER_OFFSET", "two")

    with pytest.raises(ConfigurationInvalid) as info:
        GutterSettings.from_env()

    assert info.value.value == "two"
