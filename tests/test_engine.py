from __future__ import annotations

from typing import Dict, Optional

import pytest

from relative_gutter.buffer import Buffer, MarginDecorations, MessageArea, Window
from relative_gutter.bus import BEFORE_NUMBERING
from relative_gutter.config import DynamicFormat, GutterSettings
from relative_gutter.engine import SurfaceCycle, ViewportAnnotationEngine
from relative_gutter.host import LEFT_MARGIN, RIGHT_MARGIN


def make_engine(
    settings: Optional[GutterSettings] = None,
) -> tuple[ViewportAnnotationEngine, MarginDecorations, MessageArea]:
    decorations = MarginDecorations()
    messages = MessageArea()
    engine = ViewportAnnotationEngine(
        decorations, settings=settings or GutterSettings(), errors=messages
    )
    return engine, decorations, messages


def labels_by_line(
    buffer: Buffer, decorations: MarginDecorations, window: Window
) -> Dict[int, str]:
    return {
        buffer.line_number_at(position): text
        for position, text in decorations.labels(window).items()
    }


def test_refresh_is_noop_when_mode_disabled() -> None:
    engine, decorations, _ = make_engine()
    buffer = Buffer.with_lines(20)
    Window(buffer)

    assert engine.refresh(buffer) is None
    assert decorations.count() == 0


def test_dynamic_labels_for_top_of_buffer() -> None:
    engine, decorations, _ = make_engine()
    buffer = Buffer.with_lines(20)
    window = Window(buffer, height=10)
    engine.enable(buffer)

    engine.refresh(buffer)

    labels = labels_by_line(buffer, decorations, window)
    assert [labels[line] for line in range(1, 11)] == [f"{n:>2}" for n in range(10)]
    assert window.get_margin_width(LEFT_MARGIN) == 2


@pytest.mark.parametrize("cursor", [1, 7, 13, 20])
@pytest.mark.parametrize("top", [1, 6, 11])
def test_labels_decode_to_distance_from_cursor(cursor: int, top: int) -> None:
    engine, decorations, _ = make_engine(GutterSettings(format="%3d"))
    buffer = Buffer.with_lines(20)
    window = Window(buffer, height=8, top_line=top)
    window.goto_line(cursor)
    engine.enable(buffer)

    engine.refresh(buffer)

    labels = labels_by_line(buffer, decorations, window)
    assert labels
    for line, text in labels.items():
        assert int(text.strip()) == abs(cursor - line)


def test_custom_formatter_sees_raw_line_numbers() -> None:
    engine, decorations, _ = make_engine(GutterSettings(format=lambda line: str(line)))
    buffer = Buffer.with_lines(20)
    window = Window(buffer, height=5, top_line=8)
    window.goto_line(10)
    engine.enable(buffer)

    engine.refresh(buffer)

    labels = labels_by_line(buffer, decorations, window)
    assert [labels[line] for line in range(8, 13)] == ["8", "9", "10", "11", "12"]


def test_live_decorations_match_visible_lines() -> None:
    engine, decorations, _ = make_engine()
    buffer = Buffer.with_lines(40)
    window = Window(buffer, height=10)
    engine.enable(buffer)
    engine.refresh(buffer)

    window.height = 4
    engine.refresh(buffer)
    assert len(decorations.on_surface(window)) == 4

    window.scroll_to(38)
    engine.refresh(buffer)
    assert len(decorations.on_surface(window)) == 3


def test_second_refresh_touches_no_decorations() -> None:
    engine, decorations, _ = make_engine()
    buffer = Buffer.with_lines(20)
    window = Window(buffer, height=10)
    window.goto_line(4)
    engine.enable(buffer)
    engine.refresh(buffer)
    decorations.clear_log()

    engine.refresh(buffer)

    assert decorations.count() == 0


def test_width_follows_widest_label_of_each_cycle() -> None:
    engine, _, _ = make_engine(GutterSettings(format="%d"))
    buffer = Buffer.with_lines(150)
    window = Window(buffer, height=10, top_line=110)
    engine.enable(buffer)

    engine.refresh(buffer)
    assert window.get_margin_width(LEFT_MARGIN) == 3

    window.scroll_to(1)
    engine.refresh(buffer)
    assert window.get_margin_width(LEFT_MARGIN) == 1


def test_dynamic_width_is_recomputed_when_buffer_shrinks() -> None:
    engine, _, _ = make_engine()
    buffer = Buffer.with_lines(120)
    window = Window(buffer, height=10)
    engine.enable(buffer)
    engine.refresh(buffer)
    assert window.get_margin_width(LEFT_MARGIN) == 3

    buffer.delete_range(0, buffer.document.line_start(100))
    engine.refresh(buffer)

    assert buffer.total_line_count() == 20
    assert window.get_margin_width(LEFT_MARGIN) == 2


def test_each_window_is_numbered_from_its_own_cursor() -> None:
    engine, decorations, _ = make_engine()
    buffer = Buffer.with_lines(30)
    left = Window(buffer, height=5, name="left")
    right = Window(buffer, height=5, top_line=20, name="right")
    right.goto_line(22)
    engine.enable(buffer)

    report = engine.refresh(buffer)

    assert report is not None and report.surfaces == 2
    assert labels_by_line(buffer, decorations, left)[3] == " 2"
    assert labels_by_line(buffer, decorations, right)[20] == " 2"
    assert len(decorations.live) == 10


def test_lost_surface_is_skipped_without_raising() -> None:
    engine, decorations, _ = make_engine()
    buffer = Buffer.with_lines(30)
    first = Window(buffer, height=5, name="first")
    second = Window(buffer, height=5, top_line=10, name="second")
    engine.enable(buffer)
    engine.refresh(buffer)
    assert len(decorations.live) == 10

    def close_second(payload: object) -> None:
        assert isinstance(payload, SurfaceCycle)
        if payload.surface is second:
            second.close()

    engine.bus.subscribe(BEFORE_NUMBERING, close_second)
    first.goto_line(3)
    report = engine.refresh(buffer)

    assert report is not None
    assert report.skipped == 1
    assert len(decorations.on_surface(second)) == 0
    assert labels_by_line(buffer, decorations, first)[1] == " 2"
    assert len(decorations.live) == 5


def test_closed_window_pool_is_retired_on_next_refresh() -> None:
    engine, decorations, _ = make_engine()
    buffer = Buffer.with_lines(30)
    Window(buffer, height=5)
    other = Window(buffer, height=5, top_line=10)
    engine.enable(buffer)
    engine.refresh(buffer)

    other.close()
    engine.refresh(buffer)

    assert len(decorations.live) == 5
    assert decorations.on_surface(other) == []


def test_before_numbering_hook_runs_once_per_surface() -> None:
    engine, _, _ = make_engine()
    buffer = Buffer.with_lines(30)
    windows = [Window(buffer, height=3), Window(buffer, height=3)]
    seen: list[object] = []
    engine.bus.subscribe(
        BEFORE_NUMBERING, lambda payload: seen.append(payload.surface)
    )
    engine.enable(buffer)

    engine.refresh(buffer)

    assert seen == windows


def test_failing_custom_formatter_blanks_line_and_reports_once() -> None:
    def fmt(line: int) -> str:
        if line == 3:
            raise ValueError("boom")
        return str(line)

    engine, decorations, messages = make_engine(GutterSettings(format=fmt))
    buffer = Buffer.with_lines(20)
    window = Window(buffer, height=5)
    Window(buffer, height=5)
    engine.enable(buffer)

    report = engine.refresh(buffer)

    labels = labels_by_line(buffer, decorations, window)
    assert labels[3] == ""
    assert labels[4] == "4"
    assert report is not None and report.failure is not None
    assert len(messages.messages) == 1
    assert "line 3" in messages.last


def test_invalid_format_falls_back_to_dynamic() -> None:
    engine, decorations, messages = make_engine(GutterSettings(format=42))
    buffer = Buffer.with_lines(20)
    window = Window(buffer, height=3)

    state = engine.enable(buffer)
    engine.refresh(buffer)

    assert state.format == DynamicFormat()
    assert len(messages.messages) == 1
    assert labels_by_line(buffer, decorations, window)[2] == " 1"


def test_disable_resets_margin_and_destroys_decorations() -> None:
    engine, decorations, _ = make_engine()
    buffer = Buffer.with_lines(20)
    window = Window(buffer, height=10)
    window.set_margin_width(RIGHT_MARGIN, 3)
    engine.enable(buffer)
    engine.refresh(buffer)

    assert engine.disable(buffer) is True

    assert decorations.live == {}
    assert window.get_margin_width(LEFT_MARGIN) == 0
    assert window.get_margin_width(RIGHT_MARGIN) == 3
    assert engine.disable(buffer) is False


def test_right_margin_side_is_supported() -> None:
    decorations = MarginDecorations()
    engine = ViewportAnnotationEngine(decorations, side=RIGHT_MARGIN)
    buffer = Buffer.with_lines(20)
    window = Window(buffer, height=4)
    engine.enable(buffer)

    engine.refresh(buffer)

    assert window.get_margin_width(RIGHT_MARGIN) == 2
    assert window.get_margin_width(LEFT_MARGIN) == 0


def test_refresh_all_covers_every_enabled_buffer() -> None:
    engine, decorations, _ = make_engine()
    buffers = [Buffer.with_lines(10, name=f"b{n}") for n in range(3)]
    for buffer in buffers:
        Window(buffer, height=2)
    engine.enable(buffers[0])
    engine.enable(buffers[2])

    assert engine.refresh_all() == 2
    assert len(decorations.live) == 4
