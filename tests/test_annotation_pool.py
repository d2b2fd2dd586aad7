from __future__ import annotations

import pytest

from relative_gutter.annotations import AnnotationPool
from relative_gutter.buffer import Buffer, MarginDecorations, Window
from relative_gutter.viewport import Label


def make_pool() -> tuple[AnnotationPool, MarginDecorations]:
    decorations = MarginDecorations()
    window = Window(Buffer.with_lines(10))
    return AnnotationPool(surface=window, decorations=decorations), decorations


def run_cycle(pool: AnnotationPool, entries: list[tuple[int, str]]) -> None:
    pool.begin_cycle()
    for anchor, text in entries:
        pool.acquire(anchor, Label(text))
    pool.end_cycle()


def test_first_cycle_creates_one_decoration_per_line() -> None:
    pool, decorations = make_pool()

    run_cycle(pool, [(0, "0"), (7, "1"), (14, "2")])

    assert decorations.count("create") == 3
    assert decorations.count("set_content") == 3
    assert pool.stats.created == 3
    assert len(decorations.live) == 3
    assert [a.label.text for a in pool.active] == ["0", "1", "2"]


def test_identical_cycle_reuses_everything() -> None:
    pool, decorations = make_pool()
    run_cycle(pool, [(0, "0"), (7, "1"), (14, "2")])
    decorations.clear_log()

    run_cycle(pool, [(0, "0"), (7, "1"), (14, "2")])

    assert decorations.count() == 0
    assert pool.stats.reused == 3


def test_changed_label_at_same_anchor_is_rerendered_in_place() -> None:
    pool, decorations = make_pool()
    run_cycle(pool, [(0, "0"), (7, "1")])
    decorations.clear_log()

    run_cycle(pool, [(0, "1"), (7, "0")])

    assert decorations.count("move", "create", "destroy") == 0
    assert decorations.count("set_content") == 2
    assert pool.stats.rerendered == 2


def test_style_is_part_of_label_equality() -> None:
    pool, decorations = make_pool()
    run_cycle(pool, [(0, "3")])
    decorations.clear_log()

    pool.begin_cycle()
    pool.acquire(0, Label("3", "line-number-current"))
    pool.end_cycle()

    assert decorations.count("set_content") == 1


def test_new_anchor_takes_a_recycled_decoration() -> None:
    pool, decorations = make_pool()
    run_cycle(pool, [(0, "0"), (7, "1")])
    decorations.clear_log()

    run_cycle(pool, [(7, "1"), (14, "2")])

    assert decorations.count("create", "destroy") == 0
    assert decorations.count("move") == 1
    assert pool.stats.reused == 1
    assert sorted(d.position for d in decorations.live.values()) == [7, 14]


def test_leftovers_are_destroyed_at_cycle_end() -> None:
    pool, decorations = make_pool()
    run_cycle(pool, [(0, "0"), (7, "1"), (14, "2")])
    decorations.clear_log()

    run_cycle(pool, [(0, "0")])

    assert decorations.count("destroy") == 2
    assert len(decorations.live) == 1
    assert pool.recycled_count == 0


def test_abandon_destroys_active_and_recycled() -> None:
    pool, decorations = make_pool()
    run_cycle(pool, [(0, "0"), (7, "1"), (14, "2")])
    pool.begin_cycle()
    pool.acquire(0, Label("0"))

    assert pool.abandon() == 3
    assert decorations.live == {}
    assert pool.in_cycle is False


def test_abandon_keeps_going_when_a_destroy_fails() -> None:
    pool, decorations = make_pool()
    run_cycle(pool, [(0, "0"), (7, "1"), (14, "2")])
    stuck = pool.active[0].handle
    real_destroy = decorations.destroy

    def destroy(handle: int) -> None:
        if handle == stuck:
            raise RuntimeError("host refused destroy")
        real_destroy(handle)

    decorations.destroy = destroy  # type: ignore[method-assign]

    assert pool.abandon() == 2
    assert list(decorations.live) == [stuck]
    assert len(pool) == 0


def test_cycles_cannot_interleave() -> None:
    pool, _ = make_pool()
    pool.begin_cycle()

    with pytest.raises(RuntimeError):
        pool.begin_cycle()


def test_acquire_requires_cycle() -> None:
    pool, _ = make_pool()

    with pytest.raises(RuntimeError):
        pool.acquire(0, Label("0"))
