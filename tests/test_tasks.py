# tests/test_tasks.py

from __future__ import annotations

import pytest

from dashwidgets.core.geometry import LayoutMetrics
from dashwidgets.core.tasks import (
    MAX_VISIBLE_TASKS,
    TaskHit,
    TaskItem,
    TaskListEngine,
    TaskZone,
)

WIDTH = 380
FIRST_ROW_Y = 260 + 12 + 55  # calendar card + spacing + list offset


def row_y(index: int) -> int:
    return FIRST_ROW_Y + index * 35 + 5


def make_engine(metrics: LayoutMetrics, count: int) -> TaskListEngine:
    return TaskListEngine(metrics, [TaskItem(f'task {i}') for i in range(count)])


def test_add_task_prepends_incomplete_item(tasks: TaskListEngine) -> None:
    assert tasks.add_task('newest') is True

    assert tasks.items[0] == TaskItem('newest', completed=False, time='')
    assert [item.text for item in tasks.items[1:]] == ['task 0', 'task 1', 'task 2']


def test_add_task_rejects_empty_text(tasks: TaskListEngine) -> None:
    height = tasks.height
    assert tasks.add_task('') is False
    assert tasks.count == 3
    assert tasks.height == height


def test_height_tracks_visible_count(metrics: LayoutMetrics) -> None:
    engine = make_engine(metrics, 0)
    assert engine.height == 120

    engine.add_task('one')
    assert engine.height == 120 + 35

    for i in range(12):
        engine.add_task(f'more {i}')
    assert engine.count == 13
    assert engine.visible_count == MAX_VISIBLE_TASKS
    assert engine.height == 120 + 8 * 35

    engine.delete_task(0)
    assert engine.height == 120 + 8 * 35


def test_toggle_complete_flips_flag(tasks: TaskListEngine) -> None:
    assert tasks.toggle_complete(1).completed is True
    assert tasks.toggle_complete(1).completed is False
    assert [item.completed for item in tasks.items] == [False, False, False]


def test_out_of_range_index_raises(tasks: TaskListEngine) -> None:
    with pytest.raises(IndexError):
        tasks.toggle_complete(3)
    with pytest.raises(IndexError):
        tasks.delete_task(-1)


def test_delete_preserves_order(tasks: TaskListEngine) -> None:
    removed = tasks.delete_task(1)

    assert removed.text == 'task 1'
    assert [item.text for item in tasks.items] == ['task 0', 'task 2']


def test_only_first_eight_are_laid_out_and_hit_testable(metrics: LayoutMetrics) -> None:
    engine = make_engine(metrics, 10)
    geometry = engine.layout(WIDTH)

    assert geometry.total_count == 10
    assert geometry.visible_count == 8
    assert geometry.hidden_count == 2
    assert [row.index for row in geometry.rows] == list(range(8))
    assert engine.hit_test_item(30, row_y(7), WIDTH) == TaskHit(7, TaskZone.CHECKBOX)
    assert engine.hit_test_item(30, row_y(8), WIDTH) is None
    assert engine.hover(150, row_y(8), WIDTH) is None


def test_deleting_visible_row_shifts_hidden_item_in(metrics: LayoutMetrics) -> None:
    engine = make_engine(metrics, 10)

    engine.delete_task(0)

    rows = engine.layout(WIDTH).rows
    assert len(rows) == 8
    assert rows[7].item.text == 'task 8'


def test_hit_test_zones(tasks: TaskListEngine) -> None:
    assert tasks.hit_test_item(20, row_y(0), WIDTH) == TaskHit(0, TaskZone.CHECKBOX)
    assert tasks.hit_test_item(43, row_y(2), WIDTH) == TaskHit(2, TaskZone.CHECKBOX)
    assert tasks.hit_test_item(150, row_y(1), WIDTH) == TaskHit(1, TaskZone.BODY)
    assert tasks.hit_test_item(150, FIRST_ROW_Y - 1, WIDTH) is None
    assert tasks.hit_test_item(150, row_y(3), WIDTH) is None


def test_delete_zone_requires_hover(tasks: TaskListEngine) -> None:
    trash_x = WIDTH - 35 + 5

    assert tasks.hit_test_item(trash_x, row_y(1), WIDTH) == TaskHit(1, TaskZone.BODY)
    assert all(row.delete is None for row in tasks.layout(WIDTH).rows)

    assert tasks.hover(trash_x, row_y(1), WIDTH) == 1
    assert tasks.hit_test_item(trash_x, row_y(1), WIDTH) == TaskHit(1, TaskZone.DELETE)
    # Other rows still have no delete control
    assert tasks.hit_test_item(trash_x, row_y(0), WIDTH) == TaskHit(0, TaskZone.BODY)

    rows = tasks.layout(WIDTH).rows
    assert [row.delete is not None for row in rows] == [False, True, False]
    assert [row.hovered for row in rows] == [False, True, False]

    tasks.clear_hover()
    assert tasks.hit_test_item(trash_x, row_y(1), WIDTH) == TaskHit(1, TaskZone.BODY)


def test_hover_cleared_when_row_leaves_visible_window(tasks: TaskListEngine) -> None:
    tasks.hover(150, row_y(2), WIDTH)
    tasks.delete_task(0)
    assert tasks.hovered_index is None

    tasks.hover(150, row_y(0), WIDTH)
    tasks.delete_task(1)
    assert tasks.hovered_index == 0


def test_add_zone(tasks: TaskListEngine) -> None:
    add_zone = tasks.layout(WIDTH).add_zone
    assert (add_zone.x, add_zone.y) == (330, 272)

    assert tasks.hit_test_add(360, 290, WIDTH) is True
    assert tasks.hit_test_add(300, 290, WIDTH) is False
    assert tasks.hit_test_add(360, 322, WIDTH) is False


def test_empty_list_geometry(metrics: LayoutMetrics) -> None:
    geometry = make_engine(metrics, 0).layout(WIDTH)

    assert geometry.is_empty
    assert geometry.rows == ()
    assert geometry.card.height == 120


def test_terminal_preset_zones(terminal_metrics: LayoutMetrics) -> None:
    width = terminal_metrics.width
    engine = make_engine(terminal_metrics, 3)
    first_row = 10 + 2  # calendar card, then the list offset

    geometry = engine.layout(width)
    assert (geometry.add_zone.x, geometry.add_zone.y) == (26, 10)
    assert geometry.card.height == 4 + 3
    assert [row.rect.y for row in geometry.rows] == [first_row, first_row + 1, first_row + 2]

    assert engine.hit_test_add(27, 11, width) is True
    assert engine.hit_test_add(27, first_row, width) is False
    assert engine.hit_test_item(1, first_row, width) == TaskHit(0, TaskZone.CHECKBOX)
    assert engine.hit_test_item(10, first_row + 2, width) == TaskHit(2, TaskZone.BODY)
    assert engine.hit_test_item(27, first_row + 1, width) == TaskHit(1, TaskZone.BODY)

    assert engine.hover(10, first_row + 1, width) == 1
    assert engine.hit_test_item(27, first_row + 1, width) == TaskHit(1, TaskZone.DELETE)
    assert engine.hit_test_item(10, first_row + 3, width) is None
