from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum

from dashwidgets.core.geometry import LayoutMetrics, Rect

MAX_VISIBLE_TASKS: int = 8


@dataclass(frozen=True)
class TaskItem:
    text: str
    completed: bool = False
    time: str = ''  # free-text label, never parsed


class TaskZone(Enum):
    CHECKBOX = 'checkbox'
    BODY = 'body'
    DELETE = 'delete'


@dataclass(frozen=True)
class TaskHit:
    index: int
    zone: TaskZone


@dataclass(frozen=True)
class TaskRow:
    index: int
    item: TaskItem
    rect: Rect
    checkbox: Rect
    delete: Rect | None  # only laid out for the hovered row
    hovered: bool


@dataclass(frozen=True)
class TaskListGeometry:
    card: Rect
    add_zone: Rect
    rows: tuple[TaskRow, ...]
    total_count: int

    @property
    def visible_count(self) -> int:
        return len(self.rows)

    @property
    def hidden_count(self) -> int:
        return self.total_count - self.visible_count

    @property
    def is_empty(self) -> bool:
        return self.total_count == 0


class TaskListEngine:
    def __init__(self, metrics: LayoutMetrics, items: list[TaskItem] | None = None) -> None:
        self.metrics: LayoutMetrics = metrics
        self._items: list[TaskItem] = list(items or [])
        self.hovered_index: int | None = None
        self.height: int = 0
        self._recompute_height()

    @property
    def items(self) -> list[TaskItem]:
        return list(self._items)

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def visible_count(self) -> int:
        return min(len(self._items), MAX_VISIBLE_TASKS)

    def _recompute_height(self) -> None:
        self.height = self.metrics.task_card_height(self.visible_count)

    def add_task(self, text: str) -> bool:
        if not text:
            return False
        self._items.insert(0, TaskItem(text))
        self._recompute_height()
        return True

    def toggle_complete(self, index: int) -> TaskItem:
        if not 0 <= index < len(self._items):
            raise IndexError(f'task index {index} out of range')
        item = self._items[index]
        self._items[index] = replace(item, completed=not item.completed)
        return self._items[index]

    def delete_task(self, index: int) -> TaskItem:
        if not 0 <= index < len(self._items):
            raise IndexError(f'task index {index} out of range')
        removed = self._items.pop(index)
        if self.hovered_index is not None and self.hovered_index >= self.visible_count:
            self.hovered_index = None
        self._recompute_height()
        return removed

    def _row_rect(self, index: int, container_width: int) -> Rect:
        m = self.metrics
        return Rect(0, m.task_top + m.task_list_offset + index * m.item_height, container_width, m.item_height)

    def layout(self, container_width: int) -> TaskListGeometry:
        m = self.metrics
        rows: list[TaskRow] = []
        for index in range(self.visible_count):
            rect = self._row_rect(index, container_width)
            hovered = index == self.hovered_index
            rows.append(TaskRow(
                index=index,
                item=self._items[index],
                rect=rect,
                checkbox=Rect(m.checkbox_x, rect.y, m.checkbox_width, rect.height),
                delete=(
                    Rect(container_width - m.delete_inset, rect.y, m.delete_width, rect.height)
                    if hovered else None
                ),
                hovered=hovered,
            ))

        return TaskListGeometry(
            card=Rect(0, m.task_top, container_width, self.height),
            add_zone=Rect(container_width - m.add_zone_width, m.task_top, m.add_zone_width, m.add_zone_height),
            rows=tuple(rows),
            total_count=len(self._items),
        )

    def hit_test_add(self, x: float, y: float, container_width: int) -> bool:
        return self.layout(container_width).add_zone.contains(x, y)

    def hit_test_item(self, x: float, y: float, container_width: int) -> TaskHit | None:
        for row in self.layout(container_width).rows:
            if not row.rect.contains(x, y):
                continue
            if row.checkbox.contains(x, y):
                return TaskHit(row.index, TaskZone.CHECKBOX)
            if row.delete is not None and row.delete.contains(x, y):
                return TaskHit(row.index, TaskZone.DELETE)
            return TaskHit(row.index, TaskZone.BODY)
        return None

    def hover(self, x: float, y: float, container_width: int) -> int | None:
        self.hovered_index = None
        for index in range(self.visible_count):
            if self._row_rect(index, container_width).contains(x, y):
                self.hovered_index = index
                break
        return self.hovered_index

    def clear_hover(self) -> None:
        self.hovered_index = None
