from __future__ import annotations
from dataclasses import dataclass, fields


@dataclass(frozen=True)
class Rect:
    """Half-open rectangle: [x, x + width) x [y, y + height)"""
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px < self.right and self.y <= py < self.bottom

    def center(self) -> tuple[int, int]:
        return self.x + self.width // 2, self.y + self.height // 2


@dataclass(frozen=True)
class LayoutMetrics:
    # Desktop pixel defaults; the terminal preset overrides them from dashboard.yaml
    width: int = 380
    margin: int = 20
    spacing: int = 12

    # Calendar card
    calendar_height: int = 260
    header_height: int = 40
    nav_zone_width: int = 50
    grid_top: int = 70
    cell_height: int = 28

    # Task card (y values relative to the card top)
    add_zone_width: int = 50
    add_zone_height: int = 50
    task_list_offset: int = 55
    task_base_height: int = 120
    item_height: int = 35
    checkbox_x: int = 20
    checkbox_width: int = 24
    delete_inset: int = 35  # from the right edge
    delete_width: int = 20

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    def cell_width(self, container_width: int) -> int:
        return (container_width - 2 * self.margin) // 7

    @property
    def task_top(self) -> int:
        return self.calendar_height + self.spacing

    def task_card_height(self, visible_count: int) -> int:
        return self.task_base_height + visible_count * self.item_height

    def total_height(self, visible_count: int) -> int:
        return self.calendar_height + self.task_card_height(visible_count) + 2 * self.spacing
