from dashwidgets.core.base import BaseConfig
from dashwidgets.core.calendar import CalendarGeometry, DayCell
from dashwidgets.core.dates import WEEKDAY_LABELS
from dashwidgets.core.terminal import (
    Canvas,
    CursesBold,
    CursesReverse,
    convert_color_number_to_curses_pair,
    draw_box,
    safe_addstr,
)


def day_attributes(cell: DayCell, base_config: BaseConfig) -> int:
    if cell.is_today:
        return convert_color_number_to_curses_pair(base_config.PRIMARY_PAIR_NUMBER) | CursesReverse | CursesBold
    attributes = 0
    if cell.has_note:
        attributes |= convert_color_number_to_curses_pair(base_config.PRIMARY_PAIR_NUMBER) | CursesBold
    if cell.hovered:
        attributes |= CursesReverse
    return attributes


def draw(canvas: Canvas, geometry: CalendarGeometry, base_config: BaseConfig) -> None:
    draw_box(canvas, geometry.card)

    # Header: arrows and month title
    header_y = geometry.prev_zone.bottom - 1
    arrow_color = convert_color_number_to_curses_pair(base_config.SECONDARY_PAIR_NUMBER)
    safe_addstr(canvas, header_y, geometry.prev_zone.x + 1, '<', arrow_color)
    safe_addstr(canvas, header_y, geometry.next_zone.right - 2, '>', arrow_color)
    title_x = max(geometry.card.x + 1, geometry.card.x + (geometry.card.width - len(geometry.title)) // 2)
    safe_addstr(canvas, header_y, title_x, geometry.title, CursesBold)

    # Weekday labels sit on the line above the grid
    for col, label in enumerate(WEEKDAY_LABELS):
        x = geometry.grid.x + col * geometry.cell_width + (geometry.cell_width - len(label)) // 2
        safe_addstr(canvas, geometry.grid.y - 1, x, label, arrow_color)

    for cell in geometry.cells:
        text = f'{cell.day:>2}'
        x = cell.rect.x + (cell.rect.width - len(text)) // 2
        safe_addstr(canvas, cell.rect.y, x, text, day_attributes(cell, base_config))
