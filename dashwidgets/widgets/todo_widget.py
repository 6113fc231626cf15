from dashwidgets.core.base import BaseConfig
from dashwidgets.core.tasks import TaskListGeometry, TaskRow
from dashwidgets.core.terminal import (
    Canvas,
    CursesBold,
    CursesDim,
    CursesReverse,
    convert_color_number_to_curses_pair,
    draw_box,
    safe_addstr,
)

TITLE: str = 'Tasks'
EMPTY_MESSAGE: str = 'No tasks yet'


def render_row(row: TaskRow, text_width: int) -> tuple[str, str]:
    checkbox = '[x]' if row.item.completed else '[ ]'
    text = row.item.text
    if row.item.time:
        text = f'{text} ({row.item.time})'
    if len(text) > text_width:
        text = text[:max(0, text_width - 1)] + '…'
    return checkbox, text


def draw(canvas: Canvas, geometry: TaskListGeometry, base_config: BaseConfig) -> None:
    draw_box(canvas, geometry.card)

    safe_addstr(canvas, geometry.card.y + 1, geometry.card.x + 2, TITLE, CursesBold)
    safe_addstr(
        canvas, geometry.add_zone.y + 1, geometry.add_zone.x + 1, '+',
        convert_color_number_to_curses_pair(base_config.PRIMARY_PAIR_NUMBER) | CursesBold
    )

    if geometry.is_empty:
        safe_addstr(
            canvas, geometry.card.y + 2, geometry.card.x + 2, EMPTY_MESSAGE,
            convert_color_number_to_curses_pair(base_config.SECONDARY_PAIR_NUMBER)
        )
        return

    for row in geometry.rows:
        text_x = row.checkbox.right
        text_end = row.delete.x if row.delete is not None else row.rect.right - 1
        checkbox, text = render_row(row, text_end - text_x - 1)

        text_attributes = CursesDim if row.item.completed else 0
        if row.hovered:
            text_attributes |= CursesReverse

        safe_addstr(canvas, row.rect.y, row.checkbox.x, checkbox)
        safe_addstr(canvas, row.rect.y, text_x, text, text_attributes)
        if row.delete is not None:
            safe_addstr(
                canvas, row.rect.y, row.delete.x, 'x',
                convert_color_number_to_curses_pair(base_config.DANGER_PAIR_NUMBER) | CursesBold
            )

    if geometry.hidden_count:
        last = geometry.rows[-1].rect
        safe_addstr(
            canvas, last.bottom, last.x + 2, f'+{geometry.hidden_count} more',
            convert_color_number_to_curses_pair(base_config.SECONDARY_PAIR_NUMBER)
        )
