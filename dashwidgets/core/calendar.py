from __future__ import annotations
from dataclasses import dataclass
import datetime

from dashwidgets.core.dates import DisplayCursor, navigate_month
from dashwidgets.core.geometry import LayoutMetrics, Rect

GRID_COLUMNS: int = 7
GRID_ROWS: int = 6


@dataclass(frozen=True)
class CalendarNote:
    date: datetime.date
    message: str
    important: bool = False  # persisted, never consulted


@dataclass(frozen=True)
class DayCell:
    day: int
    row: int
    col: int
    rect: Rect
    is_today: bool
    has_note: bool
    hovered: bool


@dataclass(frozen=True)
class CalendarGeometry:
    cursor: DisplayCursor
    title: str
    card: Rect
    prev_zone: Rect
    next_zone: Rect
    grid: Rect
    cell_width: int
    cell_height: int
    first_weekday: int
    days: int
    cells: tuple[DayCell, ...]


class CalendarEngine:
    def __init__(
            self,
            metrics: LayoutMetrics,
            notes: list[CalendarNote] | None = None,
            today: datetime.date | None = None,
            cursor: DisplayCursor | None = None
    ) -> None:
        self.metrics: LayoutMetrics = metrics
        self.today: datetime.date = today if today is not None else datetime.date.today()
        self.cursor: DisplayCursor = cursor if cursor is not None else DisplayCursor.from_date(self.today)
        self.hovered_day: int | None = None

        self._notes: dict[datetime.date, CalendarNote] = {}
        for note in notes or []:
            self._insert(note)

    @property
    def notes(self) -> list[CalendarNote]:
        return list(self._notes.values())

    def _insert(self, note: CalendarNote) -> None:
        # remove-then-insert keeps one note per date, newest last
        self._notes.pop(note.date, None)
        self._notes[note.date] = note

    def note_for(self, date: datetime.date) -> CalendarNote | None:
        return self._notes.get(date)

    def has_note(self, date: datetime.date) -> bool:
        return date in self._notes

    def set_note(self, date: datetime.date, message: str) -> CalendarNote:
        existing = self._notes.get(date)
        note = CalendarNote(date, message, existing.important if existing else False)
        self._insert(note)
        return note

    def remove_note(self, date: datetime.date) -> bool:
        return self._notes.pop(date, None) is not None

    def refresh_today(self, today: datetime.date) -> bool:
        changed = today != self.today
        self.today = today
        return changed

    def navigate_month(self, direction: int) -> DisplayCursor:
        self.cursor = navigate_month(self.cursor, direction)
        self.hovered_day = None
        return self.cursor

    def date_for_day(self, day: int) -> datetime.date:
        return datetime.date(self.cursor.year, self.cursor.month, day)

    def grid_rect(self, container_width: int) -> Rect:
        m = self.metrics
        cell_width = m.cell_width(container_width)
        return Rect(m.margin, m.grid_top, GRID_COLUMNS * cell_width, GRID_ROWS * m.cell_height)

    def compute_grid_layout(self, container_width: int) -> CalendarGeometry:
        m = self.metrics
        cell_width = m.cell_width(container_width)
        grid = self.grid_rect(container_width)
        first_weekday = self.cursor.first_weekday
        days = self.cursor.days

        cells: list[DayCell] = []
        for day in range(1, days + 1):
            pos = day - 1 + first_weekday
            row, col = divmod(pos, GRID_COLUMNS)
            date = self.date_for_day(day)
            cells.append(DayCell(
                day=day,
                row=row,
                col=col,
                rect=Rect(grid.x + col * cell_width, grid.y + row * m.cell_height, cell_width, m.cell_height),
                is_today=date == self.today,
                has_note=self.has_note(date),
                hovered=day == self.hovered_day,
            ))

        return CalendarGeometry(
            cursor=self.cursor,
            title=self.cursor.title,
            card=Rect(0, 0, container_width, m.calendar_height),
            prev_zone=Rect(0, 0, m.nav_zone_width, m.header_height),
            next_zone=Rect(container_width - m.nav_zone_width, 0, m.nav_zone_width, m.header_height),
            grid=grid,
            cell_width=cell_width,
            cell_height=m.cell_height,
            first_weekday=first_weekday,
            days=days,
            cells=tuple(cells),
        )

    def hit_test_navigation(self, x: float, y: float, container_width: int) -> int | None:
        m = self.metrics
        if not 0 <= y < m.header_height:
            return None
        if 0 <= x < m.nav_zone_width:
            return -1
        if container_width - m.nav_zone_width <= x < container_width:
            return 1
        return None

    def hit_test_day(self, x: float, y: float, container_width: int) -> int | None:
        grid = self.grid_rect(container_width)
        if grid.width <= 0 or not grid.contains(x, y):
            return None

        col = int((x - grid.x) // (grid.width // GRID_COLUMNS))
        row = int((y - grid.y) // self.metrics.cell_height)
        day = row * GRID_COLUMNS + col - self.cursor.first_weekday + 1
        if 1 <= day <= self.cursor.days:
            return day
        return None

    def hover(self, x: float, y: float, container_width: int) -> int | None:
        self.hovered_day = self.hit_test_day(x, y, container_width)
        return self.hovered_day

    def clear_hover(self) -> None:
        self.hovered_day = None
