"""
Pointer routing and the modal edit state.

The dashboard is always in exactly one of Idle, EditingNote or AddingTask.
While an edit is open every pointer event on the dashboard is suppressed;
while Idle a click resolves to exactly one action, first match wins:

    1. header arrow         -> NavigateMonth
    2. calendar day         -> OpenNote
    3. add-task button      -> OpenAddTask
    4. task checkbox        -> ToggleTask
    5. task trash (hovered) -> DeleteTask
    6. anything else        -> BeginDrag
"""
from __future__ import annotations
from dataclasses import dataclass
import datetime
import typing

from dashwidgets.core.calendar import CalendarEngine, CalendarGeometry
from dashwidgets.core.store import NoteStore, TaskStore
from dashwidgets.core.tasks import TaskListEngine, TaskListGeometry, TaskZone


@dataclass(frozen=True)
class Idle:
    @property
    def title(self) -> str:
        return ''


@dataclass(frozen=True)
class EditingNote:
    date: datetime.date
    text: str = ''

    @property
    def title(self) -> str:
        return self.date.strftime('Note for %B %d, %Y')


@dataclass(frozen=True)
class AddingTask:
    text: str = ''

    @property
    def title(self) -> str:
        return 'Add New Task'


EditState = typing.Union[Idle, EditingNote, AddingTask]


@dataclass(frozen=True)
class NavigateMonth:
    direction: int


@dataclass(frozen=True)
class OpenNote:
    date: datetime.date


@dataclass(frozen=True)
class OpenAddTask:
    pass


@dataclass(frozen=True)
class ToggleTask:
    index: int


@dataclass(frozen=True)
class DeleteTask:
    index: int


@dataclass(frozen=True)
class BeginDrag:
    pass


@dataclass(frozen=True)
class Suppressed:
    """Pointer input while an edit is open"""


Action = typing.Union[NavigateMonth, OpenNote, OpenAddTask, ToggleTask, DeleteTask, BeginDrag, Suppressed]


@dataclass(frozen=True)
class StateDelta:
    state: EditState
    cursor_changed: bool = False
    notes_changed: bool = False
    tasks_changed: bool = False
    resized: bool = False
    state_changed: bool = False
    begin_drag: bool = False
    saved: bool = True  # False if the store write failed


@dataclass(frozen=True)
class DashboardGeometry:
    width: int
    height: int
    calendar: CalendarGeometry
    tasks: TaskListGeometry


class InteractionRouter:
    def __init__(
            self,
            calendar: CalendarEngine,
            tasks: TaskListEngine,
            note_store: NoteStore,
            task_store: TaskStore,
            request_redraw: typing.Callable[[], None] | None = None
    ) -> None:
        self.calendar: CalendarEngine = calendar
        self.tasks: TaskListEngine = tasks
        self.note_store: NoteStore = note_store
        self.task_store: TaskStore = task_store
        self._request_redraw: typing.Callable[[], None] = request_redraw or (lambda: None)
        self._state: EditState = Idle()

    @property
    def state(self) -> EditState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return isinstance(self._state, Idle)

    @property
    def height(self) -> int:
        return self.calendar.metrics.total_height(self.tasks.visible_count)

    def geometry(self, container_width: int) -> DashboardGeometry:
        return DashboardGeometry(
            width=container_width,
            height=self.height,
            calendar=self.calendar.compute_grid_layout(container_width),
            tasks=self.tasks.layout(container_width),
        )

    def hit_test(self, x: float, y: float, container_width: int) -> Action:
        if not self.is_idle:
            return Suppressed()

        direction = self.calendar.hit_test_navigation(x, y, container_width)
        if direction is not None:
            return NavigateMonth(direction)

        day = self.calendar.hit_test_day(x, y, container_width)
        if day is not None:
            return OpenNote(self.calendar.date_for_day(day))

        if self.tasks.hit_test_add(x, y, container_width):
            return OpenAddTask()

        hit = self.tasks.hit_test_item(x, y, container_width)
        if hit is not None and hit.zone is TaskZone.CHECKBOX:
            return ToggleTask(hit.index)
        if hit is not None and hit.zone is TaskZone.DELETE:
            return DeleteTask(hit.index)

        return BeginDrag()

    def apply(self, action: Action) -> StateDelta:
        if isinstance(action, Suppressed) or not self.is_idle:
            return StateDelta(self._state)

        if isinstance(action, NavigateMonth):
            self.calendar.navigate_month(action.direction)
            return self._changed(StateDelta(self._state, cursor_changed=True))

        if isinstance(action, OpenNote):
            existing = self.calendar.note_for(action.date)
            self._state = EditingNote(action.date, existing.message if existing else '')
            return self._changed(StateDelta(self._state, state_changed=True))

        if isinstance(action, OpenAddTask):
            self._state = AddingTask()
            return self._changed(StateDelta(self._state, state_changed=True))

        if isinstance(action, ToggleTask):
            self.tasks.toggle_complete(action.index)
            saved = self.task_store.save(self.tasks.items)
            return self._changed(StateDelta(self._state, tasks_changed=True, saved=saved))

        if isinstance(action, DeleteTask):
            self.tasks.delete_task(action.index)
            saved = self.task_store.save(self.tasks.items)
            return self._changed(StateDelta(self._state, tasks_changed=True, resized=True, saved=saved))

        return StateDelta(self._state, begin_drag=True)

    def click(self, x: float, y: float, container_width: int) -> StateDelta:
        return self.apply(self.hit_test(x, y, container_width))

    def motion(self, x: float, y: float, container_width: int) -> bool:
        """Recompute hover; returns True if anything highlighted changed"""
        if not self.is_idle:
            return False
        before = (self.calendar.hovered_day, self.tasks.hovered_index)
        self.calendar.hover(x, y, container_width)
        self.tasks.hover(x, y, container_width)
        changed = before != (self.calendar.hovered_day, self.tasks.hovered_index)
        if changed:
            self._request_redraw()
        return changed

    def leave(self) -> None:
        self.calendar.clear_hover()
        self.tasks.clear_hover()
        self._request_redraw()

    def confirm(self, text: str) -> StateDelta:
        state = self._state
        text = text.strip()

        if isinstance(state, EditingNote):
            self._state = Idle()
            if text:
                self.calendar.set_note(state.date, text)
            else:
                self.calendar.remove_note(state.date)
            saved = self.note_store.save(self.calendar.notes)
            return self._changed(StateDelta(self._state, notes_changed=True, state_changed=True, saved=saved))

        if isinstance(state, AddingTask):
            self._state = Idle()
            if not self.tasks.add_task(text):
                return self._changed(StateDelta(self._state, state_changed=True))
            saved = self.task_store.save(self.tasks.items)
            return self._changed(StateDelta(
                self._state, tasks_changed=True, resized=True, state_changed=True, saved=saved
            ))

        return StateDelta(self._state)

    def cancel(self) -> StateDelta:
        if self.is_idle:
            return StateDelta(self._state)
        self._state = Idle()
        return self._changed(StateDelta(self._state, state_changed=True))

    def tick(self, today: datetime.date) -> None:
        """Once per second: refresh the today snapshot, never touches notes / tasks"""
        self.calendar.refresh_today(today)
        self._request_redraw()

    def _changed(self, delta: StateDelta) -> StateDelta:
        self._request_redraw()
        return delta
