# tests/conftest.py

from __future__ import annotations

import datetime
from pathlib import Path

import pytest

import dashwidgets.config as packaged_config
from dashwidgets.core.base import ConfigLoader, LogMessages
from dashwidgets.core.calendar import CalendarEngine
from dashwidgets.core.dates import DisplayCursor
from dashwidgets.core.geometry import LayoutMetrics
from dashwidgets.core.router import InteractionRouter
from dashwidgets.core.store import NoteStore, TaskStore
from dashwidgets.core.tasks import TaskItem, TaskListEngine

# Fixed "today" so layouts are deterministic: Friday 15 March 2024
TODAY = datetime.date(2024, 3, 15)


class RedrawCounter:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


@pytest.fixture()
def metrics() -> LayoutMetrics:
    """Desktop pixel layout (width 380, 48 px cells)."""
    return LayoutMetrics()


@pytest.fixture()
def terminal_metrics() -> LayoutMetrics:
    """Terminal-cell layout shipped in the packaged dashboard.yaml."""
    loader = ConfigLoader(config_dir=Path(packaged_config.__file__).parent)
    return loader.load_dashboard_config(LogMessages()).layout


@pytest.fixture()
def log_messages() -> LogMessages:
    return LogMessages()


@pytest.fixture()
def note_store(tmp_path: Path, log_messages: LogMessages) -> NoteStore:
    return NoteStore(tmp_path / 'dashboard-notes.txt', log_messages)


@pytest.fixture()
def task_store(tmp_path: Path, log_messages: LogMessages) -> TaskStore:
    return TaskStore(tmp_path / 'dashboard-todos.txt', log_messages)


@pytest.fixture()
def calendar(metrics: LayoutMetrics) -> CalendarEngine:
    return CalendarEngine(metrics, today=TODAY, cursor=DisplayCursor(2024, 3))


@pytest.fixture()
def tasks(metrics: LayoutMetrics) -> TaskListEngine:
    return TaskListEngine(metrics, [TaskItem(f'task {i}') for i in range(3)])


@pytest.fixture()
def redraw() -> RedrawCounter:
    return RedrawCounter()


@pytest.fixture()
def router(
    calendar: CalendarEngine,
    tasks: TaskListEngine,
    note_store: NoteStore,
    task_store: TaskStore,
    redraw: RedrawCounter,
) -> InteractionRouter:
    return InteractionRouter(calendar, tasks, note_store, task_store, request_redraw=redraw)
