# tests/test_store.py

from __future__ import annotations

import datetime
from pathlib import Path

from dashwidgets.core.base import LogLevels, LogMessages
from dashwidgets.core.calendar import CalendarNote
from dashwidgets.core.store import NoteStore, TaskStore, open_stores
from dashwidgets.core.tasks import TaskItem


def test_missing_file_loads_empty(note_store: NoteStore, task_store: TaskStore, log_messages: LogMessages) -> None:
    assert note_store.load() == []
    assert task_store.load() == []
    assert log_messages.is_empty()


def test_note_save_then_load(note_store: NoteStore) -> None:
    notes = [
        CalendarNote(datetime.date(2024, 3, 5), 'dentist at 9'),
        CalendarNote(datetime.date(2024, 12, 31), 'party', important=True),
    ]

    assert note_store.save(notes) is True
    assert note_store.load() == notes
    assert note_store.path.read_text(encoding='utf-8') == (
        '2024-03-05|0|dentist at 9\n'
        '2024-12-31|1|party\n'
    )


def test_task_save_then_load(task_store: TaskStore) -> None:
    items = [
        TaskItem('write report', completed=True, time='10:00'),
        TaskItem('buy milk'),
    ]

    assert task_store.save(items) is True
    assert task_store.load() == items
    assert task_store.path.read_text(encoding='utf-8') == '1|10:00|write report\n0||buy milk\n'


def test_save_overwrites_whole_file(task_store: TaskStore) -> None:
    task_store.save([TaskItem('a'), TaskItem('b')])
    task_store.save([TaskItem('c')])

    assert task_store.load() == [TaskItem('c')]


def test_malformed_lines_are_skipped(note_store: NoteStore, log_messages: LogMessages) -> None:
    note_store.path.write_text(
        '2024-03-05|0|good\n'
        'no delimiters here\n'
        '\n'
        '2024-03-06|1\n'
        'not-a-date|0|bad date\n'
        '2024-03-07|1|also good\n',
        encoding='utf-8',
    )

    notes = note_store.load()

    assert [note.message for note in notes] == ['good', 'also good']
    assert not log_messages.contains_error()
    assert all(message.level == LogLevels.DEBUG.key for message in log_messages.log_messages)


def test_delimiter_in_last_field_survives(note_store: NoteStore, task_store: TaskStore) -> None:
    note = CalendarNote(datetime.date(2024, 3, 5), 'a|b')
    note_store.save([note])
    assert note_store.load() == [note]

    # The time field is not last: the record comes back shifted
    task_store.save([TaskItem('text', time='9|30')])
    assert task_store.load() == [TaskItem('30|text', time='9')]


def test_write_failure_is_logged_not_raised(tmp_path: Path, log_messages: LogMessages) -> None:
    blocker = tmp_path / 'not-a-dir'
    blocker.write_text('', encoding='utf-8')
    store = TaskStore(blocker / 'dashboard-todos.txt', log_messages)

    assert store.save([TaskItem('x')]) is False
    assert len(log_messages) == 1
    assert log_messages.log_messages[0].level == LogLevels.WARNING.key


def test_save_creates_data_directory(tmp_path: Path) -> None:
    store = NoteStore(tmp_path / 'nested' / 'dir' / 'notes.txt')

    assert store.save([]) is True
    assert store.path.exists()


def test_open_stores_uses_default_names(tmp_path: Path, log_messages: LogMessages) -> None:
    note_store, task_store = open_stores(tmp_path, log_messages)
    assert note_store.path == tmp_path / 'dashboard-notes.txt'
    assert task_store.path == tmp_path / 'dashboard-todos.txt'

    note_store, task_store = open_stores(tmp_path, log_messages, 'n.txt', 't.txt')
    assert note_store.path == tmp_path / 'n.txt'
    assert task_store.path == tmp_path / 't.txt'
    assert note_store.log_messages is log_messages


def test_unreadable_file_loads_empty_with_warning(note_store: NoteStore, log_messages: LogMessages) -> None:
    note_store.path.write_bytes(b'2024-03-05|0|caf\xe9 \xff\xfe\n')

    assert note_store.load() == []
    assert len(log_messages) == 1
    assert log_messages.log_messages[0].level == LogLevels.WARNING.key
    assert 'Could not read' in str(log_messages.log_messages[0])
