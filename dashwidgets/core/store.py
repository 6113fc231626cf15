"""
Flat-file stores for notes and tasks.

One record per line, fields joined by DELIMITER. The delimiter is not
escaped: a record is split at most FIELD_COUNT - 1 times, so it may appear
in the last field, but anywhere else it breaks the record on the next load.
"""
from __future__ import annotations
from pathlib import Path
import datetime
import typing

from dashwidgets.core.base import LogMessages
from dashwidgets.core.calendar import CalendarNote
from dashwidgets.core.tasks import TaskItem

DELIMITER: str = '|'
FIELD_COUNT: int = 3
NOTES_FILE_NAME: str = 'dashboard-notes.txt'
TODOS_FILE_NAME: str = 'dashboard-todos.txt'

T = typing.TypeVar('T')


def format_flag(value: bool) -> str:
    return '1' if value else '0'


def parse_flag(value: str) -> bool:
    return value == '1'


class FlatFileStore(typing.Generic[T]):
    def __init__(self, path: Path, log_messages: LogMessages | None = None) -> None:
        self.path: Path = path
        self.log_messages: LogMessages = log_messages if log_messages is not None else LogMessages()

    def parse_record(self, fields: list[str]) -> T:
        raise NotImplementedError

    def format_record(self, item: T) -> list[str]:
        raise NotImplementedError

    def load(self) -> list[T]:
        try:
            with open(self.path, 'r', encoding='utf-8') as file:
                lines = file.read().splitlines()
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as e:
            self.log_messages.warning(f'Could not read "{self.path}": {e}')
            return []

        items: list[T] = []
        for line_number, line in enumerate(lines, start=1):
            if not line:
                continue
            fields = line.split(DELIMITER, FIELD_COUNT - 1)
            if len(fields) != FIELD_COUNT:
                self.log_messages.debug(f'Skipped malformed line {line_number} in "{self.path}"')
                continue
            try:
                items.append(self.parse_record(fields))
            except ValueError:
                self.log_messages.debug(f'Skipped malformed line {line_number} in "{self.path}"')
        return items

    def save(self, items: typing.Iterable[T]) -> bool:
        """Rewrite the whole file, returns False (and logs) if it could not be written"""
        content = ''.join(DELIMITER.join(self.format_record(item)) + '\n' for item in items)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as file:
                file.write(content)
        except OSError as e:
            self.log_messages.warning(f'Could not write "{self.path}": {e}')
            return False
        return True


class NoteStore(FlatFileStore[CalendarNote]):
    """date | important | message"""

    def parse_record(self, fields: list[str]) -> CalendarNote:
        date, important, message = fields
        return CalendarNote(datetime.date.fromisoformat(date), message, parse_flag(important))

    def format_record(self, item: CalendarNote) -> list[str]:
        return [item.date.isoformat(), format_flag(item.important), item.message]


class TaskStore(FlatFileStore[TaskItem]):
    """completed | time | text"""

    def parse_record(self, fields: list[str]) -> TaskItem:
        completed, time, text = fields
        return TaskItem(text, parse_flag(completed), time)

    def format_record(self, item: TaskItem) -> list[str]:
        return [format_flag(item.completed), item.time, item.text]


def open_stores(
        data_dir: Path,
        log_messages: LogMessages,
        notes_file: str | None = None,
        todos_file: str | None = None
) -> tuple[NoteStore, TaskStore]:
    return (
        NoteStore(data_dir / (notes_file or NOTES_FILE_NAME), log_messages),
        TaskStore(data_dir / (todos_file or TODOS_FILE_NAME), log_messages),
    )
