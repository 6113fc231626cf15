"""Gregorian calendar helpers shared by layout and hit-testing."""
from __future__ import annotations
from dataclasses import dataclass
import datetime

WEEKDAY_LABELS: tuple[str, ...] = ('S', 'M', 'T', 'W', 'T', 'F', 'S')  # Sunday first


def roll_month(year: int, month: int, direction: int) -> tuple[int, int]:
    """Shift (year, month) by `direction` months, carrying into the year"""
    new_year, month_index = divmod(year * 12 + (month - 1) + direction, 12)
    return new_year, month_index + 1


def days_in_month(year: int, month: int) -> int:
    # Day 0 of the next month is the last day of this one
    next_year, next_month = roll_month(year, month, 1)
    return (datetime.date(next_year, next_month, 1) - datetime.timedelta(days=1)).day


def first_weekday(year: int, month: int) -> int:
    """Weekday of day 1, 0 = Sunday .. 6 = Saturday"""
    return (datetime.date(year, month, 1).weekday() + 1) % 7


@dataclass(frozen=True)
class DisplayCursor:
    year: int
    month: int  # 1 = January

    @classmethod
    def from_date(cls, date: datetime.date) -> DisplayCursor:
        return cls(date.year, date.month)

    @property
    def first_day(self) -> datetime.date:
        return datetime.date(self.year, self.month, 1)

    @property
    def days(self) -> int:
        return days_in_month(self.year, self.month)

    @property
    def first_weekday(self) -> int:
        return first_weekday(self.year, self.month)

    @property
    def title(self) -> str:
        return self.first_day.strftime('%B %Y')


def navigate_month(cursor: DisplayCursor, direction: int) -> DisplayCursor:
    return DisplayCursor(*roll_month(cursor.year, cursor.month, direction))
