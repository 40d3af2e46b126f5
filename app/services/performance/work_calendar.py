from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from app.services.performance.periods import DateRange

DEFAULT_WORKING_DAYS = (1, 2, 3, 4, 5)


def weekday_number(day: date) -> int:
    """Sunday-based weekday number (0=Sunday .. 6=Saturday)."""
    return (day.weekday() + 1) % 7


@dataclass(frozen=True)
class WorkCalendar:
    working_days_of_week: tuple[int, ...] = DEFAULT_WORKING_DAYS
    holidays: frozenset[date] = field(default_factory=frozenset)

    @classmethod
    def build(cls, working_days_of_week: Iterable[int] | None = None, holidays: Iterable[date] = ()) -> WorkCalendar:
        days = tuple(sorted(set(working_days_of_week))) if working_days_of_week is not None else DEFAULT_WORKING_DAYS
        return cls(working_days_of_week=days, holidays=frozenset(holidays))

    def is_working_day(self, day: date) -> bool:
        return weekday_number(day) in self.working_days_of_week and day not in self.holidays

    def working_dates(self, date_range: DateRange) -> list[date]:
        return [day for day in date_range.days() if self.is_working_day(day)]

    def working_days(self, date_range: DateRange) -> int:
        return len(self.working_dates(date_range))
