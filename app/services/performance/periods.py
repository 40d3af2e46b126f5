"""Reporting windows and the time buckets that subdivide them."""

from __future__ import annotations

import calendar
import enum
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, timedelta


class ReportPeriod(enum.Enum):
    weekly = "weekly"
    monthly = "monthly"
    quarterly = "quarterly"
    annual = "annual"


class InvalidDateRange(ValueError):
    pass


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    @property
    def length(self) -> int:
        return (self.end - self.start).days + 1

    def overlap(self, other: DateRange) -> DateRange | None:
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if end < start:
            return None
        return DateRange(start, end)

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class Bucket:
    label: str
    start: date
    end: date

    @property
    def range(self) -> DateRange:
        return DateRange(self.start, self.end)


def _end_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def month_range(key: str) -> DateRange:
    year, month = (int(part) for part in key.split("-"))
    return DateRange(date(year, month, 1), _end_of_month(year, month))


def months_in_range(date_range: DateRange) -> list[str]:
    keys = []
    year, month = date_range.start.year, date_range.start.month
    while (year, month) <= (date_range.end.year, date_range.end.month):
        keys.append(f"{year:04d}-{month:02d}")
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return keys


def default_range(period: ReportPeriod, anchor: date) -> DateRange:
    if period == ReportPeriod.weekly:
        start = anchor - timedelta(days=anchor.weekday())
        return DateRange(start, start + timedelta(days=6))
    if period == ReportPeriod.quarterly:
        first_month = 3 * ((anchor.month - 1) // 3) + 1
        return DateRange(date(anchor.year, first_month, 1), _end_of_month(anchor.year, first_month + 2))
    if period == ReportPeriod.annual:
        return DateRange(date(anchor.year, 1, 1), date(anchor.year, 12, 31))
    return DateRange(date(anchor.year, anchor.month, 1), _end_of_month(anchor.year, anchor.month))


def resolve_range(
    period: ReportPeriod,
    start_date: date | None = None,
    end_date: date | None = None,
    today: date | None = None,
) -> DateRange:
    """Explicit bounds win; a missing bound comes from the period window around the other one."""
    if start_date and end_date:
        start, end = start_date, end_date
    elif start_date:
        start, end = start_date, default_range(period, start_date).end
    elif end_date:
        start, end = default_range(period, end_date).start, end_date
    else:
        window = default_range(period, today or date.today())
        start, end = window.start, window.end
    if end < start:
        raise InvalidDateRange(f"end_date {end.isoformat()} is before start_date {start.isoformat()}")
    return DateRange(start, end)


def build_buckets(period: ReportPeriod, date_range: DateRange) -> list[Bucket]:
    """Split a range into contiguous display buckets.

    weekly -> one per day, monthly -> one per Monday-based week,
    quarterly/annual -> one per calendar month. Edge buckets are clipped to the range.
    """
    if period == ReportPeriod.weekly:
        return [Bucket(f"{day:%a} {day.month}/{day.day}", day, day) for day in date_range.days()]

    buckets: list[Bucket] = []
    if period == ReportPeriod.monthly:
        week_start = date_range.start - timedelta(days=date_range.start.weekday())
        index = 1
        while week_start <= date_range.end:
            week_end = week_start + timedelta(days=6)
            buckets.append(
                Bucket(f"Week {index}", max(week_start, date_range.start), min(week_end, date_range.end))
            )
            week_start = week_end + timedelta(days=1)
            index += 1
        return buckets

    for key in months_in_range(date_range):
        month = month_range(key)
        buckets.append(
            Bucket(
                f"{month.start:%b %Y}",
                max(month.start, date_range.start),
                min(month.end, date_range.end),
            )
        )
    return buckets
