"""
Date helpers.

Calendar dates travel as datetime.date inside the system and as
zero-padded YYYY-MM-DD strings on the wire. Ordering on date objects is
the same as lexicographic ordering on those strings, so either form can
be handed to the functions below.
"""

import calendar
from datetime import date, datetime
from typing import Iterable, Optional, TypeVar, Union

from guidetrack.models.reports import Period
from guidetrack.models.tour import TourEntry


DateLike = Union[date, str]

T = TypeVar("T")


def parse_date_string(value: DateLike) -> date:
    """Return value as a date, parsing YYYY-MM-DD strings."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def to_date_string(value: Union[date, datetime]) -> str:
    """
    Render a calendar instant as YYYY-MM-DD in the local time zone.

    Aware datetimes are converted to local time first; naive ones are
    taken as already local.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        value = value.date()
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def format_date(value: DateLike) -> str:
    """
    Re-render YYYY-MM-DD as DD.MM.YYYY.

    No validation: input that is not three dash-separated parts comes
    back malformed rather than raising.
    """
    return ".".join(reversed(str(value).split("-")))


def format_date_range(start: DateLike, end: DateLike) -> str:
    if str(start) == str(end):
        return format_date(start)
    return f"{format_date(start)} - {format_date(end)}"


def add_months(value: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def month_window(month_count: int, today: Optional[date] = None) -> list[tuple[int, int]]:
    """
    (year, month) pairs for the last month_count months, oldest first,
    ending with the month of today.
    """
    today = today or date.today()
    first = today.replace(day=1)
    return [
        (shifted.year, shifted.month)
        for shifted in (add_months(first, -offset) for offset in range(month_count - 1, -1, -1))
    ]


def item_date(item) -> date:
    """The date a tour or expense is bucketed by (tour start date / expense date)."""
    if isinstance(item, TourEntry):
        return item.start_date
    return item.date


def filter_by_month(items: Iterable[T], year: int, month: int) -> list[T]:
    """Keep items whose bucketing date falls in the given year and month (1-12)."""
    result = []
    for item in items:
        d = item_date(item)
        if d.year == year and d.month == month:
            result.append(item)
    return result


def filter_by_year(items: Iterable[T], year: int) -> list[T]:
    return [item for item in items if item_date(item).year == year]


def filter_by_period(
    items: Iterable[T],
    period: Period,
    today: Optional[date] = None,
) -> list[T]:
    """Apply the dashboard's month / year / all selection relative to today."""
    today = today or date.today()
    if period == Period.ALL:
        return list(items)
    if period == Period.YEAR:
        return filter_by_year(items, today.year)
    return filter_by_month(items, today.year, today.month)
