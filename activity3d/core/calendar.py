"""ISO calendar-week helpers shared by the fetcher and the aggregator."""

import math
import re
from collections.abc import Iterator
from datetime import date
from datetime import timedelta
from enum import IntEnum
from typing import NamedTuple

from activity3d.core.errors import DomainError

MAX_WINDOW_DAYS = 364

_DAY_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


class DateRange(NamedTuple):
    """Inclusive pair of calendar days."""

    start: date
    end: date


class YearWeek(NamedTuple):
    """ISO year and ISO week number, ordered as (year, week)."""

    year: int
    week: int


class Weekday(IntEnum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def of(cls, day: date) -> "Weekday":
        """Return the weekday of `day` as a days-since-Monday offset."""

        return cls(day.weekday())


def year_week(day: date) -> YearWeek:
    """Return the ISO-8601 week that owns `day`.

    Late December days can belong to week 1 of the following ISO year and
    early January days to the last week of the previous one.
    """

    iso = day.isocalendar()
    return YearWeek(iso.year, iso.week)


def parse_day(value: str) -> date:
    """Parse a strict `YYYY-MM-DD` string.

    Raises:
        ValueError: For any other shape, including the compact and week-date
            forms that `date.fromisoformat` also accepts.
    """

    if not isinstance(value, str) or not _DAY_PATTERN.fullmatch(value):
        raise ValueError(f"expected YYYY-MM-DD, got {value!r}")
    return date.fromisoformat(value)


def validate_date_range(date_range: DateRange) -> None:
    """Raise DomainError when the range ends before it starts."""

    if date_range.end < date_range.start:
        raise DomainError(
            f"date range ends before it starts: "
            f"{date_range.start.isoformat()} > {date_range.end.isoformat()}"
        )


def inclusive_day_count(date_range: DateRange) -> int:
    validate_date_range(date_range)
    return (date_range.end - date_range.start).days + 1


def number_of_weeks(date_range: DateRange) -> int:
    """Number of matrix rows: the inclusive day count divided by 7, rounded up."""

    return math.ceil(inclusive_day_count(date_range) / 7)


def weekly_stride(date_range: DateRange) -> Iterator[tuple[int, date]]:
    """Yield `(ordinal, day)` for each weekly step starting at `range.start`.

    The ordinal is the matrix row for the ISO week containing `day`.
    """

    for ordinal in range(number_of_weeks(date_range)):
        yield ordinal, date_range.start + timedelta(weeks=ordinal)


def trailing_range(days: int, today: date | None = None) -> DateRange:
    """Return the range covering `days` days before `today` up to `today`."""

    if not 0 <= days <= MAX_WINDOW_DAYS:
        raise DomainError(f"days must be between 0 and {MAX_WINDOW_DAYS}")
    end = today or date.today()
    return DateRange(end - timedelta(days=days), end)


def span_label(date_range: DateRange) -> str:
    """Format the range as `YYYY/M - YYYY/M` for display next to the model."""

    start, end = date_range
    return f"{start.year}/{start.month} - {end.year}/{end.month}"
