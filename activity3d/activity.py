from collections.abc import Iterable
from collections.abc import Mapping
from datetime import date
from types import MappingProxyType

from activity3d.core.calendar import DateRange
from activity3d.core.calendar import Weekday
from activity3d.core.calendar import YearWeek
from activity3d.core.calendar import number_of_weeks
from activity3d.core.calendar import validate_date_range
from activity3d.core.calendar import weekly_stride
from activity3d.core.calendar import year_week
from activity3d.core.errors import DomainError


class Activity:
    """Contribution counts for a date range bucketed by ISO week and weekday.

    Every ISO week touched by the range is a key of `contributions`, possibly
    with an empty inner mapping. Weekdays without contributions are absent
    from the inner mapping, which means zero.

    Build instances with `from_days`. The constructor only checks that
    week keys lie within the range and that counts are not negative.
    """

    def __init__(
        self,
        date_range: DateRange,
        contributions: Mapping[YearWeek, Mapping[Weekday, int]],
        skipped_days: int = 0,
    ) -> None:
        validate_date_range(date_range)
        first_week = year_week(date_range[0])
        last_week = year_week(date_range[1])
        for week, days in contributions.items():
            if not first_week <= week <= last_week:
                raise DomainError(f"week {tuple(week)} is outside the date range")
            for weekday, count in days.items():
                if count < 0:
                    raise DomainError(
                        f"negative count {count} for {Weekday(weekday).name} of week {tuple(week)}"
                    )
        self._date_range = DateRange(*date_range)
        self._contributions = MappingProxyType(
            {
                week: MappingProxyType(dict(days))
                for week, days in sorted(contributions.items())
            }
        )
        self._skipped_days = skipped_days

    @classmethod
    def from_days(
        cls,
        date_range: DateRange,
        days: Iterable[tuple[date, int]],
        skipped_days: int = 0,
    ) -> "Activity":
        """Bucket `(day, count)` pairs into ISO weeks.

        All weeks of the range are created first so weeks without any
        contribution still get a key. Counts for the same day are added
        together. Days outside the range and non-positive counts are ignored.
        """

        validate_date_range(date_range)
        buckets: dict[YearWeek, dict[Weekday, int]] = {}
        for _, day in weekly_stride(date_range):
            buckets.setdefault(year_week(day), {})
        # the stride can step past the ISO week holding the last day
        buckets.setdefault(year_week(date_range.end), {})

        for day, count in days:
            if count <= 0:
                continue
            if not date_range.start <= day <= date_range.end:
                continue
            week_days = buckets.setdefault(year_week(day), {})
            weekday = Weekday.of(day)
            week_days[weekday] = week_days.get(weekday, 0) + count

        return cls(date_range, buckets, skipped_days=skipped_days)

    @property
    def date_range(self) -> DateRange:
        return self._date_range

    @property
    def contributions(self) -> Mapping[YearWeek, Mapping[Weekday, int]]:
        return self._contributions

    @property
    def skipped_days(self) -> int:
        """Number of records dropped because their date could not be parsed."""

        return self._skipped_days

    @property
    def number_of_weeks(self) -> int:
        return number_of_weeks(self._date_range)

    @property
    def total(self) -> int:
        return sum(sum(days.values()) for days in self._contributions.values())

    def as_matrix(self) -> list[list[int]]:
        """Return a dense `number_of_weeks x 7` matrix of counts.

        Rows follow the weekly walk from the start of the range, so row `i`
        is the ISO week `i` strides after the first one, regardless of its
        ISO week number or year. Columns are Monday (0) to Sunday (6).
        """

        matrix = [[0] * len(Weekday) for _ in range(self.number_of_weeks)]
        for row, day in weekly_stride(self._date_range):
            week_days = self._contributions.get(year_week(day))
            if week_days is None:
                continue
            for weekday, count in week_days.items():
                matrix[row][weekday] = count
        return matrix

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly view of the activity."""

        return {
            "from": self._date_range.start.isoformat(),
            "to": self._date_range.end.isoformat(),
            "total": self.total,
            "skipped_days": self._skipped_days,
            "weeks": [
                {
                    "year": week.year,
                    "week": week.week,
                    "days": {
                        weekday.name.lower(): count
                        for weekday, count in sorted(days.items())
                    },
                }
                for week, days in self._contributions.items()
            ],
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Activity):
            return NotImplemented
        return (
            self._date_range == other._date_range
            and self._contributions == other._contributions
        )

    def __repr__(self) -> str:
        return (
            f"Activity(date_range={self._date_range!r}, "
            f"weeks={len(self._contributions)}, total={self.total})"
        )
