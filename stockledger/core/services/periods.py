"""
Calendar period calculations.

All windows are built from calendar dates in local time and cover whole days:
a window runs from 00:00 of its first day to 23:59:59.999999 of its last day,
and membership is tested with an inclusive upper bound. Aware timestamps are
converted to local time before comparison; naive ones are taken as local.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date, datetime, time, timedelta

from stockledger.core.exceptions import InvalidPeriodError

_YEAR_MONTH_RE = re.compile(r"^\s*(\d{4})-(\d{1,2})\s*$")


@dataclass(frozen=True)
class PeriodWindow:
    """Inclusive run of whole local days."""

    first_day: date
    last_day: date
    label: str = ""

    @property
    def start(self) -> datetime:
        return datetime.combine(self.first_day, time.min)

    @property
    def end(self) -> datetime:
        return datetime.combine(self.last_day, time.max)

    @property
    def days(self) -> int:
        return (self.last_day - self.first_day).days + 1

    def contains(self, moment: datetime) -> bool:
        return self.start <= to_local(moment) <= self.end


@dataclass(frozen=True)
class WeekBucket(PeriodWindow):
    """Monday-start week clipped to its month.

    ``week_start`` is the unclipped Monday; ``first_day`` is the display start.
    """

    week_start: date | None = None


def to_local(moment: datetime) -> datetime:
    """Naive local wall-clock time for ``moment``."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def local_day(moment: datetime) -> date:
    return to_local(moment).date()


def validate_year_month(year: int, month: int) -> None:
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"{year}-{month}", "month must be within 1..12")
    if not MINYEAR <= year <= MAXYEAR:
        raise InvalidPeriodError(
            f"{year}-{month}", f"year must be within {MINYEAR}..{MAXYEAR}"
        )


def parse_year_month(value: str) -> tuple[int, int]:
    """Parse ``YYYY-MM`` into ``(year, month)``."""
    match = _YEAR_MONTH_RE.match(value or "")
    if match is None:
        raise InvalidPeriodError(value, "expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    validate_year_month(year, month)
    return year, month


def format_year_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def month_bounds(year: int, month: int) -> PeriodWindow:
    """Whole calendar month, end inclusive."""
    validate_year_month(year, month)
    last = calendar.monthrange(year, month)[1]
    return PeriodWindow(
        first_day=date(year, month, 1),
        last_day=date(year, month, last),
        label=format_year_month(year, month),
    )


def previous_month(year: int, month: int) -> tuple[int, int]:
    validate_year_month(year, month)
    if month == 1:
        if year == MINYEAR:
            raise InvalidPeriodError(
                format_year_month(year, month), "no month precedes the calendar start"
            )
        return year - 1, 12
    return year, month - 1


def previous_month_bounds(year: int, month: int) -> PeriodWindow:
    """Bounds of the calendar month before ``year-month``."""
    return month_bounds(*previous_month(year, month))


def week_start(day: date) -> date:
    """Monday on or before ``day``."""
    return day - timedelta(days=day.weekday())


def week_buckets(year: int, month: int) -> list[WeekBucket]:
    """
    Monday-start weeks overlapping the month, clipped to it.

    The first bucket begins at the Monday on or before the 1st (displayed
    from the 1st); each following bucket starts exactly 7 days later; the
    last one is clipped to the month's final day. Yields 4 to 6 buckets.
    """
    month_window = month_bounds(year, month)
    buckets: list[WeekBucket] = []

    current = week_start(month_window.first_day)
    while True:
        # Offsets are measured against the last day so December 9999 never
        # steps past date.max
        remaining = (month_window.last_day - current).days
        display_start = max(current, month_window.first_day)
        display_end = current + timedelta(days=min(6, remaining))
        buckets.append(
            WeekBucket(
                first_day=display_start,
                last_day=display_end,
                label=f"{display_start.month}/{display_start.day}",
                week_start=current,
            )
        )
        if remaining < 7:
            break
        current += timedelta(days=7)

    return buckets


def day_buckets(year: int, month: int) -> list[PeriodWindow]:
    """One window per calendar day of the month, ascending."""
    month_window = month_bounds(year, month)
    return [
        PeriodWindow(
            first_day=day,
            last_day=day,
            label=day.isoformat(),
        )
        for day in (
            month_window.first_day + timedelta(days=offset)
            for offset in range(month_window.days)
        )
    ]
