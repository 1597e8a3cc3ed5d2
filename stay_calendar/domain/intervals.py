"""
Closed calendar-day ranges and the predicates the calendar is built on.

Both ends of a range are inclusive: a block from the 5th to the 8th makes
four days unavailable.
"""
import datetime
from dataclasses import dataclass
from typing import Iterable, Iterator, Protocol

WIRE_DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class DateRange:
    start_date: datetime.date
    end_date: datetime.date

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise ValueError(
                f"end_date must not precede start_date: {self.start_date} > {self.end_date}"
            )

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.end_date - self.start_date).days + 1

    def __str__(self) -> str:
        return f"{format_date(self.start_date)} → {format_date(self.end_date)}"


class HasDateRange(Protocol):
    @property
    def date_range(self) -> DateRange: ...


def _as_range(value: DateRange | HasDateRange) -> DateRange:
    if isinstance(value, DateRange):
        return value
    return value.date_range


def contains(date_range: DateRange | HasDateRange, day: datetime.date) -> bool:
    r = _as_range(date_range)
    return r.start_date <= day <= r.end_date


def overlaps_any(ranges: Iterable[DateRange | HasDateRange], day: datetime.date) -> bool:
    return any(contains(r, day) for r in ranges)


def iter_days(start: datetime.date, end: datetime.date) -> Iterator[datetime.date]:
    """Yield every calendar day from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += datetime.timedelta(days=1)


def range_overlaps_unavailable(
    start: datetime.date,
    end: datetime.date,
    blocked: Iterable[DateRange | HasDateRange],
    booked: Iterable[DateRange | HasDateRange],
) -> bool:
    """
    True if any day of [start, end] is blocked or booked.

    Linear in the length of the range; selections are days, not years.
    """
    unavailable = [_as_range(r) for r in blocked] + [_as_range(r) for r in booked]
    return any(overlaps_any(unavailable, day) for day in iter_days(start, end))


def day_difference(end: datetime.date, start: datetime.date) -> int:
    return (end - start).days


def parse_date(value: str) -> datetime.date:
    """Parse a YYYY-MM-DD wire date. Raises ValueError on anything else."""
    return datetime.datetime.strptime(value, WIRE_DATE_FORMAT).date()


def format_date(value: datetime.date) -> str:
    return value.strftime(WIRE_DATE_FORMAT)
