import calendar
import datetime
from zoneinfo import ZoneInfo


def month_bounds(current_month: datetime.date) -> tuple[datetime.date, datetime.date]:
    """First and last calendar day of the month containing current_month."""
    _, days_in_month = calendar.monthrange(current_month.year, current_month.month)
    month_start = current_month.replace(day=1)
    return month_start, month_start.replace(day=days_in_month)


def build_month_grid(current_month: datetime.date) -> list[datetime.date]:
    """
    Dates for a week-aligned, Monday-first grid of the month.

    Starts on the Monday on/before the 1st and ends on the Sunday on/after
    the last day, so leading and trailing days of adjacent months are
    included and the length is always a multiple of 7.
    """
    month_start, month_end = month_bounds(current_month)
    grid_start = month_start - datetime.timedelta(days=month_start.weekday())
    grid_end = month_end + datetime.timedelta(days=6 - month_end.weekday())

    days = (grid_end - grid_start).days + 1
    return [grid_start + datetime.timedelta(days=i) for i in range(days)]


def previous_month(month: datetime.date) -> datetime.date:
    month_start, _ = month_bounds(month)
    return (month_start - datetime.timedelta(days=1)).replace(day=1)


def next_month(month: datetime.date) -> datetime.date:
    _, month_end = month_bounds(month)
    return month_end + datetime.timedelta(days=1)


def same_month(a: datetime.date, b: datetime.date) -> bool:
    return a.year == b.year and a.month == b.month


def local_today(tz_name: str) -> datetime.date:
    """Today's calendar day where the property is."""
    return datetime.datetime.now(ZoneInfo(tz_name)).date()
