import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from stay_calendar.domain.calendar import build_month_grid, same_month
from stay_calendar.domain.intervals import iter_days, overlaps_any
from stay_calendar.domain.selection import CalendarState, Mode, is_day_clickable


class DayStatus(str, Enum):
    AVAILABLE = "available"
    BLOCKED = "blocked"
    BOOKED = "booked"
    SELECTED = "selected"
    SELECTED_RANGE = "selected-range"
    DISABLED = "disabled"


@dataclass(frozen=True)
class CalendarCell:
    date: datetime.date
    in_current_month: bool
    status: DayStatus
    interactive: bool


def _hover_preview(
    state: CalendarState,
    day: datetime.date,
    mode: Mode,
    hover: Optional[datetime.date],
) -> bool:
    """Guest preview of the stay up to the hovered check-out. Never stored."""
    if mode is not Mode.GUEST or hover is None:
        return False
    start = state.selection_start
    if start is None or state.selection_end is not None or hover <= start:
        return False
    if not start < day <= hover:
        return False
    return not any(state.is_unavailable(d) for d in iter_days(start, day))


def classify_day(
    state: CalendarState,
    day: datetime.date,
    mode: Mode,
    today: datetime.date,
    hover: Optional[datetime.date] = None,
) -> DayStatus:
    start, end = state.selection_start, state.selection_end

    if start is not None and end is not None:
        if day in (start, end):
            return DayStatus.SELECTED
        if start < day < end:
            return DayStatus.SELECTED_RANGE
    elif start is not None and day == start:
        return DayStatus.SELECTED

    if _hover_preview(state, day, mode, hover):
        return DayStatus.SELECTED_RANGE

    if overlaps_any(state.blocked, day):
        return DayStatus.BLOCKED
    if overlaps_any(state.booked, day):
        return DayStatus.BOOKED

    if day < today:
        return DayStatus.DISABLED
    return DayStatus.AVAILABLE


def build_cells(
    state: CalendarState,
    mode: Mode,
    today: datetime.date,
    hover: Optional[datetime.date] = None,
) -> list[CalendarCell]:
    cells = []
    for day in build_month_grid(state.current_month):
        in_month = same_month(day, state.current_month)
        status = classify_day(state, day, mode, today, hover)
        interactive = is_day_clickable(state, day, today)
        cells.append(
            CalendarCell(
                date=day,
                in_current_month=in_month,
                status=status,
                interactive=interactive,
            )
        )
    return cells
