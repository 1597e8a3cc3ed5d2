"""
Date-range selection for the availability calendar.

The calendar is driven by a single pure function, ``reduce(state, event, mode)``.
Owners select a range to block (a single day is allowed); guests select a
check-in and a later check-out with no unavailable day in between.
"""
import datetime
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Union

from stay_calendar.domain.calendar import month_bounds, same_month
from stay_calendar.domain.intervals import (
    DateRange,
    HasDateRange,
    overlaps_any,
    range_overlaps_unavailable,
)


class Mode(str, Enum):
    OWNER = "owner"
    GUEST = "guest"


@dataclass(frozen=True)
class CalendarState:
    current_month: datetime.date
    selection_start: Optional[datetime.date] = None
    selection_end: Optional[datetime.date] = None
    blocked: tuple[HasDateRange, ...] = field(default_factory=tuple)
    booked: tuple[HasDateRange, ...] = field(default_factory=tuple)
    loading: bool = True
    unavailable: bool = False
    reason: str = ""

    @property
    def month_start(self) -> datetime.date:
        return month_bounds(self.current_month)[0]

    @property
    def month_end(self) -> datetime.date:
        return month_bounds(self.current_month)[1]

    @property
    def is_interactive(self) -> bool:
        return not self.loading and not self.unavailable

    @property
    def has_completed_selection(self) -> bool:
        return self.selection_start is not None and self.selection_end is not None

    @property
    def selected_range(self) -> Optional[DateRange]:
        if self.selection_start is None:
            return None
        return DateRange(self.selection_start, self.selection_end or self.selection_start)

    def is_unavailable(self, day: datetime.date) -> bool:
        return overlaps_any(self.blocked, day) or overlaps_any(self.booked, day)


# Events


@dataclass(frozen=True)
class DayClicked:
    day: datetime.date
    today: datetime.date


@dataclass(frozen=True)
class MonthChanged:
    month: datetime.date


@dataclass(frozen=True)
class AvailabilityLoaded:
    blocked: tuple[HasDateRange, ...]
    booked: tuple[HasDateRange, ...]


@dataclass(frozen=True)
class AvailabilityFailed:
    pass


@dataclass(frozen=True)
class ReasonEntered:
    text: str


@dataclass(frozen=True)
class Cleared:
    pass


CalendarEvent = Union[
    DayClicked, MonthChanged, AvailabilityLoaded, AvailabilityFailed, ReasonEntered, Cleared
]


def initial_state(month: datetime.date) -> CalendarState:
    return CalendarState(current_month=month_bounds(month)[0])


def is_day_clickable(state: CalendarState, day: datetime.date, today: datetime.date) -> bool:
    if not state.is_interactive:
        return False
    if not same_month(day, state.current_month):
        return False
    if day < today:
        return False
    return not state.is_unavailable(day)


def _start_at(state: CalendarState, day: datetime.date) -> CalendarState:
    return replace(state, selection_start=day, selection_end=None)


def _owner_click(state: CalendarState, day: datetime.date) -> CalendarState:
    if state.selection_start is None or state.selection_end is not None:
        return _start_at(state, day)

    if day < state.selection_start:
        return _start_at(state, day)

    # day == selection_start is a single-day block
    return replace(state, selection_end=day)


def _guest_click(state: CalendarState, day: datetime.date) -> CalendarState:
    if state.selection_start is None or state.selection_end is not None:
        return _start_at(state, day)

    # Minimum stay is one night
    if day <= state.selection_start:
        return _start_at(state, day)

    if range_overlaps_unavailable(state.selection_start, day, state.blocked, state.booked):
        return _start_at(state, day)

    return replace(state, selection_end=day)


def reduce(state: CalendarState, event: CalendarEvent, mode: Mode) -> CalendarState:
    if isinstance(event, DayClicked):
        if not is_day_clickable(state, event.day, event.today):
            return state
        if mode is Mode.OWNER:
            return _owner_click(state, event.day)
        return _guest_click(state, event.day)

    if isinstance(event, MonthChanged):
        return replace(
            state,
            current_month=month_bounds(event.month)[0],
            loading=True,
            unavailable=False,
        )

    if isinstance(event, AvailabilityLoaded):
        return replace(
            state,
            blocked=tuple(event.blocked),
            booked=tuple(event.booked),
            loading=False,
            unavailable=False,
        )

    if isinstance(event, AvailabilityFailed):
        return replace(state, blocked=(), booked=(), loading=False, unavailable=True)

    if isinstance(event, ReasonEntered):
        return replace(state, reason=event.text)

    if isinstance(event, Cleared):
        return replace(state, selection_start=None, selection_end=None, reason="")

    raise TypeError(f"Unknown calendar event: {event!r}")
