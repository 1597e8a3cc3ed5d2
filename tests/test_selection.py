"""
Tests for the date selection state machine
"""
from datetime import date

import pytest

from conftest import TODAY, make_block, make_booked
from stay_calendar.domain.selection import (
    AvailabilityFailed,
    AvailabilityLoaded,
    Cleared,
    DayClicked,
    Mode,
    MonthChanged,
    ReasonEntered,
    initial_state,
    is_day_clickable,
    reduce,
)


def loaded_state(blocked=(), booked=(), month=date(2027, 1, 1)):
    state = initial_state(month)
    return reduce(state, AvailabilityLoaded(tuple(blocked), tuple(booked)), Mode.GUEST)


def click(state, mode, *days):
    for d in days:
        state = reduce(state, DayClicked(day=d, today=TODAY), mode)
    return state


class TestGuestSelection:
    def test_first_click_starts_selection(self):
        state = click(loaded_state(), Mode.GUEST, date(2027, 1, 10))
        assert state.selection_start == date(2027, 1, 10)
        assert state.selection_end is None

    def test_later_click_commits(self):
        state = click(loaded_state(), Mode.GUEST, date(2027, 1, 10), date(2027, 1, 14))
        assert state.selection_start == date(2027, 1, 10)
        assert state.selection_end == date(2027, 1, 14)

    def test_one_night_stay_is_valid(self):
        state = click(loaded_state(), Mode.GUEST, date(2027, 1, 10), date(2027, 1, 11))
        assert state.has_completed_selection

    def test_same_day_never_completes(self):
        state = click(loaded_state(), Mode.GUEST, date(2027, 1, 10), date(2027, 1, 10))
        assert state.selection_start == date(2027, 1, 10)
        assert state.selection_end is None

    @pytest.mark.parametrize("second", [date(2027, 1, 9), date(2027, 1, 3), date(2027, 1, 10)])
    def test_earlier_or_equal_click_restarts(self, second):
        state = click(loaded_state(), Mode.GUEST, date(2027, 1, 10), second)
        assert state.selection_start == second
        assert state.selection_end is None

    def test_click_through_blocked_range_restarts(self):
        """Blocked Jan 5-8: Jan 3 then Jan 7 cannot commit"""
        blocked = [make_block(date(2027, 1, 5), date(2027, 1, 8))]
        state = loaded_state(blocked=blocked)

        state = click(state, Mode.GUEST, date(2027, 1, 3))
        # Jan 7 itself is blocked, so the click is ignored
        state = click(state, Mode.GUEST, date(2027, 1, 7))
        assert state.selection_start == date(2027, 1, 3)
        assert state.selection_end is None

        # Jan 10 lies beyond the block: selection restarts there
        state = click(state, Mode.GUEST, date(2027, 1, 10))
        assert state.selection_start == date(2027, 1, 10)
        assert state.selection_end is None

    def test_click_through_booked_range_restarts(self):
        booked = [make_booked(date(2027, 1, 20), date(2027, 1, 23))]
        state = click(loaded_state(booked=booked), Mode.GUEST, date(2027, 1, 18), date(2027, 1, 25))
        assert state.selection_start == date(2027, 1, 25)
        assert state.selection_end is None

    def test_checkout_on_day_before_booking(self):
        booked = [make_booked(date(2027, 1, 20), date(2027, 1, 23))]
        state = click(loaded_state(booked=booked), Mode.GUEST, date(2027, 1, 17), date(2027, 1, 19))
        assert state.selection_end == date(2027, 1, 19)

    def test_click_after_completed_starts_new(self):
        state = click(
            loaded_state(), Mode.GUEST, date(2027, 1, 10), date(2027, 1, 12), date(2027, 1, 20)
        )
        assert state.selection_start == date(2027, 1, 20)
        assert state.selection_end is None


class TestOwnerSelection:
    def test_single_day_block(self):
        """Owner clicks Jan 10 twice"""
        state = click(loaded_state(), Mode.OWNER, date(2027, 1, 10), date(2027, 1, 10))
        assert state.selection_start == date(2027, 1, 10)
        assert state.selection_end == date(2027, 1, 10)

    def test_range(self):
        state = click(loaded_state(), Mode.OWNER, date(2027, 1, 10), date(2027, 1, 15))
        assert (state.selection_start, state.selection_end) == (date(2027, 1, 10), date(2027, 1, 15))

    def test_earlier_click_restarts(self):
        state = click(loaded_state(), Mode.OWNER, date(2027, 1, 10), date(2027, 1, 4))
        assert state.selection_start == date(2027, 1, 4)
        assert state.selection_end is None

    def test_click_after_completed_starts_new(self):
        state = click(
            loaded_state(), Mode.OWNER, date(2027, 1, 10), date(2027, 1, 12), date(2027, 1, 11)
        )
        assert state.selection_start == date(2027, 1, 11)
        assert state.selection_end is None

    def test_selected_range_defaults_to_single_day(self):
        state = click(loaded_state(), Mode.OWNER, date(2027, 1, 10))
        assert state.selected_range.start_date == date(2027, 1, 10)
        assert state.selected_range.end_date == date(2027, 1, 10)

    def test_owner_range_may_span_booked_days(self):
        state = loaded_state(booked=[make_booked(date(2027, 1, 20), date(2027, 1, 23))])
        state = click(state, Mode.OWNER, date(2027, 1, 18), date(2027, 1, 25))
        assert state.selection_start == date(2027, 1, 18)
        assert state.selection_end == date(2027, 1, 25)

        # The same clicks restart a guest selection
        guest = click(
            loaded_state(booked=state.booked), Mode.GUEST, date(2027, 1, 18), date(2027, 1, 25)
        )
        assert guest.selection_start == date(2027, 1, 25)
        assert guest.selection_end is None


class TestIgnoredClicks:
    @pytest.mark.parametrize("mode", [Mode.GUEST, Mode.OWNER])
    def test_past_day(self, mode):
        state = loaded_state()
        assert click(state, mode, date(2027, 1, 1)) == state

    @pytest.mark.parametrize("mode", [Mode.GUEST, Mode.OWNER])
    def test_out_of_month_day(self, mode):
        state = loaded_state()
        assert click(state, mode, date(2027, 2, 1)) == state

    @pytest.mark.parametrize("mode", [Mode.GUEST, Mode.OWNER])
    def test_unavailable_day(self, mode):
        state = loaded_state(
            blocked=[make_block(date(2027, 1, 5), date(2027, 1, 8))],
            booked=[make_booked(date(2027, 1, 20), date(2027, 1, 23))],
        )
        assert click(state, mode, date(2027, 1, 6)) == state
        assert click(state, mode, date(2027, 1, 21)) == state

    def test_clicks_while_loading(self):
        state = initial_state(date(2027, 1, 1))
        assert state.loading
        assert click(state, Mode.GUEST, date(2027, 1, 10)) == state

    def test_clicks_while_unavailable(self):
        state = reduce(initial_state(date(2027, 1, 1)), AvailabilityFailed(), Mode.GUEST)
        assert state.unavailable
        assert click(state, Mode.GUEST, date(2027, 1, 10)) == state

    def test_today_is_clickable(self):
        assert is_day_clickable(loaded_state(), TODAY, TODAY)


class TestClear:
    def test_clear_resets_selection_and_reason(self):
        state = click(loaded_state(), Mode.OWNER, date(2027, 1, 10))
        state = reduce(state, ReasonEntered("Maintenance"), Mode.OWNER)
        state = reduce(state, Cleared(), Mode.OWNER)
        assert state.selection_start is None
        assert state.selection_end is None
        assert state.reason == ""

    def test_clear_is_idempotent(self):
        state = click(loaded_state(), Mode.GUEST, date(2027, 1, 10), date(2027, 1, 12))
        once = reduce(state, Cleared(), Mode.GUEST)
        twice = reduce(once, Cleared(), Mode.GUEST)
        assert once == twice
        assert (twice.selection_start, twice.selection_end) == (None, None)


class TestAvailabilityEvents:
    def test_month_change_marks_loading_and_keeps_selection(self):
        state = click(loaded_state(), Mode.GUEST, date(2027, 1, 10))
        state = reduce(state, MonthChanged(date(2027, 2, 14)), Mode.GUEST)
        assert state.current_month == date(2027, 2, 1)
        assert state.loading
        assert state.selection_start == date(2027, 1, 10)

    def test_loaded_replaces_sets_wholesale(self):
        state = loaded_state(blocked=[make_block(date(2027, 1, 5), date(2027, 1, 8))])
        fresh = [make_booked(date(2027, 2, 3), date(2027, 2, 4))]
        state = reduce(state, AvailabilityLoaded((), tuple(fresh)), Mode.GUEST)
        assert state.blocked == ()
        assert state.booked == tuple(fresh)
        assert not state.loading

    def test_failed_load_clears_sets(self):
        state = loaded_state(blocked=[make_block(date(2027, 1, 5), date(2027, 1, 8))])
        state = reduce(state, AvailabilityFailed(), Mode.GUEST)
        assert state.unavailable
        assert state.blocked == ()
        assert not state.is_interactive

    def test_unknown_event_rejected(self):
        with pytest.raises(TypeError):
            reduce(loaded_state(), object(), Mode.GUEST)
