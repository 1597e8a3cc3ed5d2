"""
Interactive availability calendar session: one user, one property
"""
import asyncio
import datetime
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from stay_calendar.core.config import settings
from stay_calendar.domain.calendar import local_today, next_month, previous_month
from stay_calendar.domain.classifier import CalendarCell, build_cells
from stay_calendar.domain.pricing import PriceQuote, PricingTerms, quote_stay
from stay_calendar.domain.selection import (
    AvailabilityFailed,
    AvailabilityLoaded,
    CalendarEvent,
    CalendarState,
    Cleared,
    DayClicked,
    Mode,
    MonthChanged,
    ReasonEntered,
    initial_state,
    reduce,
)
from stay_calendar.schemas.availability import AvailabilityBlock, BookingRequest
from stay_calendar.services.availability_api_service import (
    AvailabilityAPIService,
    availability_api_service,
)
from stay_calendar.services.availability_store import AvailabilityStore, StoreStatus

logger = logging.getLogger(__name__)

BookingHandler = Callable[[BookingRequest], Union[Awaitable[Any], Any]]


class CalendarSession:
    """
    Glue between the pure selection reducer and the outside world.

    Selection is only cleared after a submission succeeds; a failed block,
    unblock or booking hand-off re-raises and leaves the dates selected so
    the user can retry.
    """

    def __init__(
        self,
        property_id: str,
        mode: Mode,
        terms: Optional[PricingTerms] = None,
        api: Optional[AvailabilityAPIService] = None,
        store: Optional[AvailabilityStore] = None,
        on_booking_request: Optional[BookingHandler] = None,
        today_provider: Optional[Callable[[], datetime.date]] = None,
        month: Optional[datetime.date] = None,
    ):
        self.property_id = property_id
        self.mode = mode
        self.terms = terms
        self.api = api or availability_api_service
        self.store = store or AvailabilityStore(api=self.api)
        self.on_booking_request = on_booking_request
        self._today = today_provider or (lambda: local_today(settings.property_timezone))
        self.state: CalendarState = initial_state(month or self._today())

    def today(self) -> datetime.date:
        return self._today()

    def dispatch(self, event: CalendarEvent) -> CalendarState:
        self.state = reduce(self.state, event, self.mode)
        return self.state

    # Availability

    def _load_window(self) -> tuple[datetime.date, datetime.date]:
        """
        Visible month, widened to reach a pending guest check-in.

        A check-out in a later month is only validated against what the
        store holds, so the days between check-in and the new month must
        be part of the same snapshot.
        """
        start, end = self.state.month_start, self.state.month_end
        pending = self.state.selection_start
        if self.mode is Mode.GUEST and pending is not None and self.state.selection_end is None:
            start, end = min(start, pending), max(end, pending)
        return start, end

    async def _refresh(self) -> None:
        applied = await self.store.load(self.property_id, *self._load_window())
        if not applied:
            return

        if self.store.status == StoreStatus.READY:
            self.dispatch(AvailabilityLoaded(self.store.blocked, self.store.booked))
        else:
            self.dispatch(AvailabilityFailed())

    async def open(self) -> CalendarState:
        await self._refresh()
        return self.state

    async def go_to_month(self, month: datetime.date) -> CalendarState:
        self.dispatch(MonthChanged(month))
        await self._refresh()
        return self.state

    async def show_next_month(self) -> CalendarState:
        return await self.go_to_month(next_month(self.state.current_month))

    async def show_previous_month(self) -> CalendarState:
        return await self.go_to_month(previous_month(self.state.current_month))

    async def retry(self) -> CalendarState:
        return await self.go_to_month(self.state.current_month)

    def close(self) -> None:
        self.store.close()

    # Selection

    def click_day(self, day: datetime.date) -> CalendarState:
        return self.dispatch(DayClicked(day=day, today=self.today()))

    def set_reason(self, text: str) -> CalendarState:
        return self.dispatch(ReasonEntered(text))

    def clear(self) -> CalendarState:
        return self.dispatch(Cleared())

    def cells(self, hover: Optional[datetime.date] = None) -> list[CalendarCell]:
        return build_cells(self.state, self.mode, self.today(), hover)

    def quote(self) -> Optional[PriceQuote]:
        """Price of the committed guest selection, None if not priceable."""
        if self.mode is not Mode.GUEST or self.terms is None:
            return None
        if not self.state.has_completed_selection:
            return None
        return quote_stay(self.state.selection_start, self.state.selection_end, self.terms)

    # Submissions

    def _require_mode(self, mode: Mode) -> None:
        if self.mode is not mode:
            raise PermissionError(f"Action requires {mode.value} mode")

    async def block_selected(self) -> AvailabilityBlock:
        self._require_mode(Mode.OWNER)
        selected = self.state.selected_range
        if selected is None:
            raise ValueError("Select dates to block first")

        reason = self.state.reason.strip() or None
        block = await asyncio.to_thread(
            self.api.block_dates,
            self.property_id,
            selected.start_date,
            selected.end_date,
            reason,
        )
        logger.info(f"Blocked {selected} for property {self.property_id}")

        self.clear()
        await self._refresh()
        return block

    async def remove_block(self, block_id: str) -> None:
        self._require_mode(Mode.OWNER)
        await asyncio.to_thread(self.api.unblock_dates, self.property_id, block_id)
        logger.info(f"Removed block {block_id} of property {self.property_id}")
        await self._refresh()

    async def request_booking(self) -> BookingRequest:
        self._require_mode(Mode.GUEST)
        if not self.state.has_completed_selection:
            raise ValueError("Select check-in and check-out dates first")
        if self.on_booking_request is None:
            raise ValueError("No booking handler configured")

        quote = self.quote()
        if quote is None:
            raise ValueError("Price unavailable for this property")

        request = BookingRequest(
            property_id=self.property_id,
            check_in=self.state.selection_start,
            check_out=self.state.selection_end,
            nights=quote.nights,
            total_price=quote.total,
            currency=settings.currency,
        )

        result = self.on_booking_request(request)
        if inspect.isawaitable(result):
            await result
        logger.info(
            f"Booking request handed off for property {self.property_id}: "
            f"{request.check_in} - {request.check_out}, {request.nights} nights"
        )

        self.clear()
        await self._refresh()
        return request
