"""
Client-side cache of blocked and booked ranges for the visible month
"""
import asyncio
import datetime
import logging
from enum import Enum
from typing import Optional

import requests

from stay_calendar.core.config import settings
from stay_calendar.schemas.availability import AvailabilityBlock, BookedRange
from stay_calendar.services.availability_api_service import (
    AvailabilityAPIService,
    availability_api_service,
)

logger = logging.getLogger(__name__)


class StoreStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"


class AvailabilityStore:
    """
    Holds one consistent snapshot of a month window.

    Every load replaces blocked/booked wholesale. Loads are numbered and only
    the most recently started one may write its result, so a slow response
    for a month the user already navigated away from is dropped.
    """

    def __init__(
        self,
        api: Optional[AvailabilityAPIService] = None,
        retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ):
        self.api = api or availability_api_service
        self.retries = max(1, retries if retries is not None else settings.availability_fetch_retries)
        self.retry_delay = (
            retry_delay if retry_delay is not None else settings.availability_retry_delay_seconds
        )

        self.status = StoreStatus.IDLE
        self.blocked: tuple[AvailabilityBlock, ...] = ()
        self.booked: tuple[BookedRange, ...] = ()
        self.error: Optional[Exception] = None

        self._window: Optional[tuple[str, datetime.date, datetime.date]] = None
        self._sequence = 0
        self._closed = False

    @property
    def is_ready(self) -> bool:
        return self.status == StoreStatus.READY

    def _is_current(self, sequence: int) -> bool:
        return not self._closed and sequence == self._sequence

    async def load(
        self,
        property_id: str,
        month_start: datetime.date,
        month_end: datetime.date,
    ) -> bool:
        """
        Fetch the window and replace the held sets.

        Returns False when the result was discarded because a newer load
        started or the store was closed meanwhile.
        """
        if self._closed:
            return False

        self._sequence += 1
        sequence = self._sequence
        self._window = (property_id, month_start, month_end)
        self.status = StoreStatus.LOADING
        self.error = None

        last_error: Optional[Exception] = None
        for attempt in range(1, self.retries + 1):
            if not self._is_current(sequence):
                return False
            try:
                response = await asyncio.to_thread(
                    self.api.get_availability, property_id, month_start, month_end
                )
            except (requests.exceptions.RequestException, ValueError) as e:
                if not self._is_current(sequence):
                    return False
                last_error = e
                logger.warning(
                    f"Availability load failed for property {property_id} "
                    f"(attempt {attempt}/{self.retries}): {e}"
                )
                if attempt < self.retries:
                    await asyncio.sleep(self.retry_delay)
                continue

            if not self._is_current(sequence):
                logger.debug(f"Discarding stale availability result #{sequence}")
                return False

            self.blocked = tuple(response.blocked)
            self.booked = tuple(response.booked)
            self.status = StoreStatus.READY
            return True

        if not self._is_current(sequence):
            return False

        # Never fall back to "everything available"
        logger.error(f"Availability unavailable for property {property_id}: {last_error}")
        self.blocked = ()
        self.booked = ()
        self.error = last_error
        self.status = StoreStatus.UNAVAILABLE
        return True

    async def reload(self) -> bool:
        if self._window is None:
            raise RuntimeError("Nothing to reload: load() was never called")
        return await self.load(*self._window)

    def close(self) -> None:
        """Drop the effect of any in-flight load."""
        self._closed = True
        self._sequence += 1
