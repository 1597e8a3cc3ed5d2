"""
Client for the property availability API
"""
import datetime
import logging
from typing import Optional

import requests

from stay_calendar.core.config import settings
from stay_calendar.domain.intervals import format_date
from stay_calendar.schemas.availability import (
    AvailabilityBlock,
    AvailabilityResponse,
    BlockDatesRequest,
)

logger = logging.getLogger(__name__)


class AvailabilityAPIService:
    """Reads and writes blocked/booked date ranges of a property"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.base_url = (base_url or settings.availability_api_base_url).rstrip("/")
        self.token = token if token is not None else settings.availability_api_token
        self.timeout = timeout or settings.availability_api_timeout_seconds

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _availability_url(self, property_id: str) -> str:
        return f"{self.base_url}/properties/{property_id}/availability"

    def get_availability(
        self,
        property_id: str,
        from_date: datetime.date,
        to_date: datetime.date,
    ) -> AvailabilityResponse:
        """
        Blocked and booked ranges intersecting [from_date, to_date].

        Args:
            property_id: Property identifier
            from_date: First day of the window
            to_date: Last day of the window (inclusive)

        Returns:
            AvailabilityResponse with `blocked` and `booked` lists
        """
        logger.info(
            f"Fetching availability for property {property_id} "
            f"from {format_date(from_date)} to {format_date(to_date)}"
        )

        try:
            response = requests.get(
                self._availability_url(property_id),
                headers=self._headers(),
                params={"from": format_date(from_date), "to": format_date(to_date)},
                timeout=self.timeout,
            )
            response.raise_for_status()

            data = AvailabilityResponse.model_validate(response.json())
            logger.info(
                f"Received {len(data.blocked)} blocked and {len(data.booked)} booked ranges"
            )
            return data

        except requests.exceptions.HTTPError as e:
            logger.error(f"HTTP error: {e}")
            logger.error(f"Response body: {e.response.text if e.response is not None else 'No response'}")
            raise
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to fetch availability: {e}")
            raise

    def block_dates(
        self,
        property_id: str,
        start_date: datetime.date,
        end_date: datetime.date,
        reason: Optional[str] = None,
    ) -> AvailabilityBlock:
        """
        Block dates in the property calendar (owner only).

        Both ends are inclusive: start_date == end_date blocks a single day.
        """
        payload = BlockDatesRequest(start_date=start_date, end_date=end_date, reason=reason)

        logger.info(
            f"Blocking dates for property {property_id}: "
            f"{format_date(start_date)} to {format_date(end_date)}"
        )

        try:
            response = requests.post(
                f"{self._availability_url(property_id)}/blocks",
                headers=self._headers(),
                json=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
                timeout=self.timeout,
            )
            response.raise_for_status()

            block = AvailabilityBlock.model_validate(response.json())
            logger.info(f"Created availability block {block.id}")
            return block

        except requests.exceptions.HTTPError as e:
            logger.error(f"HTTP error: {e}")
            logger.error(f"Response body: {e.response.text if e.response is not None else 'No response'}")
            raise
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to block dates: {e}")
            raise

    def unblock_dates(self, property_id: str, block_id: str) -> None:
        """Remove an availability block by id (owner only)"""
        logger.info(f"Removing availability block {block_id} of property {property_id}")

        try:
            response = requests.delete(
                f"{self._availability_url(property_id)}/blocks/{block_id}",
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()

        except requests.exceptions.HTTPError as e:
            logger.error(f"HTTP error: {e}")
            logger.error(f"Response body: {e.response.text if e.response is not None else 'No response'}")
            raise
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to remove block: {e}")
            raise


availability_api_service = AvailabilityAPIService()
