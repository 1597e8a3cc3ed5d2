"""
Pytest configuration for calendar tests
"""
import sys
from datetime import date
from pathlib import Path

import pytest
import requests

# Ensure stay_calendar is importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from stay_calendar.schemas.availability import (  # noqa: E402
    AvailabilityBlock,
    AvailabilityResponse,
    BookedRange,
)

# January 2027 starts on a Friday and ends on a Sunday
TODAY = date(2027, 1, 2)


def make_block(start: date, end: date, block_id: str = "b1", reason=None) -> AvailabilityBlock:
    return AvailabilityBlock(id=block_id, start_date=start, end_date=end, reason=reason)


def make_booked(start: date, end: date, booking_id: str = "k1") -> BookedRange:
    return BookedRange(booking_id=booking_id, start_date=start, end_date=end, status="confirmed")


class FakeAvailabilityAPI:
    """In-memory stand-in for the availability REST API"""

    def __init__(self, blocked=None, booked=None):
        self.blocked = list(blocked or [])
        self.booked = list(booked or [])
        self.calls: list[tuple] = []
        self.fail_fetch = 0
        self.fail_block = False
        self.fail_unblock = False
        self._next_id = 100

    def get_availability(self, property_id, from_date, to_date):
        self.calls.append(("get", property_id, from_date, to_date))
        if self.fail_fetch:
            self.fail_fetch -= 1
            raise requests.exceptions.ConnectionError("connection refused")
        return AvailabilityResponse(
            blocked=[b for b in self.blocked if b.start_date <= to_date and b.end_date >= from_date],
            booked=[b for b in self.booked if b.start_date <= to_date and b.end_date >= from_date],
        )

    def block_dates(self, property_id, start_date, end_date, reason=None):
        self.calls.append(("block", property_id, start_date, end_date, reason))
        if self.fail_block:
            raise requests.exceptions.HTTPError("400 Client Error")
        self._next_id += 1
        block = make_block(start_date, end_date, block_id=f"b{self._next_id}", reason=reason)
        self.blocked.append(block)
        return block

    def unblock_dates(self, property_id, block_id):
        self.calls.append(("unblock", property_id, block_id))
        if self.fail_unblock:
            raise requests.exceptions.HTTPError("404 Client Error")
        self.blocked = [b for b in self.blocked if b.id != block_id]


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def fake_api():
    return FakeAvailabilityAPI()


@pytest.fixture
def sample_availability_payload():
    """Availability response as the API sends it"""
    return {
        "blocked": [
            {
                "id": "3f0c6a2e-5b7d-4d5e-9a51-1c2b3d4e5f60",
                "propertyId": "prop-1",
                "startDate": "2027-01-05",
                "endDate": "2027-01-08",
                "reason": "Maintenance",
                "createdAt": "2026-12-01T10:00:00Z",
            }
        ],
        "booked": [
            {
                "bookingId": "bk-1",
                "startDate": "2027-01-20",
                "endDate": "2027-01-23",
                "status": "confirmed",
            }
        ],
    }
