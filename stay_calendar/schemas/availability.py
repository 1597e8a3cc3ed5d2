from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from stay_calendar.domain.intervals import DateRange


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DatedWireModel(WireModel):
    """Inclusive `startDate`..`endDate` range; reversed ranges are rejected."""

    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_order(self):
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)


class AvailabilityBlock(DatedWireModel):
    id: str
    property_id: Optional[str] = None
    reason: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)


class BookedRange(DatedWireModel):
    booking_id: Optional[str] = None
    status: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class AvailabilityResponse(WireModel):
    blocked: list[AvailabilityBlock] = Field(default_factory=list)
    booked: list[BookedRange] = Field(default_factory=list)


class BlockDatesRequest(DatedWireModel):
    reason: Optional[str] = None


class BookingRequest(WireModel):
    """Handed to the booking-submission flow when a guest reserves."""

    property_id: str
    check_in: date
    check_out: date
    nights: int = Field(..., ge=1)
    total_price: Decimal
    currency: str
