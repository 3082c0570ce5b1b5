"""Booking domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import BOOKING_STATUSES


class BookingCreate(BaseModel):
    """Schema for a tourist's booking request; price and tourist come from the server"""

    guide_id: str
    itinerary_id: str
    booking_date: date


class BookingStatusUpdate(BaseModel):
    booking_id: str
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v not in BOOKING_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(BOOKING_STATUSES)}")
        return v


class RebookRequest(BaseModel):
    booking_id: str
    booking_date: date


class BookingGuideSummary(BaseModel):
    id: str
    name: str
    location: str
    phone_number: Optional[str] = None
    email: Optional[str] = None
    profile_picture_url: Optional[str] = None

    class Config:
        from_attributes = True


class BookingItinerarySummary(BaseModel):
    id: str
    number_of_days: int
    timings: str
    description: str
    places_to_visit: str
    price: float
    price_type: str

    class Config:
        from_attributes = True


class BookingTouristSummary(BaseModel):
    name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    location: str

    class Config:
        from_attributes = True


class BookingResponse(BaseModel):
    id: str
    tourist_id: str
    guide_id: str
    itinerary_id: Optional[str] = None
    booking_date: date
    status: str
    price: float
    price_type: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    guide: Optional[BookingGuideSummary] = None
    itinerary: Optional[BookingItinerarySummary] = None
    tourist: Optional[BookingTouristSummary] = None

    class Config:
        from_attributes = True


class RebookingCheck(BaseModel):
    status: str  # passed, error, warning, skipped
    message: str


class RebookingValidation(BaseModel):
    """Outcome of re-checking a past booking's guide, availability and itinerary"""

    booking_id: str
    overall_status: str  # success, warning, error
    message: str
    checks: dict[str, RebookingCheck]
    guide: Optional[BookingGuideSummary] = None
    itinerary: Optional[BookingItinerarySummary] = None
    availability_start: Optional[date] = None
    availability_end: Optional[date] = None
    candidate_dates: list[date] = []
