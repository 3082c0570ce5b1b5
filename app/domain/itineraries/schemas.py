"""Itinerary domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

PRICE_TYPES = ("per_day", "per_trip")
DEFAULT_PRICE = 100


def _validate_price_type(v):
    if v is not None and v not in PRICE_TYPES:
        raise ValueError(f"price_type must be one of: {', '.join(PRICE_TYPES)}")
    return v


class ItineraryCreate(BaseModel):
    """Schema for creating an itinerary"""

    number_of_days: int
    timings: str
    description: str
    places_to_visit: str
    instructions: Optional[str] = None
    image_1_url: Optional[str] = None
    image_2_url: Optional[str] = None
    price: float = DEFAULT_PRICE
    price_type: str = "per_trip"

    @field_validator("number_of_days")
    @classmethod
    def validate_days(cls, v):
        if v < 1:
            raise ValueError("number_of_days must be at least 1")
        return v

    @field_validator("timings", "description", "places_to_visit")
    @classmethod
    def validate_required(cls, v):
        if not v or not v.strip():
            raise ValueError("This field is required")
        return v.strip()

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v < 0:
            raise ValueError("price cannot be negative")
        return v

    @field_validator("price_type")
    @classmethod
    def validate_price_type(cls, v):
        return _validate_price_type(v)


class ItineraryUpdate(BaseModel):
    """Schema for updating an itinerary"""

    number_of_days: Optional[int] = None
    timings: Optional[str] = None
    description: Optional[str] = None
    places_to_visit: Optional[str] = None
    instructions: Optional[str] = None
    image_1_url: Optional[str] = None
    image_2_url: Optional[str] = None
    price: Optional[float] = None
    price_type: Optional[str] = None

    @field_validator("number_of_days")
    @classmethod
    def validate_days(cls, v):
        if v is not None and v < 1:
            raise ValueError("number_of_days must be at least 1")
        return v

    @field_validator("timings", "description", "places_to_visit")
    @classmethod
    def validate_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Field cannot be blank")
        return v.strip() if v else v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v is not None and v < 0:
            raise ValueError("price cannot be negative")
        return v

    @field_validator("price_type")
    @classmethod
    def validate_price_type(cls, v):
        return _validate_price_type(v)


class ItineraryResponse(BaseModel):
    id: str
    guide_id: str
    number_of_days: int
    timings: str
    description: str
    places_to_visit: str
    instructions: Optional[str] = None
    image_1_url: Optional[str] = None
    image_2_url: Optional[str] = None
    price: float
    price_type: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
