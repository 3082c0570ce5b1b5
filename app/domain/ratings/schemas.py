"""Rating domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class RatingCreate(BaseModel):
    """Schema for rating a completed booking"""

    booking_id: str
    rating: int
    review_text: Optional[str] = None

    @field_validator("rating")
    @classmethod
    def validate_rating(cls, v):
        if v < 1 or v > 5:
            raise ValueError("Rating must be between 1 and 5")
        return v


class RatingGuideSummary(BaseModel):
    id: str
    name: str
    location: str
    profile_picture_url: Optional[str] = None

    class Config:
        from_attributes = True


class RatingTouristSummary(BaseModel):
    name: str
    location: str
    profile_picture_url: Optional[str] = None

    class Config:
        from_attributes = True


class RatingResponse(BaseModel):
    id: str
    booking_id: str
    tourist_id: str
    guide_id: str
    rating: int
    review_text: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    guide: Optional[RatingGuideSummary] = None
    tourist: Optional[RatingTouristSummary] = None

    class Config:
        from_attributes = True


class RatingSaveResponse(BaseModel):
    message: str
    rating: RatingResponse


class BookingRatingResponse(BaseModel):
    hasRating: bool
    rating: Optional[RatingResponse] = None
