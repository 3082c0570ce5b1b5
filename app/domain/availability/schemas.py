"""Availability domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, model_validator


class AvailabilitySet(BaseModel):
    """Schema for setting a guide's availability window"""

    start_date: date
    end_date: date
    is_available: bool = True

    @model_validator(mode="after")
    def validate_window(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        return self


class AvailabilityResponse(BaseModel):
    id: str
    guide_id: str
    start_date: date
    end_date: date
    is_available: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AvailabilityEnvelope(BaseModel):
    availability: Optional[AvailabilityResponse] = None
    message: str
