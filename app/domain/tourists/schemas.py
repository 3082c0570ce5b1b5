"""Tourist domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_phone
from ..guides.schemas import GuidePublicResponse


class TouristRegister(BaseModel):
    """Schema for creating a tourist profile"""

    name: str
    location: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    profile_picture_url: Optional[str] = None

    @field_validator("name", "location")
    @classmethod
    def validate_required(cls, v):
        if not v or not v.strip():
            raise ValueError("This field is required")
        return v.strip()

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)


class TouristResponse(BaseModel):
    id: str
    user_id: str
    name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    location: str
    profile_picture_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SaveGuideRequest(BaseModel):
    guide_id: str


class SavedGuideResponse(BaseModel):
    id: str
    guide_id: str
    created_at: Optional[datetime] = None
    guide: GuidePublicResponse
