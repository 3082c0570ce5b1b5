"""Guide domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_languages, validate_phone

DOCUMENT_TYPES = ("aadhar", "driving_licence")


class GuideRegister(BaseModel):
    """Schema for registering as a guide (also used for resubmission)"""

    name: str
    phone_number: str
    email: Optional[str] = None
    location: str
    languages: list[str]
    document_type: str
    document_url: str
    profile_picture_url: Optional[str] = None

    @field_validator("name", "location", "document_url")
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

    @field_validator("languages")
    @classmethod
    def validate_languages(cls, v):
        return validate_languages(v)

    @field_validator("document_type")
    @classmethod
    def validate_document_type(cls, v):
        if v not in DOCUMENT_TYPES:
            raise ValueError(f"document_type must be one of: {', '.join(DOCUMENT_TYPES)}")
        return v


class GuideUpdate(BaseModel):
    """Schema for editing a guide profile"""

    name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    location: Optional[str] = None
    languages: Optional[list[str]] = None
    profile_picture_url: Optional[str] = None

    @field_validator("name", "location")
    @classmethod
    def validate_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Field cannot be blank")
        return v.strip() if v else v

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)

    @field_validator("languages")
    @classmethod
    def validate_languages(cls, v):
        if v is None:
            return v
        return validate_languages(v)


class GuideAdminAction(BaseModel):
    """Schema for admin approve/reject/deactivate/reactivate/delete actions"""

    guide_id: str
    reason: Optional[str] = None


class GuideResponse(BaseModel):
    """Full guide row, returned to the guide and to admins"""

    id: str
    user_id: str
    name: str
    phone_number: Optional[str] = None
    email: Optional[str] = None
    location: str
    languages: list[str]
    profile_picture_url: Optional[str] = None
    document_url: Optional[str] = None
    document_type: Optional[str] = None
    profile_picture_presigned: Optional[str] = None
    document_presigned: Optional[str] = None
    status: str
    rejection_reason: Optional[str] = None
    is_deactivated: bool
    deactivation_reason: Optional[str] = None
    is_resubmitted: bool
    trips_completed: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GuidePublicResponse(BaseModel):
    """Guide card shown to tourists"""

    id: str
    name: str
    location: str
    languages: list[str]
    profile_picture_url: Optional[str] = None
    trips_completed: int = 0
    profile_picture_presigned: Optional[str] = None

    class Config:
        from_attributes = True


class GuideDetailResponse(GuidePublicResponse):
    rating_average: Optional[float] = None
    rating_count: int = 0


class GuideAccess(BaseModel):
    """Login gate verdict for a guide account"""

    allowed: bool
    state: str
    message: str
    reason: Optional[str] = None
    can_resubmit: bool = False


class MyGuideProfileResponse(BaseModel):
    guide: GuideResponse
    access: GuideAccess
