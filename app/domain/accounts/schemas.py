"""Account domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

DELETE_CONFIRMATION = "DELETE"


class MeResponse(BaseModel):
    id: str
    email: Optional[str] = None
    role: Optional[str] = None
    has_profile: bool
    created_at: Optional[datetime] = None


class DeleteAccountRequest(BaseModel):
    """The caller must type DELETE to confirm"""

    confirm: str

    @field_validator("confirm")
    @classmethod
    def validate_confirm(cls, v):
        if v != DELETE_CONFIRMATION:
            raise ValueError(f'Type "{DELETE_CONFIRMATION}" to confirm account deletion')
        return v
