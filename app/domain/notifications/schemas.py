"""Notification domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator


class NotificationType:
    """Notification type identifiers shown by the bell UI"""

    GUIDE_APPROVED = "guide_approved"
    GUIDE_REJECTED = "guide_rejected"
    GUIDE_DEACTIVATED = "guide_deactivated"
    GUIDE_REACTIVATED = "guide_reactivated"
    GUIDE_DELETED = "guide_deleted"
    GUIDE_SAVED = "guide_saved"
    GUIDE_UNSAVED = "guide_unsaved"
    GUIDE_REGISTERED = "guide_registered"
    BOOKING_CREATED = "booking_created"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_REJECTED = "booking_rejected"
    BOOKING_COMPLETED = "booking_completed"
    BOOKING_CANCELLED = "booking_cancelled"
    RATING_RECEIVED = "rating_received"
    REVIEW_DELETED = "review_deleted"
    TRIP_COMPLETED = "trip_completed"
    ADMIN_ACTION = "admin_action"
    CUSTOM = "custom"

    ALL = (
        GUIDE_APPROVED,
        GUIDE_REJECTED,
        GUIDE_DEACTIVATED,
        GUIDE_REACTIVATED,
        GUIDE_DELETED,
        GUIDE_SAVED,
        GUIDE_UNSAVED,
        GUIDE_REGISTERED,
        BOOKING_CREATED,
        BOOKING_CONFIRMED,
        BOOKING_REJECTED,
        BOOKING_COMPLETED,
        BOOKING_CANCELLED,
        RATING_RECEIVED,
        REVIEW_DELETED,
        TRIP_COMPLETED,
        ADMIN_ACTION,
        CUSTOM,
    )


class NotificationCreate(BaseModel):
    """Schema for an admin-authored notification"""

    user_id: str
    type: str = NotificationType.CUSTOM
    title: str
    message: str
    data: Optional[dict[str, Any]] = None
    related_user_id: Optional[str] = None
    related_guide_id: Optional[str] = None
    related_booking_id: Optional[str] = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        if v not in NotificationType.ALL:
            raise ValueError(f"Invalid notification type: {v}")
        return v

    @field_validator("title", "message")
    @classmethod
    def validate_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Title and message are required")
        return v.strip()


class MarkReadRequest(BaseModel):
    notificationId: Optional[str] = None
    markAll: bool = False


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    type: str
    title: str
    message: str
    data: Optional[dict[str, Any]] = None
    related_user_id: Optional[str] = None
    related_guide_id: Optional[str] = None
    related_booking_id: Optional[str] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    total: int
    unread_count: int
