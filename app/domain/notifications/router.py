"""Notification router - FastAPI endpoints for the notification bell"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_admin, get_current_user
from ...database import get_db
from ...models import User
from .schemas import (
    MarkReadRequest,
    NotificationCreate,
    NotificationListResponse,
    NotificationResponse,
)
from .service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


@router.post("/create-notification", response_model=NotificationResponse)
async def create_notification(
    data: NotificationCreate,
    admin: User = Depends(get_current_admin),
    service: NotificationService = Depends(get_notification_service),
):
    """Send a notification to a user (admin only)"""
    return service.send(data, admin)


@router.get("/get-notifications", response_model=NotificationListResponse)
async def get_notifications(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Get the current user's notifications, newest first"""
    return service.list_notifications(current_user, limit, offset)


@router.get("/get-unread-notification-count")
async def get_unread_notification_count(
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return {"unread_count": service.unread_count(current_user)}


@router.put("/mark-notification-read")
async def mark_notification_read(
    data: MarkReadRequest,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Mark one notification, or all of them, as read"""
    result = service.mark_read(data, current_user)
    if "data" in result:
        result["data"] = NotificationResponse.model_validate(result["data"])
    return result


@router.delete("/delete-notification")
async def delete_notification(
    notificationId: Optional[str] = Query(None),
    deleteAll: bool = Query(False),
    deleteRead: bool = Query(False),
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Delete one notification, all read notifications, or all notifications"""
    return service.delete(current_user, notificationId, deleteAll, deleteRead)


__all__ = ["router"]
