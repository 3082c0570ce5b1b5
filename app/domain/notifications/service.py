"""Notification service - In-app notifications polled by the bell UI"""

import logging
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Notification, User, utcnow
from .repository import NotificationRepository
from .schemas import MarkReadRequest, NotificationCreate

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    user_id: Optional[str],
    notification_type: str,
    title: str,
    message: str,
    data: Optional[dict[str, Any]] = None,
    related_user_id: Optional[str] = None,
    related_guide_id: Optional[str] = None,
    related_booking_id: Optional[str] = None,
) -> Optional[Notification]:
    """
    Insert a notification for a user

    Call this after the main operation has committed. A failure here is logged
    and swallowed so it never undoes or fails the operation that triggered it.

    Returns:
        The stored notification, or None when nothing was stored
    """
    if not user_id:
        logger.debug(f"⚠️ Skipping {notification_type} notification: no recipient")
        return None

    try:
        notification = NotificationRepository.add_notification(
            db,
            user_id=user_id,
            type=notification_type,
            title=title,
            message=message,
            data=data,
            related_user_id=related_user_id,
            related_guide_id=related_guide_id,
            related_booking_id=related_booking_id,
        )
        db.commit()
        logger.info(f"🔔 {notification_type} notification created for user {user_id}")
        return notification
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Failed to create {notification_type} notification for user {user_id}: {e}")
        return None


def notify_admins(
    db: Session,
    notification_type: str,
    title: str,
    message: str,
    **related,
) -> int:
    """Send the same notification to every admin, returning how many were stored"""
    try:
        admin_ids = NotificationRepository.get_admin_user_ids(db)
    except Exception as e:
        logger.error(f"❌ Failed to look up admins for {notification_type} notification: {e}")
        return 0

    sent = 0
    for admin_id in admin_ids:
        if create_notification(db, admin_id, notification_type, title, message, **related):
            sent += 1
    return sent


class NotificationService:
    """Service layer for reading and managing a user's notifications"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def send(self, data: NotificationCreate, admin: User) -> Notification:
        """Admin-authored notification to any user"""
        logger.info(f"📥 Admin {admin.id} sending {data.type} notification to {data.user_id}")
        notification = self.repo.add_notification(self.db, **data.model_dump())
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def list_notifications(self, user: User, limit: int, offset: int) -> dict:
        return {
            "notifications": self.repo.get_notifications(self.db, user.id, limit, offset),
            "total": self.repo.count_notifications(self.db, user.id),
            "unread_count": self.repo.count_notifications(self.db, user.id, unread_only=True),
        }

    def unread_count(self, user: User) -> int:
        return self.repo.count_notifications(self.db, user.id, unread_only=True)

    def mark_read(self, data: MarkReadRequest, user: User) -> dict:
        if data.markAll:
            count = self.repo.mark_all_read(self.db, user.id)
            return {"message": "All notifications marked as read", "count": count}

        if not data.notificationId:
            raise HTTPException(
                status_code=400, detail="Missing notificationId or markAll parameter"
            )

        notification = self.repo.get_notification(self.db, data.notificationId, user.id)
        if not notification:
            raise HTTPException(status_code=404, detail="Notification not found")

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = utcnow()
            self.db.commit()
            self.db.refresh(notification)

        return {"message": "Notification marked as read", "data": notification}

    def delete(
        self,
        user: User,
        notification_id: Optional[str] = None,
        delete_all: bool = False,
        delete_read: bool = False,
    ) -> dict:
        if delete_all:
            count = self.repo.delete_notifications(self.db, user.id)
            return {"message": "All notifications deleted", "count": count}

        if delete_read:
            count = self.repo.delete_notifications(self.db, user.id, read_only=True)
            return {"message": "Read notifications deleted", "count": count}

        if not notification_id:
            raise HTTPException(
                status_code=400,
                detail="Missing notificationId, deleteAll or deleteRead parameter",
            )

        notification = self.repo.get_notification(self.db, notification_id, user.id)
        if not notification:
            raise HTTPException(status_code=404, detail="Notification not found")

        self.db.delete(notification)
        self.db.commit()
        return {"message": "Notification deleted", "count": 1}
