"""Notification repository - Database operations for notifications"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import ROLE_ADMIN, Notification, User, utcnow


class NotificationRepository:
    """Repository for notification database operations"""

    @staticmethod
    def add_notification(db: Session, **fields) -> Notification:
        """Stage a notification row in the current transaction"""
        notification = Notification(**fields)
        db.add(notification)
        return notification

    @staticmethod
    def get_admin_user_ids(db: Session) -> list[str]:
        return [row.id for row in db.query(User.id).filter(User.role == ROLE_ADMIN).all()]

    @staticmethod
    def get_notifications(
        db: Session, user_id: str, limit: int, offset: int
    ) -> list[Notification]:
        """Get a page of notifications, newest first"""
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def count_notifications(db: Session, user_id: str, unread_only: bool = False) -> int:
        query = db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        return query.count()

    @staticmethod
    def get_notification(db: Session, notification_id: str, user_id: str) -> Optional[Notification]:
        return (
            db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )

    @staticmethod
    def mark_all_read(db: Session, user_id: str) -> int:
        """Mark every unread notification as read, returning how many changed"""
        count = (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({"is_read": True, "read_at": utcnow()}, synchronize_session=False)
        )
        db.commit()
        return count

    @staticmethod
    def delete_notifications(db: Session, user_id: str, read_only: bool = False) -> int:
        query = db.query(Notification).filter(Notification.user_id == user_id)
        if read_only:
            query = query.filter(Notification.is_read.is_(True))
        count = query.delete(synchronize_session=False)
        db.commit()
        return count

    @staticmethod
    def delete_for_user(db: Session, user_id: str) -> int:
        """Remove a user's notifications without committing (used by account deletion)"""
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id)
            .delete(synchronize_session=False)
        )
