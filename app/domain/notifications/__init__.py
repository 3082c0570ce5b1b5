"""
Notifications Domain

In-app notifications inserted by other domains and polled by the bell UI.
"""

from .router import router
from .schemas import NotificationType
from .service import create_notification, notify_admins

__all__ = ["router", "NotificationType", "create_notification", "notify_admins"]
