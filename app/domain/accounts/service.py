"""Account service - Current user info and self-service account deletion"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import (
    ROLE_GUIDE,
    ROLE_TOURIST,
    Booking,
    RatingReview,
    SavedGuide,
    TouristProfile,
    User,
)
from ...services.auth_provider import delete_auth_user
from ..guides.repository import GuideRepository
from ..notifications.repository import NotificationRepository
from ..tourists.repository import TouristRepository

logger = logging.getLogger(__name__)


class AccountService:
    """Service layer for account operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_me(self, user: User) -> dict:
        if user.role == ROLE_GUIDE:
            has_profile = GuideRepository.get_guide_by_user_id(self.db, user.id) is not None
        elif user.role == ROLE_TOURIST:
            has_profile = TouristRepository.get_profile(self.db, user.id) is not None
        else:
            has_profile = user.role is not None
        return {
            "id": user.id,
            "email": user.email,
            "role": user.role,
            "has_profile": has_profile,
            "created_at": user.created_at,
        }

    def _delete_tourist_data(self, user_id: str) -> None:
        self.db.query(SavedGuide).filter(SavedGuide.tourist_id == user_id).delete(
            synchronize_session=False
        )
        self.db.query(Booking).filter(Booking.tourist_id == user_id).delete(
            synchronize_session=False
        )
        self.db.query(RatingReview).filter(RatingReview.tourist_id == user_id).delete(
            synchronize_session=False
        )
        self.db.query(TouristProfile).filter(TouristProfile.user_id == user_id).delete(
            synchronize_session=False
        )

    def _delete_guide_data(self, user_id: str) -> None:
        guide = GuideRepository.get_guide_by_user_id(self.db, user_id)
        if not guide:
            return
        self.db.query(Booking).filter(Booking.guide_id == guide.id).delete(
            synchronize_session=False
        )
        self.db.query(RatingReview).filter(RatingReview.guide_id == guide.id).delete(
            synchronize_session=False
        )
        GuideRepository.delete_guide_data(self.db, guide)

    async def delete_account(self, user: User) -> dict:
        """
        Delete the caller's role data, then the user row, in one transaction,
        then remove the auth user at the provider
        """
        user_id = user.id
        role = user.role
        logger.info(f"🗑️ Deleting account {user_id} (role: {role})")

        try:
            if role == ROLE_TOURIST:
                self._delete_tourist_data(user_id)
            elif role == ROLE_GUIDE:
                self._delete_guide_data(user_id)
            NotificationRepository.delete_for_user(self.db, user_id)
            self.db.flush()
            self.db.delete(user)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to delete account {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete account") from e

        auth_deleted = await delete_auth_user(user_id)
        logger.info(f"✅ Account {user_id} deleted")
        return {"message": "Account successfully deleted", "auth_user_deleted": auth_deleted}
