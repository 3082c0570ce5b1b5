"""Tourist service - Tourist profiles and saved guides"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import GUIDE_APPROVED, ROLE_TOURIST, SavedGuide, TouristProfile, User
from ..guides.repository import GuideRepository
from ..notifications.schemas import NotificationType
from ..notifications.service import create_notification
from .repository import TouristRepository
from .schemas import TouristRegister

logger = logging.getLogger(__name__)


class TouristService:
    """Service layer for tourist business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TouristRepository()

    def register(self, data: TouristRegister, user: User) -> TouristProfile:
        logger.info(f"📥 Registering tourist for user_id: {user.id}")

        if user.role and user.role != ROLE_TOURIST:
            logger.warning(f"⚠️ User {user.id} already registered as {user.role}")
            raise HTTPException(
                status_code=409, detail=f"This account is already registered as a {user.role}"
            )
        if self.repo.get_profile(self.db, user.id):
            raise HTTPException(status_code=409, detail="Tourist profile already exists")

        user.role = ROLE_TOURIST
        profile = self.repo.create_profile(
            self.db,
            user_id=user.id,
            name=data.name,
            location=data.location,
            email=data.email or user.email,
            phone_number=data.phone_number,
            profile_picture_url=data.profile_picture_url,
        )
        logger.info(f"✅ Tourist profile {profile.id} created")
        return profile

    def get_profile(self, user: User) -> TouristProfile:
        profile = self.repo.get_profile(self.db, user.id)
        if not profile:
            raise HTTPException(status_code=404, detail="No tourist profile found")
        return profile

    def list_tourists(self) -> list[TouristProfile]:
        return self.repo.get_profiles(self.db)

    def _tourist_name(self, user: User) -> str:
        profile = self.repo.get_profile(self.db, user.id)
        return profile.name if profile else "A tourist"

    def save_guide(self, guide_id: str, tourist: User) -> dict:
        guide = GuideRepository.get_guide_by_id(self.db, guide_id)
        if not guide or guide.status != GUIDE_APPROVED or guide.is_deactivated:
            raise HTTPException(status_code=404, detail="Guide not found")

        if self.repo.get_saved(self.db, tourist.id, guide.id):
            raise HTTPException(status_code=409, detail="Guide already saved")

        saved = SavedGuide(tourist_id=tourist.id, guide_id=guide.id)
        self.db.add(saved)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=409, detail="Guide already saved") from e
        self.db.refresh(saved)
        logger.info(f"💾 Tourist {tourist.id} saved guide {guide.id}")

        create_notification(
            self.db,
            guide.user_id,
            NotificationType.GUIDE_SAVED,
            "Someone saved your profile",
            f"{self._tourist_name(tourist)} saved your profile.",
            related_user_id=tourist.id,
            related_guide_id=guide.id,
        )
        return {"id": saved.id, "guide_id": guide.id, "created_at": saved.created_at, "guide": guide}

    def unsave_guide(self, guide_id: str, tourist: User) -> dict:
        saved = self.repo.get_saved(self.db, tourist.id, guide_id)
        if not saved:
            raise HTTPException(status_code=404, detail="Guide is not in your saved list")

        self.db.delete(saved)
        self.db.commit()
        logger.info(f"🗑️ Tourist {tourist.id} unsaved guide {guide_id}")

        guide = GuideRepository.get_guide_by_id(self.db, guide_id)
        if guide:
            create_notification(
                self.db,
                guide.user_id,
                NotificationType.GUIDE_UNSAVED,
                "Profile removed from saved list",
                f"{self._tourist_name(tourist)} removed your profile from their saved guides.",
                related_user_id=tourist.id,
                related_guide_id=guide.id,
            )
        return {"message": "Guide removed from saved list"}

    def get_saved_guides(self, tourist: User) -> list[dict]:
        return [
            {"id": saved.id, "guide_id": guide.id, "created_at": saved.created_at, "guide": guide}
            for saved, guide in self.repo.get_saved_guides(self.db, tourist.id)
        ]
