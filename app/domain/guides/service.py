"""Guide service - Registration, discovery and the admin verification workflow"""

import logging
from datetime import date
from difflib import SequenceMatcher
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import (
    GUIDE_APPROVED,
    GUIDE_PENDING,
    GUIDE_REJECTED,
    ROLE_GUIDE,
    Guide,
    User,
)
from ...services.auth_provider import delete_auth_user
from ...utils.sanitization import REASON_MAX_LENGTH, clean_text
from ..notifications.schemas import NotificationType
from ..notifications.service import create_notification, notify_admins
from .repository import GuideRepository
from .schemas import GuideAdminAction, GuideRegister, GuideUpdate

logger = logging.getLogger(__name__)

# Minimum similarity (percent) for a fuzzy location match
LOCATION_SIMILARITY_THRESHOLD = 70


def location_similarity(a: str, b: str) -> float:
    """Similarity of two location strings as a percentage (0-100)"""
    if not a or not b:
        return 0.0
    return SequenceMatcher(None, a.lower(), b.lower()).ratio() * 100


def location_matches(guide_location: str, search: str) -> bool:
    """Substring match first, then fuzzy match at or above the threshold"""
    guide_location = (guide_location or "").lower()
    search = search.strip().lower()
    if search in guide_location:
        return True
    return location_similarity(guide_location, search) >= LOCATION_SIMILARITY_THRESHOLD


def get_guide_access(guide: Guide) -> dict:
    """
    Decide whether a guide may enter the guide dashboard

    pending: wait for review; rejected: show reason and allow resubmission;
    deactivated: show reason; approved and active: allowed.
    """
    if guide.is_deactivated:
        return {
            "allowed": False,
            "state": "deactivated",
            "message": "Your guide account has been deactivated by an administrator.",
            "reason": guide.deactivation_reason,
        }
    if guide.status == GUIDE_PENDING:
        return {
            "allowed": False,
            "state": GUIDE_PENDING,
            "message": "Your profile is under review. You will be notified once it is approved.",
        }
    if guide.status == GUIDE_REJECTED:
        return {
            "allowed": False,
            "state": GUIDE_REJECTED,
            "message": "Your profile was rejected. You can update your details and resubmit.",
            "reason": guide.rejection_reason,
            "can_resubmit": True,
        }
    return {"allowed": True, "state": GUIDE_APPROVED, "message": "Welcome back!"}


class GuideService:
    """Service layer for guide business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = GuideRepository()

    # ------------------------------------------------------------------
    # Guide self-service
    # ------------------------------------------------------------------

    def register_guide(self, data: GuideRegister, user: User) -> Guide:
        """Create a pending guide profile for the current user"""
        logger.info(f"📥 Registering guide for user_id: {user.id}")

        if user.role and user.role != ROLE_GUIDE:
            logger.warning(f"⚠️ User {user.id} already registered as {user.role}")
            raise HTTPException(
                status_code=409, detail=f"This account is already registered as a {user.role}"
            )

        if self.repo.get_guide_by_user_id(self.db, user.id):
            raise HTTPException(status_code=409, detail="Guide profile already exists")

        user.role = ROLE_GUIDE
        guide = self.repo.create_guide(
            self.db,
            user,
            name=data.name,
            phone_number=data.phone_number,
            email=data.email or user.email,
            location=data.location,
            languages=data.languages,
            document_type=data.document_type,
            document_url=data.document_url,
            profile_picture_url=data.profile_picture_url,
            status=GUIDE_PENDING,
        )
        logger.info(f"✅ Guide {guide.id} registered and awaiting verification")

        notify_admins(
            self.db,
            NotificationType.GUIDE_REGISTERED,
            "New guide registration",
            f"{guide.name} from {guide.location} submitted their profile for verification.",
            related_guide_id=guide.id,
            related_user_id=user.id,
        )
        return guide

    def get_my_profile(self, guide: Guide) -> dict:
        return {"guide": guide, "access": get_guide_access(guide)}

    def update_profile(self, guide: Guide, data: GuideUpdate) -> Guide:
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            raise HTTPException(status_code=400, detail="No fields to update")
        logger.info(f"✏️ Updating guide {guide.id} fields: {list(updates.keys())}")
        return self.repo.update_guide(self.db, guide, **updates)

    def resubmit(self, guide: Guide, data: GuideRegister) -> Guide:
        """Replace details of a rejected guide and send it back for review"""
        if guide.status != GUIDE_REJECTED:
            raise HTTPException(
                status_code=400, detail="Only rejected profiles can be resubmitted"
            )

        guide = self.repo.update_guide(
            self.db,
            guide,
            name=data.name,
            phone_number=data.phone_number,
            email=data.email or guide.email,
            location=data.location,
            languages=data.languages,
            document_type=data.document_type,
            document_url=data.document_url,
            profile_picture_url=data.profile_picture_url or guide.profile_picture_url,
            status=GUIDE_PENDING,
            is_resubmitted=True,
            rejection_reason=None,
        )
        logger.info(f"🔁 Guide {guide.id} resubmitted for verification")

        notify_admins(
            self.db,
            NotificationType.GUIDE_REGISTERED,
            "Guide resubmitted profile",
            f"{guide.name} resubmitted their profile for verification.",
            related_guide_id=guide.id,
            related_user_id=guide.user_id,
        )
        return guide

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def get_approved_guides(self, limit: Optional[int]) -> list[Guide]:
        return self.repo.get_approved_guides(self.db, limit)

    def search_guides(
        self,
        name: Optional[str] = None,
        language: Optional[str] = None,
        location: Optional[str] = None,
        availability_date: Optional[date] = None,
    ) -> list[Guide]:
        """Filter approved, active guides by name, language, location and availability"""
        guides = self.repo.get_approved_guides(self.db)

        if name and name.strip():
            needle = name.strip().lower()
            guides = [g for g in guides if needle in g.name.lower()]

        if location and location.strip():
            guides = [g for g in guides if location_matches(g.location, location)]

        if language and language.strip():
            wanted = language.strip().lower()
            guides = [
                g for g in guides if any(lang.lower() == wanted for lang in (g.languages or []))
            ]

        if availability_date:
            latest = self.repo.get_latest_availability_map(self.db)
            guides = [
                g
                for g in guides
                if g.id in latest
                and latest[g.id].is_available
                and latest[g.id].covers(availability_date)
            ]

        return guides

    def get_languages(self) -> list[str]:
        """Sorted unique languages spoken by approved, active guides"""
        languages = set()
        for guide in self.repo.get_approved_guides(self.db):
            languages.update(guide.languages or [])
        return sorted(languages)

    def get_guide_detail(self, guide_id: str) -> dict:
        guide = self.repo.get_guide_by_id(self.db, guide_id)
        if not guide or guide.status != GUIDE_APPROVED or guide.is_deactivated:
            raise HTTPException(status_code=404, detail="Guide not found")

        average, count = self.repo.get_rating_stats(self.db, guide.id)
        return {
            "id": guide.id,
            "name": guide.name,
            "location": guide.location,
            "languages": guide.languages or [],
            "profile_picture_url": guide.profile_picture_url,
            "trips_completed": guide.trips_completed,
            "rating_average": average,
            "rating_count": count,
        }

    # ------------------------------------------------------------------
    # Admin verification workflow
    # ------------------------------------------------------------------

    def list_guides(self, status: Optional[str]) -> list[Guide]:
        return self.repo.get_guides(self.db, status)

    def _get_guide_or_404(self, guide_id: str) -> Guide:
        guide = self.repo.get_guide_by_id(self.db, guide_id)
        if not guide:
            raise HTTPException(status_code=404, detail="Guide not found")
        return guide

    @staticmethod
    def _require_reason(data: GuideAdminAction) -> str:
        try:
            reason = clean_text(data.reason, REASON_MAX_LENGTH, field="Reason")
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        if not reason:
            raise HTTPException(status_code=400, detail="A reason is required")
        return reason

    def approve_guide(self, data: GuideAdminAction, admin: User) -> Guide:
        guide = self._get_guide_or_404(data.guide_id)
        if guide.status == GUIDE_APPROVED:
            raise HTTPException(status_code=409, detail="Guide is already approved")

        guide = self.repo.update_guide(
            self.db, guide, status=GUIDE_APPROVED, rejection_reason=None
        )
        logger.info(f"✅ Admin {admin.id} approved guide {guide.id}")

        create_notification(
            self.db,
            guide.user_id,
            NotificationType.GUIDE_APPROVED,
            "Profile approved",
            "Congratulations! Your guide profile has been verified and is now visible to tourists.",
            related_guide_id=guide.id,
            related_user_id=admin.id,
        )
        return guide

    def reject_guide(self, data: GuideAdminAction, admin: User) -> Guide:
        reason = self._require_reason(data)
        guide = self._get_guide_or_404(data.guide_id)

        guide = self.repo.update_guide(
            self.db, guide, status=GUIDE_REJECTED, rejection_reason=reason
        )
        logger.info(f"🚫 Admin {admin.id} rejected guide {guide.id}")

        create_notification(
            self.db,
            guide.user_id,
            NotificationType.GUIDE_REJECTED,
            "Profile rejected",
            f"Your guide profile was rejected: {reason}",
            data={"reason": reason},
            related_guide_id=guide.id,
            related_user_id=admin.id,
        )
        return guide

    def deactivate_guide(self, data: GuideAdminAction, admin: User) -> Guide:
        reason = self._require_reason(data)
        guide = self._get_guide_or_404(data.guide_id)

        if guide.status != GUIDE_APPROVED:
            raise HTTPException(status_code=400, detail="Only approved guides can be deactivated")
        if guide.is_deactivated:
            raise HTTPException(status_code=409, detail="Guide is already deactivated")

        guide = self.repo.update_guide(
            self.db, guide, is_deactivated=True, deactivation_reason=reason
        )
        logger.info(f"⏸️ Admin {admin.id} deactivated guide {guide.id}")

        create_notification(
            self.db,
            guide.user_id,
            NotificationType.GUIDE_DEACTIVATED,
            "Account deactivated",
            f"Your guide account has been deactivated: {reason}",
            data={"reason": reason},
            related_guide_id=guide.id,
            related_user_id=admin.id,
        )
        return guide

    def reactivate_guide(self, data: GuideAdminAction, admin: User) -> Guide:
        guide = self._get_guide_or_404(data.guide_id)
        if not guide.is_deactivated:
            raise HTTPException(status_code=409, detail="Guide is not deactivated")

        guide = self.repo.update_guide(
            self.db, guide, is_deactivated=False, deactivation_reason=None
        )
        logger.info(f"▶️ Admin {admin.id} reactivated guide {guide.id}")

        create_notification(
            self.db,
            guide.user_id,
            NotificationType.GUIDE_REACTIVATED,
            "Account reactivated",
            "Your guide account is active again and visible to tourists.",
            related_guide_id=guide.id,
            related_user_id=admin.id,
        )
        return guide

    async def delete_guide(self, data: GuideAdminAction, admin: User) -> dict:
        """
        Delete a guide with its itineraries, availability, saved entries and user row,
        then remove the auth user at the provider. Bookings and reviews stay as history.
        """
        guide = self._get_guide_or_404(data.guide_id)
        guide_id = guide.id
        user_id = guide.user_id
        guide_name = guide.name

        try:
            self.repo.delete_guide_data(self.db, guide)
            self.db.flush()
            user = self.db.query(User).filter(User.id == user_id).first()
            if user:
                self.db.delete(user)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to delete guide {guide_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete guide") from e

        logger.info(f"🗑️ Admin {admin.id} deleted guide {guide_id} ({guide_name})")

        # Notification rows have no foreign key to users
        create_notification(
            self.db,
            user_id,
            NotificationType.GUIDE_DELETED,
            "Guide account deleted",
            "Your guide account has been removed by an administrator.",
            related_guide_id=guide_id,
            related_user_id=admin.id,
        )

        auth_deleted = await delete_auth_user(user_id)
        return {
            "message": "Guide and associated data deleted successfully",
            "guide_id": guide_id,
            "auth_user_deleted": auth_deleted,
        }
