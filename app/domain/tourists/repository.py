"""Tourist repository - Database operations for tourist profiles and saved guides"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import GUIDE_APPROVED, Guide, SavedGuide, TouristProfile


class TouristRepository:
    """Repository for tourist database operations"""

    @staticmethod
    def get_profile(db: Session, user_id: str) -> Optional[TouristProfile]:
        return db.query(TouristProfile).filter(TouristProfile.user_id == user_id).first()

    @staticmethod
    def get_profiles(db: Session) -> list[TouristProfile]:
        return db.query(TouristProfile).order_by(TouristProfile.created_at.desc()).all()

    @staticmethod
    def create_profile(db: Session, **fields) -> TouristProfile:
        profile = TouristProfile(**fields)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def get_saved(db: Session, tourist_id: str, guide_id: str) -> Optional[SavedGuide]:
        return (
            db.query(SavedGuide)
            .filter(SavedGuide.tourist_id == tourist_id, SavedGuide.guide_id == guide_id)
            .first()
        )

    @staticmethod
    def get_saved_guides(db: Session, tourist_id: str) -> list[tuple[SavedGuide, Guide]]:
        """Saved entries joined with their guide, limited to approved, active guides"""
        return (
            db.query(SavedGuide, Guide)
            .join(Guide, Guide.id == SavedGuide.guide_id)
            .filter(
                SavedGuide.tourist_id == tourist_id,
                Guide.status == GUIDE_APPROVED,
                Guide.is_deactivated.is_(False),
            )
            .order_by(SavedGuide.created_at.desc())
            .all()
        )
