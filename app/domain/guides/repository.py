"""Guide repository - Database operations for guides"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import (
    GUIDE_APPROVED,
    Guide,
    GuideAvailability,
    GuideItinerary,
    RatingReview,
    SavedGuide,
    User,
)


class GuideRepository:
    """Repository for guide database operations"""

    @staticmethod
    def get_guide_by_id(db: Session, guide_id: str) -> Optional[Guide]:
        return db.query(Guide).filter(Guide.id == guide_id).first()

    @staticmethod
    def get_guide_by_user_id(db: Session, user_id: str) -> Optional[Guide]:
        return db.query(Guide).filter(Guide.user_id == user_id).first()

    @staticmethod
    def active_guides_query(db: Session):
        """Approved guides that are not deactivated"""
        return db.query(Guide).filter(
            Guide.status == GUIDE_APPROVED, Guide.is_deactivated.is_(False)
        )

    @staticmethod
    def get_approved_guides(db: Session, limit: Optional[int] = None) -> list[Guide]:
        """Get approved, active guides, newest first"""
        query = GuideRepository.active_guides_query(db).order_by(Guide.created_at.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def get_guides(db: Session, status: Optional[str] = None) -> list[Guide]:
        query = db.query(Guide)
        if status:
            query = query.filter(Guide.status == status)
        return query.order_by(Guide.created_at.desc()).all()

    @staticmethod
    def create_guide(db: Session, user: User, **guide_data) -> Guide:
        """Create a guide profile and assign the guide role in one commit"""
        guide = Guide(user_id=user.id, **guide_data)
        db.add(guide)
        db.commit()
        db.refresh(guide)
        return guide

    @staticmethod
    def update_guide(db: Session, guide: Guide, **updates) -> Guide:
        """Update a guide with provided fields"""
        for key, value in updates.items():
            if hasattr(guide, key):
                setattr(guide, key, value)

        db.commit()
        db.refresh(guide)
        return guide

    @staticmethod
    def get_rating_stats(db: Session, guide_id: str) -> tuple[Optional[float], int]:
        """Average rating and number of ratings for a guide"""
        average, count = (
            db.query(func.avg(RatingReview.rating), func.count(RatingReview.id))
            .filter(RatingReview.guide_id == guide_id)
            .one()
        )
        return (round(float(average), 2) if average is not None else None), count

    @staticmethod
    def get_latest_availability_map(db: Session) -> dict[str, GuideAvailability]:
        """Latest availability row per guide (last-created wins)"""
        latest: dict[str, GuideAvailability] = {}
        rows = db.query(GuideAvailability).order_by(GuideAvailability.created_at.asc()).all()
        for row in rows:
            latest[row.guide_id] = row
        return latest

    @staticmethod
    def delete_guide_data(db: Session, guide: Guide) -> None:
        """
        Remove a guide with its itineraries, availability and saved entries.
        Does not commit; bookings and reviews are kept as history.
        """
        db.query(GuideItinerary).filter(GuideItinerary.guide_id == guide.id).delete(
            synchronize_session=False
        )
        db.query(GuideAvailability).filter(GuideAvailability.guide_id == guide.id).delete(
            synchronize_session=False
        )
        db.query(SavedGuide).filter(SavedGuide.guide_id == guide.id).delete(
            synchronize_session=False
        )
        db.delete(guide)
