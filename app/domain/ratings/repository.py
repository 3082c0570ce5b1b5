"""Rating repository - Database operations for ratings and reviews"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models import RatingReview


class RatingRepository:
    """Repository for rating database operations"""

    @staticmethod
    def get_by_id(db: Session, rating_id: str) -> Optional[RatingReview]:
        return db.query(RatingReview).filter(RatingReview.id == rating_id).first()

    @staticmethod
    def get_by_booking(db: Session, booking_id: str) -> Optional[RatingReview]:
        return db.query(RatingReview).filter(RatingReview.booking_id == booking_id).first()

    @staticmethod
    def list_ratings(
        db: Session, tourist_id: Optional[str] = None, guide_id: Optional[str] = None
    ) -> list[RatingReview]:
        query = db.query(RatingReview).options(
            selectinload(RatingReview.guide), selectinload(RatingReview.tourist)
        )
        if tourist_id:
            query = query.filter(RatingReview.tourist_id == tourist_id)
        if guide_id:
            query = query.filter(RatingReview.guide_id == guide_id)
        return query.order_by(RatingReview.created_at.desc()).all()

    @staticmethod
    def save(db: Session, rating: RatingReview) -> RatingReview:
        db.add(rating)
        db.commit()
        db.refresh(rating)
        return rating

    @staticmethod
    def delete(db: Session, rating: RatingReview) -> None:
        db.delete(rating)
        db.commit()
