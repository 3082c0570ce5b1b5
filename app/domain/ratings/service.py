"""Rating service - Tourist ratings and reviews of completed trips"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import BOOKING_COMPLETED, ROLE_ADMIN, RatingReview, User
from ...utils.sanitization import REVIEW_MAX_LENGTH, clean_text
from ..bookings.repository import BookingRepository
from ..guides.repository import GuideRepository
from ..notifications.schemas import NotificationType
from ..notifications.service import create_notification
from .repository import RatingRepository
from .schemas import RatingCreate

logger = logging.getLogger(__name__)

RATING_LIST_TYPES = ("my", "guide", "all")


class RatingService:
    """Service layer for rating business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = RatingRepository()

    def create_or_update(self, data: RatingCreate, tourist: User) -> dict:
        """Rate a completed booking; rating again replaces the earlier rating"""
        booking = BookingRepository.get_booking(self.db, data.booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        if booking.tourist_id != tourist.id:
            raise HTTPException(status_code=403, detail="You can only rate your own bookings")
        if booking.status != BOOKING_COMPLETED:
            logger.warning(f"⚠️ Rating refused for booking {booking.id} with status {booking.status}")
            raise HTTPException(
                status_code=400, detail="Only completed bookings can be rated"
            )

        try:
            review_text = clean_text(data.review_text, REVIEW_MAX_LENGTH, field="Review")
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        rating = self.repo.get_by_booking(self.db, booking.id)
        if rating:
            rating.rating = data.rating
            rating.review_text = review_text
            message = "Rating updated successfully"
        else:
            rating = RatingReview(
                booking_id=booking.id,
                tourist_id=tourist.id,
                guide_id=booking.guide_id,
                rating=data.rating,
                review_text=review_text,
            )
            message = "Rating created successfully"

        try:
            rating = self.repo.save(self.db, rating)
        except IntegrityError as e:
            # Another request rated this booking first; replace that rating instead
            self.db.rollback()
            rating = self.repo.get_by_booking(self.db, booking.id)
            if not rating:
                raise HTTPException(status_code=409, detail="Rating could not be saved, please retry") from e
            rating.rating = data.rating
            rating.review_text = review_text
            rating = self.repo.save(self.db, rating)
            message = "Rating updated successfully"

        logger.info(f"⭐ {message} for booking {booking.id}: {data.rating}/5")

        guide = GuideRepository.get_guide_by_id(self.db, rating.guide_id)
        if guide:
            create_notification(
                self.db,
                guide.user_id,
                NotificationType.RATING_RECEIVED,
                "New rating received",
                f"A tourist rated your trip {data.rating}/5.",
                data={"rating": data.rating},
                related_booking_id=booking.id,
                related_user_id=tourist.id,
                related_guide_id=guide.id,
            )
        return {"message": message, "rating": rating}

    def get_booking_rating(self, booking_id: str, user: User) -> dict:
        booking = BookingRepository.get_booking(self.db, booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")

        guide = GuideRepository.get_guide_by_user_id(self.db, user.id)
        is_party = booking.tourist_id == user.id or (guide and guide.id == booking.guide_id)
        if not is_party and user.role != ROLE_ADMIN:
            raise HTTPException(status_code=403, detail="You are not part of this booking")

        rating = self.repo.get_by_booking(self.db, booking_id)
        return {"hasRating": rating is not None, "rating": rating}

    def list_ratings(self, list_type: str, user: User) -> list[RatingReview]:
        if list_type not in RATING_LIST_TYPES:
            raise HTTPException(status_code=400, detail="type must be one of: my, guide, all")

        if list_type == "my":
            return self.repo.list_ratings(self.db, tourist_id=user.id)

        if list_type == "guide":
            guide = GuideRepository.get_guide_by_user_id(self.db, user.id)
            if not guide:
                raise HTTPException(status_code=404, detail="No guide profile found")
            return self.repo.list_ratings(self.db, guide_id=guide.id)

        if user.role != ROLE_ADMIN:
            raise HTTPException(status_code=403, detail="Only admins can view all ratings")
        return self.repo.list_ratings(self.db)

    def delete_rating(self, rating_id: str, user: User) -> dict:
        rating = self.repo.get_by_id(self.db, rating_id)
        if not rating:
            raise HTTPException(status_code=404, detail="Rating not found")
        if rating.tourist_id != user.id and user.role != ROLE_ADMIN:
            raise HTTPException(status_code=403, detail="You can only delete your own reviews")

        guide_id = rating.guide_id
        booking_id = rating.booking_id
        self.repo.delete(self.db, rating)
        logger.info(f"🗑️ Rating {rating_id} deleted by {user.id}")

        guide = GuideRepository.get_guide_by_id(self.db, guide_id)
        if guide:
            create_notification(
                self.db,
                guide.user_id,
                NotificationType.REVIEW_DELETED,
                "Review removed",
                "A review on one of your trips was removed.",
                related_booking_id=booking_id,
                related_user_id=user.id,
                related_guide_id=guide_id,
            )
        return {"message": "Rating deleted successfully"}
