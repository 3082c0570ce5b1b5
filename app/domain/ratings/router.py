"""Rating router - FastAPI endpoints for ratings and reviews"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_role
from ...database import get_db
from ...models import ROLE_TOURIST, User
from ...rate_limiter import create_rate_limiter
from .schemas import BookingRatingResponse, RatingCreate, RatingResponse, RatingSaveResponse
from .service import RatingService

router = APIRouter(tags=["Ratings"])

rate_limit_ratings = create_rate_limiter(limit=20, window_seconds=60, key_prefix="create_rating")


def get_rating_service(db: Session = Depends(get_db)) -> RatingService:
    """Dependency injection for RatingService"""
    return RatingService(db)


@router.post("/create-rating-review", response_model=RatingSaveResponse)
async def create_rating_review(
    data: RatingCreate,
    tourist: User = Depends(require_role(ROLE_TOURIST)),
    service: RatingService = Depends(get_rating_service),
    _: None = Depends(rate_limit_ratings),
):
    """Rate a completed booking (creates or replaces the rating)"""
    return service.create_or_update(data, tourist)


@router.get("/get-booking-rating", response_model=BookingRatingResponse)
async def get_booking_rating(
    booking_id: str = Query(...),
    current_user: User = Depends(get_current_user),
    service: RatingService = Depends(get_rating_service),
):
    return service.get_booking_rating(booking_id, current_user)


@router.get("/get-ratings-reviews")
async def get_ratings_reviews(
    type: str = Query("my"),
    current_user: User = Depends(get_current_user),
    service: RatingService = Depends(get_rating_service),
):
    """Ratings written by me, received by my guide profile, or all (admin)"""
    ratings = service.list_ratings(type, current_user)
    return {"ratings": [RatingResponse.model_validate(r) for r in ratings]}


@router.delete("/delete-rating-review")
async def delete_rating_review(
    rating_id: str = Query(...),
    current_user: User = Depends(get_current_user),
    service: RatingService = Depends(get_rating_service),
):
    return service.delete_rating(rating_id, current_user)


__all__ = ["router"]
