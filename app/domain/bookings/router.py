"""Booking router - FastAPI endpoints for the booking lifecycle"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_admin, get_current_guide, get_current_user, require_role
from ...database import get_db
from ...models import ROLE_ADMIN, ROLE_TOURIST, Guide, User
from ...rate_limiter import create_rate_limiter
from .schemas import (
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    RebookingValidation,
    RebookRequest,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Bookings"])

rate_limit_bookings = create_rate_limiter(limit=20, window_seconds=60, key_prefix="create_booking")

get_current_tourist = require_role(ROLE_TOURIST)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


# ============================================================================
# LIFECYCLE
# ============================================================================


@router.post("/create-booking", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    tourist: User = Depends(get_current_tourist),
    service: BookingService = Depends(get_booking_service),
    _: None = Depends(rate_limit_bookings),
):
    """Request a booking; it starts as pending until the guide responds"""
    return service.create_booking(data, tourist)


@router.patch("/update-booking-status", response_model=BookingResponse)
async def update_booking_status(
    data: BookingStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Accept, reject, cancel or complete a booking"""
    return service.update_status(data, current_user)


# ============================================================================
# LISTINGS
# ============================================================================


@router.get("/get-tourist-bookings")
async def get_tourist_bookings(
    tourist: User = Depends(get_current_tourist),
    service: BookingService = Depends(get_booking_service),
):
    bookings = service.get_tourist_bookings(tourist)
    return {"bookings": [BookingResponse.model_validate(b) for b in bookings]}


@router.get("/get-guide-booking-requests")
async def get_guide_booking_requests(
    guide: Guide = Depends(get_current_guide),
    service: BookingService = Depends(get_booking_service),
):
    """Pending requests awaiting the guide's answer"""
    bookings = service.get_guide_requests(guide.id)
    return {"bookings": [BookingResponse.model_validate(b) for b in bookings]}


@router.get("/get-guide-confirmed-bookings")
async def get_guide_confirmed_bookings(
    guide: Guide = Depends(get_current_guide),
    service: BookingService = Depends(get_booking_service),
):
    """Accepted bookings, soonest first"""
    bookings = service.get_guide_confirmed(guide.id)
    return {"bookings": [BookingResponse.model_validate(b) for b in bookings]}


@router.get("/get-guide-past-bookings")
async def get_guide_past_bookings(
    guide: Guide = Depends(get_current_guide),
    service: BookingService = Depends(get_booking_service),
):
    bookings = service.get_guide_past(guide.id)
    return {"bookings": [BookingResponse.model_validate(b) for b in bookings]}


@router.get("/get-admin-bookings")
async def get_admin_bookings(
    status: str = Query("all"),
    admin: User = Depends(get_current_admin),
    service: BookingService = Depends(get_booking_service),
):
    """All bookings for the admin dashboard: active, past or all"""
    bookings = service.get_admin_bookings(status)
    return {"bookings": [BookingResponse.model_validate(b) for b in bookings]}


# ============================================================================
# REBOOKING
# ============================================================================


@router.get("/validate-rebooking", response_model=RebookingValidation)
async def validate_rebooking(
    booking_id: str = Query(...),
    candidate_date: Optional[date] = Query(None),
    current_user: User = Depends(require_role(ROLE_TOURIST, ROLE_ADMIN)),
    service: BookingService = Depends(get_booking_service),
):
    """Check whether a previous booking's guide and itinerary can be booked again"""
    return service.validate_rebooking(booking_id, current_user, candidate_date)


@router.post("/rebook-guide", response_model=BookingResponse, status_code=201)
async def rebook_guide(
    data: RebookRequest,
    tourist: User = Depends(get_current_tourist),
    service: BookingService = Depends(get_booking_service),
    _: None = Depends(rate_limit_bookings),
):
    return service.rebook(data, tourist)


# ============================================================================
# MAINTENANCE
# ============================================================================


@router.api_route("/sync-trips-completed", methods=["GET", "POST"])
async def sync_trips_completed(
    guide_id: Optional[str] = Query(None),
    admin: User = Depends(get_current_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Recompute trips_completed from completed and past bookings"""
    logger.info(f"🔄 Admin {admin.id} syncing trips_completed (guide: {guide_id or 'all'})")
    return service.sync_trips_completed(guide_id)


__all__ = ["router"]
