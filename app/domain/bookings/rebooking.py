"""
Rebooking validation
Re-checks a previous booking's guide, availability window and itinerary,
short-circuiting at the first failing check
"""

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...models import GUIDE_APPROVED, Booking, GuideAvailability
from ..availability.repository import AvailabilityRepository
from ..guides.repository import GuideRepository
from ..itineraries.repository import ItineraryRepository

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_WARNING = "warning"
STATUS_ERROR = "error"

CHECK_PASSED = "passed"
CHECK_SKIPPED = "skipped"

# Upper bound on the dates offered to the date picker
MAX_CANDIDATE_DATES = 90


def candidate_dates(availability: GuideAvailability, today: date) -> list[date]:
    """Bookable dates of a window: from max(start, today) to end"""
    start = max(availability.start_date, today)
    days = (availability.end_date - start).days + 1
    return [start + timedelta(days=offset) for offset in range(max(0, min(days, MAX_CANDIDATE_DATES)))]


def validate_rebooking(
    db: Session,
    booking: Booking,
    candidate_date: Optional[date] = None,
    today: Optional[date] = None,
) -> dict:
    """
    Validate that a previous booking can be booked again

    Checks run in order (guide, availability, itinerary) and the first failing
    check decides overall_status: "error" when rebooking is impossible, "warning"
    when it may become possible later (guide on leave, no free date).

    Args:
        db: Database session
        booking: The booking to rebook
        candidate_date: Date the tourist wants; None accepts any date in the window
        today: Reference date for "in the past" checks

    Returns:
        dict matching RebookingValidation
    """
    today = today or date.today()
    checks = {
        "guide": {"status": CHECK_SKIPPED, "message": "Not checked"},
        "availability": {"status": CHECK_SKIPPED, "message": "Not checked"},
        "itinerary": {"status": CHECK_SKIPPED, "message": "Not checked"},
    }
    result = {
        "booking_id": booking.id,
        "overall_status": STATUS_SUCCESS,
        "message": "",
        "checks": checks,
        "guide": None,
        "itinerary": None,
        "availability_start": None,
        "availability_end": None,
        "candidate_dates": [],
    }

    def finish(status: str, check: str, message: str) -> dict:
        checks[check] = {"status": status, "message": message}
        result["overall_status"] = status
        result["message"] = message
        logger.info(f"🔎 Rebooking validation for booking {booking.id}: {status} ({check}) - {message}")
        return result

    if not booking.guide_id or not booking.itinerary_id:
        return finish(STATUS_ERROR, "guide", "This booking has no guide or itinerary to rebook")

    # 1. Guide still exists and can take bookings
    guide = GuideRepository.get_guide_by_id(db, booking.guide_id)
    if not guide:
        return finish(STATUS_ERROR, "guide", "This guide is no longer on the platform")
    result["guide"] = guide
    if guide.status != GUIDE_APPROVED or guide.is_deactivated:
        return finish(STATUS_ERROR, "guide", "This guide is not accepting bookings at the moment")
    checks["guide"] = {"status": CHECK_PASSED, "message": "Guide is active"}

    # 2. Latest availability window is open and covers a candidate date
    availability = AvailabilityRepository.get_latest(db, guide.id)
    if not availability:
        return finish(STATUS_WARNING, "availability", "This guide has not published availability yet")
    result["availability_start"] = availability.start_date
    result["availability_end"] = availability.end_date
    if not availability.is_available:
        return finish(STATUS_WARNING, "availability", "This guide is currently on leave")

    dates = candidate_dates(availability, today)
    result["candidate_dates"] = dates
    if not dates:
        return finish(
            STATUS_WARNING, "availability", "This guide's availability window has already ended"
        )
    if candidate_date is not None and (
        candidate_date < today or not availability.covers(candidate_date)
    ):
        return finish(
            STATUS_WARNING,
            "availability",
            f"The guide is only available from {dates[0].isoformat()} to {availability.end_date.isoformat()}",
        )
    checks["availability"] = {"status": CHECK_PASSED, "message": "Guide is available"}

    # 3. The booked itinerary still exists under this guide
    itinerary = ItineraryRepository.get_by_id(db, booking.itinerary_id, guide_id=guide.id)
    if not itinerary:
        return finish(STATUS_ERROR, "itinerary", "The itinerary from this booking is no longer offered")
    result["itinerary"] = itinerary
    checks["itinerary"] = {"status": CHECK_PASSED, "message": "Itinerary is available"}

    result["message"] = "You can book this guide again"
    return result
