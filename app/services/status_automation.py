"""
Booking status rules and automated transitions
Holds the booking transition table, the completed → past archival job
and the trips_completed resync used by the admin API and the worker
"""

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..config import PAST_BOOKING_GRACE_DAYS
from ..models import (
    BOOKING_ACCEPTED,
    BOOKING_CANCELLED,
    BOOKING_COMPLETED,
    BOOKING_PAST,
    BOOKING_PENDING,
    BOOKING_REJECTED,
    BOOKING_STATUSES,
    Booking,
    Guide,
)

logger = logging.getLogger(__name__)

# Parties that can act on a booking
ACTOR_TOURIST = "tourist"
ACTOR_GUIDE = "guide"
ACTOR_ADMIN = "admin"
ACTOR_SYSTEM = "system"

# (from, to) -> actors allowed to make the move
BOOKING_TRANSITIONS = {
    (BOOKING_PENDING, BOOKING_ACCEPTED): {ACTOR_GUIDE, ACTOR_ADMIN},
    (BOOKING_PENDING, BOOKING_REJECTED): {ACTOR_GUIDE, ACTOR_ADMIN},
    (BOOKING_PENDING, BOOKING_CANCELLED): {ACTOR_TOURIST, ACTOR_GUIDE, ACTOR_ADMIN},
    (BOOKING_ACCEPTED, BOOKING_CANCELLED): {ACTOR_TOURIST, ACTOR_GUIDE, ACTOR_ADMIN},
    (BOOKING_ACCEPTED, BOOKING_COMPLETED): {ACTOR_GUIDE, ACTOR_ADMIN},
    (BOOKING_COMPLETED, BOOKING_PAST): {ACTOR_SYSTEM},
}

# Statuses that count as a finished trip for trips_completed
FINISHED_TRIP_STATUSES = (BOOKING_COMPLETED, BOOKING_PAST)


def validate_status_transition(current_status: str, new_status: str, actors: Optional[set] = None) -> bool:
    """
    Validate if a booking status transition is allowed

    Booking statuses: pending → accepted → completed → past,
    pending → rejected, pending/accepted → cancelled

    Note:
    - 'past' is archival only (set by the scheduled job, never by an HTTP caller)
    - same-status updates are not transitions and are rejected

    Args:
        current_status: Current booking status
        new_status: Desired new status
        actors: Roles the caller holds on this booking; None checks the table only

    Returns:
        bool: True if transition is valid, False otherwise
    """
    allowed_actors = BOOKING_TRANSITIONS.get((current_status, new_status))
    if not allowed_actors:
        return False
    if actors is None:
        return True
    return bool(allowed_actors & set(actors))


def allowed_source_statuses(new_status: str, actors: set) -> list[str]:
    """Statuses a booking may currently hold for the given actors to move it to new_status"""
    return [
        current
        for (current, target), allowed in BOOKING_TRANSITIONS.items()
        if target == new_status and allowed & actors
    ]


def archive_past_bookings(db: Session, today: Optional[date] = None) -> dict:
    """
    Move completed bookings whose trip date is older than the grace period to 'past'
    Should be run as a scheduled job (daily cron)

    Returns:
        dict: Summary of status changes made
    """
    today = today or date.today()
    cutoff = today - timedelta(days=PAST_BOOKING_GRACE_DAYS)

    summary = {"completed_to_past": 0, "total_updated": 0, "cutoff_date": cutoff.isoformat()}

    try:
        count = (
            db.query(Booking)
            .filter(Booking.status == BOOKING_COMPLETED, Booking.booking_date < cutoff)
            .update({"status": BOOKING_PAST}, synchronize_session=False)
        )
        if count > 0:
            db.commit()
            summary["completed_to_past"] = count
            summary["total_updated"] = count
            logger.info(f"📊 Status automation summary: {summary}")
        else:
            db.rollback()
            logger.debug("ℹ️ No booking status updates needed")

        return summary

    except Exception as e:
        logger.error(f"❌ Error archiving past bookings: {str(e)}")
        db.rollback()
        raise


def sync_trips_completed(db: Session, guide_id: Optional[str] = None) -> dict:
    """
    Recompute trips_completed from bookings: count(completed) + count(past)

    Args:
        db: Database session
        guide_id: Limit the resync to one guide; None resyncs every guide

    Returns:
        dict: {"updated": int, "guides": [{"guide_id", "previous", "trips_completed"}]}
    """
    counts_query = db.query(Booking.guide_id, func.count(Booking.id)).filter(
        Booking.status.in_(FINISHED_TRIP_STATUSES)
    )
    guides_query = db.query(Guide)
    if guide_id:
        counts_query = counts_query.filter(Booking.guide_id == guide_id)
        guides_query = guides_query.filter(Guide.id == guide_id)

    counts = dict(counts_query.group_by(Booking.guide_id).all())

    results = []
    updated = 0
    try:
        for guide in guides_query.all():
            expected = counts.get(guide.id, 0)
            previous = guide.trips_completed or 0
            if previous != expected:
                guide.trips_completed = expected
                updated += 1
                logger.info(f"🔄 Guide {guide.id} trips_completed: {previous} → {expected}")
            results.append(
                {"guide_id": guide.id, "previous": previous, "trips_completed": expected}
            )
        db.commit()
    except Exception as e:
        logger.error(f"❌ Error syncing trips_completed: {str(e)}")
        db.rollback()
        raise

    return {"updated": updated, "guides": results}


def get_booking_status_summary(db: Session) -> dict:
    """Count bookings by status, with zeros for statuses that have no bookings"""
    summary = {status: 0 for status in BOOKING_STATUSES}
    for status, count in db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all():
        if status in summary:
            summary[status] = count
    return summary
