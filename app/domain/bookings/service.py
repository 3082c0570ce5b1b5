"""Booking service - Booking lifecycle between tourists and guides"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import (
    BOOKING_ACCEPTED,
    BOOKING_CANCELLED,
    BOOKING_COMPLETED,
    BOOKING_PAST,
    BOOKING_PENDING,
    BOOKING_REJECTED,
    GUIDE_APPROVED,
    ROLE_ADMIN,
    Booking,
    User,
)
from ...services.status_automation import (
    ACTOR_ADMIN,
    ACTOR_GUIDE,
    ACTOR_TOURIST,
    allowed_source_statuses,
    sync_trips_completed,
    validate_status_transition,
)
from ..availability.repository import AvailabilityRepository
from ..guides.repository import GuideRepository
from ..itineraries.repository import ItineraryRepository
from ..notifications.schemas import NotificationType
from ..notifications.service import create_notification
from .rebooking import STATUS_SUCCESS, validate_rebooking
from .repository import BookingRepository
from .schemas import BookingCreate, BookingStatusUpdate, RebookRequest

logger = logging.getLogger(__name__)

ADMIN_BOOKING_FILTERS = {
    "active": (BOOKING_ACCEPTED,),
    "past": (BOOKING_COMPLETED, BOOKING_PAST),
    "all": None,
}

# new status -> (notification type, title, message for the other party)
STATUS_NOTIFICATIONS = {
    BOOKING_ACCEPTED: (
        NotificationType.BOOKING_CONFIRMED,
        "Booking confirmed",
        "Your booking for {date} has been confirmed by the guide.",
    ),
    BOOKING_REJECTED: (
        NotificationType.BOOKING_REJECTED,
        "Booking declined",
        "Your booking request for {date} was declined by the guide.",
    ),
    BOOKING_CANCELLED: (
        NotificationType.BOOKING_CANCELLED,
        "Booking cancelled",
        "The booking for {date} has been cancelled.",
    ),
    BOOKING_COMPLETED: (
        NotificationType.BOOKING_COMPLETED,
        "Trip completed",
        "Your trip on {date} is complete. Share your experience by rating your guide!",
    ),
}


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_booking(self, data: BookingCreate, tourist: User, today: Optional[date] = None) -> Booking:
        """
        Create a pending booking after re-validating everything server-side.

        The guide, itinerary, availability window and duplicate checks run in the
        same transaction as the insert; the availability row is read FOR UPDATE
        where the database supports it.
        """
        today = today or date.today()
        logger.info(f"📥 Creating booking for tourist {tourist.id} with guide {data.guide_id}")

        try:
            guide = GuideRepository.get_guide_by_id(self.db, data.guide_id)
            if not guide:
                raise HTTPException(status_code=404, detail="Guide not found")
            if guide.status != GUIDE_APPROVED or guide.is_deactivated:
                raise HTTPException(
                    status_code=400, detail="This guide is not accepting bookings"
                )

            itinerary = ItineraryRepository.get_by_id(self.db, data.itinerary_id, guide_id=guide.id)
            if not itinerary:
                raise HTTPException(status_code=404, detail="Itinerary not found for this guide")

            if data.booking_date < today:
                raise HTTPException(status_code=400, detail="Booking date cannot be in the past")

            availability = AvailabilityRepository.get_latest(self.db, guide.id, for_update=True)
            if not availability:
                raise HTTPException(status_code=400, detail="This guide has not set availability")
            if not availability.is_available:
                raise HTTPException(status_code=400, detail="This guide is currently on leave")
            if not availability.covers(data.booking_date):
                raise HTTPException(
                    status_code=400,
                    detail=(
                        f"Guide is only available from {availability.start_date.isoformat()} "
                        f"to {availability.end_date.isoformat()}"
                    ),
                )

            if self.repo.get_active_booking(self.db, tourist.id, guide.id):
                raise HTTPException(
                    status_code=409,
                    detail="You already have an active booking with this guide",
                )

            booking = self.repo.add_booking(
                self.db,
                tourist_id=tourist.id,
                guide_id=guide.id,
                itinerary_id=itinerary.id,
                booking_date=data.booking_date,
                status=BOOKING_PENDING,
                price=itinerary.price,
                price_type=itinerary.price_type,
            )
            self.db.commit()
        except HTTPException:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"❌ Booking insert failed for tourist {tourist.id}: {e}")
            raise HTTPException(status_code=409, detail="Booking could not be created") from e

        self.db.refresh(booking)
        guide_user_id = guide.user_id
        logger.info(f"✅ Booking {booking.id} created: tourist {tourist.id} → guide {booking.guide_id}")

        create_notification(
            self.db,
            guide_user_id,
            NotificationType.BOOKING_CREATED,
            "New booking request",
            f"You have a new booking request for {booking.booking_date.isoformat()}.",
            related_booking_id=booking.id,
            related_user_id=tourist.id,
        )
        return booking

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    def _actors(self, user: User, booking: Booking) -> set:
        """Roles the user holds on this booking"""
        actors = set()
        if user.role == ROLE_ADMIN:
            actors.add(ACTOR_ADMIN)
        if booking.tourist_id == user.id:
            actors.add(ACTOR_TOURIST)
        guide = GuideRepository.get_guide_by_user_id(self.db, user.id)
        if guide and guide.id == booking.guide_id:
            actors.add(ACTOR_GUIDE)
        return actors

    def update_status(self, data: BookingStatusUpdate, user: User) -> Booking:
        """
        Move a booking along the transition table with a guarded UPDATE.
        Completion bumps the guide's trips_completed in the same transaction.
        """
        booking = self.repo.get_booking(self.db, data.booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")

        actors = self._actors(user, booking)
        if not actors:
            logger.warning(f"⚠️ User {user.id} tried to update booking {booking.id} they are not part of")
            raise HTTPException(status_code=403, detail="You are not part of this booking")

        new_status = data.status
        current_status = booking.status

        if new_status == BOOKING_PAST:
            raise HTTPException(
                status_code=400, detail="Bookings are archived automatically and cannot be set to past"
            )
        if not validate_status_transition(current_status, new_status):
            raise HTTPException(
                status_code=400,
                detail=f"Cannot change booking status from {current_status} to {new_status}",
            )
        if not validate_status_transition(current_status, new_status, actors):
            raise HTTPException(
                status_code=403,
                detail=f"You are not allowed to change this booking to {new_status}",
            )

        allowed_from = allowed_source_statuses(new_status, actors)
        guide_id = booking.guide_id
        tourist_id = booking.tourist_id
        booking_id = booking.id

        try:
            updated = self.repo.guarded_status_update(self.db, booking_id, new_status, allowed_from)
            if updated == 0:
                self.db.rollback()
                logger.warning(f"⚠️ Booking {booking_id} changed concurrently; {current_status} → {new_status} refused")
                raise HTTPException(
                    status_code=409,
                    detail="This booking was updated by someone else. Please refresh and try again.",
                )
            if new_status == BOOKING_COMPLETED:
                self.repo.increment_trips_completed(self.db, guide_id)
            self.db.commit()
        except HTTPException:
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update booking {booking_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update booking status") from e

        booking = self.repo.get_booking(self.db, booking_id)
        logger.info(f"✅ Booking {booking_id} transitioned: {current_status} → {new_status} by {sorted(actors)}")

        self._notify_status_change(booking, new_status, actors, user, guide_id, tourist_id)
        return booking

    def _notify_status_change(self, booking, new_status, actors, user, guide_id, tourist_id):
        template = STATUS_NOTIFICATIONS.get(new_status)
        if not template:
            return
        notification_type, title, message = template
        message = message.format(date=booking.booking_date.isoformat())

        guide = GuideRepository.get_guide_by_id(self.db, guide_id)
        recipients = []
        if ACTOR_TOURIST not in actors or ACTOR_ADMIN in actors:
            recipients.append(tourist_id)
        if guide and (ACTOR_GUIDE not in actors or ACTOR_ADMIN in actors):
            recipients.append(guide.user_id)

        for recipient in recipients:
            if recipient == user.id:
                continue
            create_notification(
                self.db,
                recipient,
                notification_type,
                title,
                message,
                data={"status": new_status},
                related_booking_id=booking.id,
                related_user_id=user.id,
                related_guide_id=guide_id,
            )

        if new_status == BOOKING_COMPLETED and guide and guide.user_id != user.id:
            create_notification(
                self.db,
                guide.user_id,
                NotificationType.TRIP_COMPLETED,
                "Trip marked as completed",
                f"The trip on {booking.booking_date.isoformat()} was marked as completed.",
                related_booking_id=booking.id,
                related_guide_id=guide_id,
            )

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def get_tourist_bookings(self, tourist: User) -> list[Booking]:
        return self.repo.get_tourist_bookings(self.db, tourist.id)

    def get_guide_requests(self, guide_id: str) -> list[Booking]:
        return self.repo.get_guide_bookings(self.db, guide_id, (BOOKING_PENDING,))

    def get_guide_confirmed(self, guide_id: str) -> list[Booking]:
        return self.repo.get_guide_bookings(self.db, guide_id, (BOOKING_ACCEPTED,))

    def get_guide_past(self, guide_id: str) -> list[Booking]:
        return self.repo.get_guide_bookings(
            self.db, guide_id, (BOOKING_COMPLETED, BOOKING_PAST), newest_first=True
        )

    def get_admin_bookings(self, status_filter: str) -> list[Booking]:
        if status_filter not in ADMIN_BOOKING_FILTERS:
            raise HTTPException(
                status_code=400, detail="status must be one of: active, past, all"
            )
        return self.repo.get_all_bookings(self.db, ADMIN_BOOKING_FILTERS[status_filter])

    # ------------------------------------------------------------------
    # Rebooking
    # ------------------------------------------------------------------

    def _get_rebookable(self, booking_id: str, user: User) -> Booking:
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        if booking.tourist_id != user.id and user.role != ROLE_ADMIN:
            raise HTTPException(status_code=403, detail="You can only rebook your own bookings")
        return booking

    def validate_rebooking(self, booking_id: str, user: User, candidate_date: Optional[date] = None) -> dict:
        booking = self._get_rebookable(booking_id, user)
        return validate_rebooking(self.db, booking, candidate_date)

    def rebook(self, data: RebookRequest, tourist: User) -> Booking:
        """Validate the previous booking for the chosen date, then create a new booking"""
        booking = self._get_rebookable(data.booking_id, tourist)
        validation = validate_rebooking(self.db, booking, data.booking_date)
        if validation["overall_status"] != STATUS_SUCCESS:
            logger.warning(
                f"⚠️ Rebooking of {booking.id} refused: {validation['overall_status']} - {validation['message']}"
            )
            raise HTTPException(
                status_code=400,
                detail={
                    "message": validation["message"],
                    "overall_status": validation["overall_status"],
                },
            )

        return self.create_booking(
            BookingCreate(
                guide_id=booking.guide_id,
                itinerary_id=booking.itinerary_id,
                booking_date=data.booking_date,
            ),
            tourist,
        )

    def sync_trips_completed(self, guide_id: Optional[str]) -> dict:
        if guide_id and not GuideRepository.get_guide_by_id(self.db, guide_id):
            raise HTTPException(status_code=404, detail="Guide not found")
        return sync_trips_completed(self.db, guide_id)
