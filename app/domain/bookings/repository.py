"""Booking repository - Database operations for bookings"""

from typing import Optional, Sequence

from sqlalchemy.orm import Session, selectinload

from ...models import ACTIVE_BOOKING_STATUSES, Booking, Guide, utcnow


def _with_summaries(query):
    return query.options(
        selectinload(Booking.guide),
        selectinload(Booking.itinerary),
        selectinload(Booking.tourist),
    )


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_booking(db: Session, booking_id: str) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def get_active_booking(db: Session, tourist_id: str, guide_id: str) -> Optional[Booking]:
        """A pending or accepted booking between this tourist and guide, if any"""
        return (
            db.query(Booking)
            .filter(
                Booking.tourist_id == tourist_id,
                Booking.guide_id == guide_id,
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            )
            .first()
        )

    @staticmethod
    def add_booking(db: Session, **fields) -> Booking:
        """Stage a booking in the current transaction"""
        booking = Booking(**fields)
        db.add(booking)
        return booking

    @staticmethod
    def guarded_status_update(
        db: Session, booking_id: str, new_status: str, allowed_from: Sequence[str]
    ) -> int:
        """
        UPDATE bookings SET status=:new WHERE id=:id AND status IN (:allowed_from)

        Returns the number of rows changed; 0 means the booking is no longer in an
        allowed status. Does not commit.
        """
        return (
            db.query(Booking)
            .filter(Booking.id == booking_id, Booking.status.in_(list(allowed_from)))
            .update({"status": new_status, "updated_at": utcnow()}, synchronize_session=False)
        )

    @staticmethod
    def increment_trips_completed(db: Session, guide_id: str) -> int:
        """trips_completed = trips_completed + 1, evaluated in the database. Does not commit."""
        return (
            db.query(Guide)
            .filter(Guide.id == guide_id)
            .update(
                {Guide.trips_completed: Guide.trips_completed + 1},
                synchronize_session=False,
            )
        )

    @staticmethod
    def get_tourist_bookings(db: Session, tourist_id: str) -> list[Booking]:
        return (
            _with_summaries(db.query(Booking))
            .filter(Booking.tourist_id == tourist_id)
            .order_by(Booking.created_at.desc())
            .all()
        )

    @staticmethod
    def get_guide_bookings(
        db: Session, guide_id: str, statuses: Sequence[str], newest_first: bool = False
    ) -> list[Booking]:
        order = Booking.booking_date.desc() if newest_first else Booking.booking_date.asc()
        return (
            _with_summaries(db.query(Booking))
            .filter(Booking.guide_id == guide_id, Booking.status.in_(list(statuses)))
            .order_by(order, Booking.created_at.asc())
            .all()
        )

    @staticmethod
    def get_all_bookings(db: Session, statuses: Optional[Sequence[str]] = None) -> list[Booking]:
        query = _with_summaries(db.query(Booking))
        if statuses:
            query = query.filter(Booking.status.in_(list(statuses)))
        return query.order_by(Booking.created_at.desc()).all()
