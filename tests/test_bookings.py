from datetime import date, timedelta

import pytest
from fastapi import HTTPException

from app.domain.bookings.schemas import BookingStatusUpdate
from app.domain.bookings.service import BookingService
from app.models import (
    BOOKING_ACCEPTED,
    BOOKING_CANCELLED,
    BOOKING_COMPLETED,
    BOOKING_PAST,
    BOOKING_PENDING,
    Booking,
    Guide,
    Notification,
    User,
)
from app.services.status_automation import validate_status_transition
from tests.conftest import auth_headers


def _create(client, tourist, guide, itinerary, booking_date=None):
    booking_date = booking_date or date.today() + timedelta(days=5)
    return client.post(
        "/api/create-booking",
        json={
            "guide_id": guide.id,
            "itinerary_id": itinerary.id,
            "booking_date": booking_date.isoformat(),
        },
        headers=auth_headers(tourist),
    )


def _set_status(client, user, booking_id, status):
    return client.patch(
        "/api/update-booking-status",
        json={"booking_id": booking_id, "status": status},
        headers=auth_headers(user),
    )


@pytest.fixture
def guide_user(db, bookable_guide):
    guide, _ = bookable_guide
    return db.get(User, guide.user_id)


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


def test_create_booking_is_pending_with_itinerary_price(client, db, make_tourist, bookable_guide):
    guide, itinerary = bookable_guide
    tourist = make_tourist()

    response = _create(client, tourist, guide, itinerary)

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == BOOKING_PENDING
    assert body["price"] == 2500
    assert body["price_type"] == "per_day"
    assert body["tourist_id"] == tourist.id
    assert body["guide"]["name"] == "Ravi Kumar"

    notification = db.query(Notification).filter(Notification.user_id == guide.user_id).one()
    assert notification.type == "booking_created"
    assert notification.related_booking_id == body["id"]


def test_only_tourists_can_book(client, admin, bookable_guide):
    guide, itinerary = bookable_guide
    assert _create(client, admin, guide, itinerary).status_code == 403


def test_duplicate_active_booking_conflicts(client, make_tourist, bookable_guide):
    guide, itinerary = bookable_guide
    tourist = make_tourist()

    assert _create(client, tourist, guide, itinerary).status_code == 201
    response = _create(client, tourist, guide, itinerary, date.today() + timedelta(days=6))

    assert response.status_code == 409


def test_new_booking_allowed_after_previous_is_cancelled(client, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    tourist = make_tourist()
    make_booking(tourist, guide, itinerary, status=BOOKING_CANCELLED)

    assert _create(client, tourist, guide, itinerary).status_code == 201


def test_booking_date_outside_window_rejected(client, make_tourist, bookable_guide):
    guide, itinerary = bookable_guide
    response = _create(client, make_tourist(), guide, itinerary, date.today() + timedelta(days=60))
    assert response.status_code == 400
    assert "only available from" in response.json()["detail"]


def test_booking_date_in_past_rejected(client, make_tourist, bookable_guide):
    guide, itinerary = bookable_guide
    response = _create(client, make_tourist(), guide, itinerary, date.today() - timedelta(days=1))
    assert response.status_code == 400


def test_booking_guide_on_leave_rejected(client, make_tourist, make_guide, make_availability, make_itinerary):
    guide = make_guide()
    make_availability(guide, is_available=False)
    itinerary = make_itinerary(guide)

    response = _create(client, make_tourist(), guide, itinerary)

    assert response.status_code == 400
    assert response.json()["detail"] == "This guide is currently on leave"


def test_booking_unapproved_guide_rejected(client, make_tourist, make_guide, make_availability, make_itinerary):
    guide = make_guide(status="pending")
    make_availability(guide)
    itinerary = make_itinerary(guide)

    assert _create(client, make_tourist(), guide, itinerary).status_code == 400


def test_booking_itinerary_of_other_guide_not_found(client, make_tourist, make_guide, make_itinerary, bookable_guide):
    guide, _ = bookable_guide
    other_itinerary = make_itinerary(make_guide(name="Other"))

    assert _create(client, make_tourist(), guide, other_itinerary).status_code == 404


# ---------------------------------------------------------------------------
# Status transitions
# ---------------------------------------------------------------------------


def test_transition_table():
    assert validate_status_transition(BOOKING_PENDING, BOOKING_ACCEPTED)
    assert validate_status_transition(BOOKING_ACCEPTED, BOOKING_COMPLETED)
    assert validate_status_transition(BOOKING_COMPLETED, BOOKING_PAST, {"system"})
    assert not validate_status_transition(BOOKING_COMPLETED, BOOKING_PAST, {"admin"})
    assert not validate_status_transition(BOOKING_PENDING, BOOKING_COMPLETED)
    assert not validate_status_transition(BOOKING_CANCELLED, BOOKING_ACCEPTED)
    assert not validate_status_transition(BOOKING_ACCEPTED, BOOKING_ACCEPTED)
    assert not validate_status_transition(BOOKING_PENDING, BOOKING_ACCEPTED, {"tourist"})


def test_guide_accepts_pending_booking(client, db, guide_user, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    tourist = make_tourist()
    booking = make_booking(tourist, guide, itinerary)

    response = _set_status(client, guide_user, booking.id, BOOKING_ACCEPTED)

    assert response.status_code == 200
    assert response.json()["status"] == BOOKING_ACCEPTED
    notification = db.query(Notification).filter(Notification.user_id == tourist.id).one()
    assert notification.type == "booking_confirmed"


def test_tourist_cannot_accept_own_booking(client, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    tourist = make_tourist()
    booking = make_booking(tourist, guide, itinerary)

    response = _set_status(client, tourist, booking.id, BOOKING_ACCEPTED)

    assert response.status_code == 403


def test_tourist_can_cancel_pending_booking(client, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    tourist = make_tourist()
    booking = make_booking(tourist, guide, itinerary)

    response = _set_status(client, tourist, booking.id, BOOKING_CANCELLED)

    assert response.status_code == 200
    assert response.json()["status"] == BOOKING_CANCELLED


def test_stranger_cannot_touch_booking(client, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    booking = make_booking(make_tourist(), guide, itinerary)

    response = _set_status(client, make_tourist(name="Stranger"), booking.id, BOOKING_CANCELLED)

    assert response.status_code == 403


def test_invalid_transition_returns_400(client, guide_user, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    booking = make_booking(make_tourist(), guide, itinerary)

    response = _set_status(client, guide_user, booking.id, BOOKING_COMPLETED)

    assert response.status_code == 400


def test_past_cannot_be_set_over_http(client, admin, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    booking = make_booking(make_tourist(), guide, itinerary, status=BOOKING_COMPLETED)

    response = _set_status(client, admin, booking.id, BOOKING_PAST)

    assert response.status_code == 400


def test_unknown_status_is_422(client, admin, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    booking = make_booking(make_tourist(), guide, itinerary)
    assert _set_status(client, admin, booking.id, "confirmed").status_code == 422


def test_missing_booking_returns_404(client, admin):
    assert _set_status(client, admin, "does-not-exist", BOOKING_CANCELLED).status_code == 404


def test_completing_increments_trips_completed(client, db, guide_user, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    tourist = make_tourist()
    booking = make_booking(tourist, guide, itinerary, status=BOOKING_ACCEPTED)

    response = _set_status(client, guide_user, booking.id, BOOKING_COMPLETED)

    assert response.status_code == 200
    db.expire_all()
    assert db.get(Guide, guide.id).trips_completed == 1
    types = {n.type for n in db.query(Notification).filter(Notification.user_id == tourist.id)}
    assert types == {"booking_completed"}


def test_second_completion_is_refused(client, db, guide_user, admin, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    booking = make_booking(make_tourist(), guide, itinerary, status=BOOKING_ACCEPTED)

    assert _set_status(client, guide_user, booking.id, BOOKING_COMPLETED).status_code == 200
    assert _set_status(client, admin, booking.id, BOOKING_COMPLETED).status_code == 400

    db.expire_all()
    assert db.get(Guide, guide.id).trips_completed == 1


def test_concurrent_change_returns_409(db, guide_user, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    tourist = make_tourist()
    booking = make_booking(tourist, guide, itinerary)
    # What the guide's request read before the tourist's cancel landed
    stale = Booking(
        id=booking.id,
        tourist_id=tourist.id,
        guide_id=guide.id,
        itinerary_id=itinerary.id,
        booking_date=booking.booking_date,
        status=BOOKING_PENDING,
        price=booking.price,
        price_type=booking.price_type,
    )
    booking.status = BOOKING_CANCELLED
    db.commit()

    service = BookingService(db)
    service.repo.get_booking = lambda _db, _id: stale

    with pytest.raises(HTTPException) as exc_info:
        service.update_status(
            BookingStatusUpdate(booking_id=booking.id, status=BOOKING_ACCEPTED), guide_user
        )

    assert exc_info.value.status_code == 409
    db.expire_all()
    assert db.get(Booking, booking.id).status == BOOKING_CANCELLED


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


def test_guide_listings_split_by_status(client, guide_user, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    today = date.today()
    pending = make_booking(make_tourist(name="A"), guide, itinerary)
    later = make_booking(make_tourist(name="B"), guide, itinerary, BOOKING_ACCEPTED, today + timedelta(days=9))
    sooner = make_booking(make_tourist(name="C"), guide, itinerary, BOOKING_ACCEPTED, today + timedelta(days=2))
    old = make_booking(make_tourist(name="D"), guide, itinerary, BOOKING_PAST, today - timedelta(days=30))
    recent = make_booking(make_tourist(name="E"), guide, itinerary, BOOKING_COMPLETED, today - timedelta(days=1))
    headers = auth_headers(guide_user)

    requests = client.get("/api/get-guide-booking-requests", headers=headers).json()["bookings"]
    confirmed = client.get("/api/get-guide-confirmed-bookings", headers=headers).json()["bookings"]
    past = client.get("/api/get-guide-past-bookings", headers=headers).json()["bookings"]

    assert [b["id"] for b in requests] == [pending.id]
    assert requests[0]["tourist"]["name"] == "A"
    assert [b["id"] for b in confirmed] == [sooner.id, later.id]
    assert [b["id"] for b in past] == [recent.id, old.id]


def test_tourist_sees_only_own_bookings(client, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    mine = make_tourist()
    make_booking(mine, guide, itinerary)
    make_booking(make_tourist(name="Someone else"), guide, itinerary)

    bookings = client.get("/api/get-tourist-bookings", headers=auth_headers(mine)).json()["bookings"]

    assert len(bookings) == 1
    assert bookings[0]["tourist_id"] == mine.id
    assert bookings[0]["itinerary"]["places_to_visit"] == "Amber Fort, Hawa Mahal, City Palace"


def test_admin_booking_filters(client, admin, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    make_booking(make_tourist(), guide, itinerary, BOOKING_PENDING)
    make_booking(make_tourist(), guide, itinerary, BOOKING_ACCEPTED)
    make_booking(make_tourist(), guide, itinerary, BOOKING_COMPLETED)
    make_booking(make_tourist(), guide, itinerary, BOOKING_PAST)
    headers = auth_headers(admin)

    def statuses(filter_name):
        response = client.get(f"/api/get-admin-bookings?status={filter_name}", headers=headers)
        return sorted(b["status"] for b in response.json()["bookings"])

    assert statuses("active") == [BOOKING_ACCEPTED]
    assert statuses("past") == [BOOKING_COMPLETED, BOOKING_PAST]
    assert len(statuses("all")) == 4
    assert client.get("/api/get-admin-bookings?status=weird", headers=headers).status_code == 400


def test_sync_trips_completed_endpoint(client, db, admin, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    make_booking(make_tourist(), guide, itinerary, BOOKING_COMPLETED)
    make_booking(make_tourist(), guide, itinerary, BOOKING_PAST)
    make_booking(make_tourist(), guide, itinerary, BOOKING_CANCELLED)

    response = client.post(f"/api/sync-trips-completed?guide_id={guide.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["updated"] == 1
    assert response.json()["guides"] == [{"guide_id": guide.id, "previous": 0, "trips_completed": 2}]
    db.expire_all()
    assert db.get(Guide, guide.id).trips_completed == 2


def test_sync_trips_completed_unknown_guide(client, admin):
    response = client.get("/api/sync-trips-completed?guide_id=missing", headers=auth_headers(admin))
    assert response.status_code == 404
