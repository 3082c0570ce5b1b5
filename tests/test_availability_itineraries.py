from datetime import date, timedelta

import pytest

from app.models import Booking, GuideAvailability, GuideItinerary, User
from tests.conftest import auth_headers

ITINERARY_PAYLOAD = {
    "number_of_days": 1,
    "timings": "6 AM - 11 AM",
    "description": "Sunrise boat ride & ghats walk",
    "places_to_visit": "Dashashwamedh Ghat, Assi Ghat",
    "price": 1500,
    "price_type": "per_trip",
}


@pytest.fixture
def guide_and_user(db, make_guide):
    guide = make_guide()
    return guide, db.get(User, guide.user_id)


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------


def test_get_availability_when_none_set(client, make_guide):
    guide = make_guide()
    body = client.get(f"/api/get-guide-availability?guideId={guide.id}").json()
    assert body == {"availability": None, "message": "No availability set"}


def test_set_availability_creates_then_updates(client, db, guide_and_user):
    guide, user = guide_and_user
    today = date.today()

    first = client.put(
        "/api/set-guide-availability",
        json={"start_date": today.isoformat(), "end_date": (today + timedelta(days=10)).isoformat()},
        headers=auth_headers(user),
    )
    second = client.put(
        "/api/set-guide-availability",
        json={"start_date": today.isoformat(), "end_date": (today + timedelta(days=20)).isoformat()},
        headers=auth_headers(user),
    )

    assert first.status_code == second.status_code == 200
    assert first.json()["id"] == second.json()["id"]
    assert second.json()["end_date"] == (today + timedelta(days=20)).isoformat()
    assert db.query(GuideAvailability).filter(GuideAvailability.guide_id == guide.id).count() == 1

    fetched = client.get(f"/api/get-guide-availability?guideId={guide.id}").json()
    assert fetched["availability"]["id"] == first.json()["id"]


def test_availability_end_before_start_is_422(client, guide_and_user):
    _, user = guide_and_user
    today = date.today()
    response = client.put(
        "/api/set-guide-availability",
        json={"start_date": today.isoformat(), "end_date": (today - timedelta(days=1)).isoformat()},
        headers=auth_headers(user),
    )
    assert response.status_code == 422


def test_toggle_availability(client, guide_and_user, make_availability):
    guide, user = guide_and_user
    make_availability(guide)

    first = client.patch("/api/toggle-guide-availability", headers=auth_headers(user))
    second = client.patch("/api/toggle-guide-availability", headers=auth_headers(user))

    assert first.json()["is_available"] is False
    assert second.json()["is_available"] is True


def test_toggle_without_availability_is_404(client, guide_and_user):
    _, user = guide_and_user
    assert client.patch("/api/toggle-guide-availability", headers=auth_headers(user)).status_code == 404


def test_delete_availability(client, guide_and_user, make_availability):
    guide, user = guide_and_user
    make_availability(guide)

    assert client.delete("/api/delete-guide-availability", headers=auth_headers(user)).status_code == 200
    assert client.delete("/api/delete-guide-availability", headers=auth_headers(user)).status_code == 404


def test_tourist_cannot_set_availability(client, make_tourist):
    today = date.today().isoformat()
    response = client.put(
        "/api/set-guide-availability",
        json={"start_date": today, "end_date": today},
        headers=auth_headers(make_tourist()),
    )
    assert response.status_code == 403


# ---------------------------------------------------------------------------
# Itineraries
# ---------------------------------------------------------------------------


def test_create_and_list_itineraries(client, guide_and_user):
    guide, user = guide_and_user

    response = client.post("/api/create-itinerary", json=ITINERARY_PAYLOAD, headers=auth_headers(user))

    assert response.status_code == 201
    body = response.json()
    assert body["guide_id"] == guide.id
    assert body["price"] == 1500
    assert body["description"] == "Sunrise boat ride &amp; ghats walk"

    listed = client.get(f"/api/get-guide-itinerary?guideId={guide.id}").json()["itineraries"]
    assert [i["id"] for i in listed] == [body["id"]]


def test_itinerary_defaults_price(client, guide_and_user):
    _, user = guide_and_user
    payload = {k: v for k, v in ITINERARY_PAYLOAD.items() if k not in ("price", "price_type")}

    body = client.post("/api/create-itinerary", json=payload, headers=auth_headers(user)).json()

    assert body["price"] == 100
    assert body["price_type"] == "per_trip"


def test_itinerary_text_that_cleans_to_nothing_is_400(client, guide_and_user):
    _, user = guide_and_user
    payload = {**ITINERARY_PAYLOAD, "timings": "\x00\x07"}

    response = client.post("/api/create-itinerary", json=payload, headers=auth_headers(user))

    assert response.status_code == 400
    assert response.json()["detail"] == "timings cannot be blank"


@pytest.mark.parametrize(
    "override",
    [{"number_of_days": 0}, {"price": -1}, {"price_type": "per_hour"}, {"timings": "   "}],
)
def test_invalid_itinerary_is_422(client, guide_and_user, override):
    _, user = guide_and_user
    response = client.post(
        "/api/create-itinerary", json={**ITINERARY_PAYLOAD, **override}, headers=auth_headers(user)
    )
    assert response.status_code == 422


def test_update_itinerary(client, guide_and_user, make_itinerary):
    guide, user = guide_and_user
    itinerary = make_itinerary(guide)

    response = client.put(
        f"/api/update-itinerary/{itinerary.id}",
        json={"price": 3000, "number_of_days": 3},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    assert response.json()["price"] == 3000
    assert response.json()["number_of_days"] == 3


def test_update_itinerary_with_no_fields_is_400(client, guide_and_user, make_itinerary):
    guide, user = guide_and_user
    itinerary = make_itinerary(guide)
    response = client.put(f"/api/update-itinerary/{itinerary.id}", json={}, headers=auth_headers(user))
    assert response.status_code == 400


def test_cannot_modify_other_guides_itinerary(client, guide_and_user, make_guide, make_itinerary):
    _, user = guide_and_user
    other = make_itinerary(make_guide(name="Other Guide"))

    update = client.put(f"/api/update-itinerary/{other.id}", json={"price": 1}, headers=auth_headers(user))
    delete = client.delete(f"/api/delete-itinerary/{other.id}", headers=auth_headers(user))

    assert update.status_code == 403
    assert delete.status_code == 403


def test_delete_itinerary_keeps_bookings(client, db, guide_and_user, make_itinerary, make_tourist, make_booking):
    guide, user = guide_and_user
    itinerary = make_itinerary(guide)
    booking_id = make_booking(make_tourist(), guide, itinerary).id
    itinerary_id = itinerary.id

    response = client.delete(f"/api/delete-itinerary/{itinerary_id}", headers=auth_headers(user))

    assert response.status_code == 200
    assert db.query(GuideItinerary).count() == 0
    db.expire_all()
    kept = db.get(Booking, booking_id)
    assert kept.itinerary_id == itinerary_id
    assert kept.price == 2500


def test_delete_missing_itinerary_is_404(client, guide_and_user):
    _, user = guide_and_user
    assert client.delete("/api/delete-itinerary/missing", headers=auth_headers(user)).status_code == 404
