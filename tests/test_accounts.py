import asyncio

import httpx

from app.models import (
    BOOKING_COMPLETED,
    Booking,
    Guide,
    GuideItinerary,
    Notification,
    RatingReview,
    SavedGuide,
    TouristProfile,
    User,
)
from app.services import auth_provider
from tests.conftest import auth_headers


def _delete(client, user, confirm="DELETE"):
    return client.post("/api/delete-account", json={"confirm": confirm}, headers=auth_headers(user))


def test_me_reports_profile(client, make_tourist):
    tourist = make_tourist()
    body = client.get("/api/me", headers=auth_headers(tourist)).json()
    assert body["role"] == "tourist"
    assert body["has_profile"] is True


def test_delete_account_requires_confirmation(client, make_tourist):
    assert _delete(client, make_tourist(), confirm="yes").status_code == 422


def test_delete_tourist_account_removes_their_data(client, db, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    tourist = make_tourist()
    tourist_id = tourist.id
    booking = make_booking(tourist, guide, itinerary, status=BOOKING_COMPLETED)
    db.add(SavedGuide(tourist_id=tourist_id, guide_id=guide.id))
    db.add(RatingReview(booking_id=booking.id, tourist_id=tourist_id, guide_id=guide.id, rating=5))
    db.add(Notification(user_id=tourist_id, type="custom", title="Hi", message="There"))
    db.commit()

    response = _delete(client, tourist)

    assert response.status_code == 200
    assert response.json() == {"message": "Account successfully deleted", "auth_user_deleted": False}
    db.expire_all()
    assert db.query(User).filter(User.id == tourist_id).first() is None
    assert db.query(TouristProfile).count() == 0
    assert db.query(Booking).count() == 0
    assert db.query(RatingReview).count() == 0
    assert db.query(SavedGuide).count() == 0
    assert db.query(Notification).filter(Notification.user_id == tourist_id).count() == 0
    # The guide is untouched
    assert db.query(Guide).filter(Guide.id == guide.id).count() == 1


def test_delete_guide_account_removes_guide_and_bookings(client, db, make_tourist, make_booking, bookable_guide):
    guide, itinerary = bookable_guide
    guide_id, guide_user_id = guide.id, guide.user_id
    guide_user = db.get(User, guide_user_id)
    make_booking(make_tourist(), guide, itinerary)

    response = _delete(client, guide_user)

    assert response.status_code == 200
    db.expire_all()
    assert db.query(Guide).filter(Guide.id == guide_id).first() is None
    assert db.query(User).filter(User.id == guide_user_id).first() is None
    assert db.query(GuideItinerary).count() == 0
    assert db.query(Booking).count() == 0


def test_delete_account_without_role(client, db, make_user):
    user = make_user()
    user_id = user.id

    assert _delete(client, user).status_code == 200
    db.expire_all()
    assert db.query(User).filter(User.id == user_id).first() is None


def test_delete_auth_user_skipped_without_configuration(monkeypatch):
    monkeypatch.setattr(auth_provider, "AUTH_PROVIDER_URL", None)
    assert asyncio.run(auth_provider.delete_auth_user("user-1")) is False


def _mock_provider(monkeypatch, handler):
    monkeypatch.setattr(auth_provider, "AUTH_PROVIDER_URL", "https://auth.example.com/")
    monkeypatch.setattr(auth_provider, "AUTH_SERVICE_ROLE_KEY", "service-key")
    real_client = httpx.AsyncClient

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(auth_provider.httpx, "AsyncClient", client_factory)


def test_delete_auth_user_calls_admin_api(monkeypatch):
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["authorization"] = request.headers["Authorization"]
        seen["apikey"] = request.headers["apikey"]
        return httpx.Response(204)

    _mock_provider(monkeypatch, handler)

    assert asyncio.run(auth_provider.delete_auth_user("user-1")) is True
    assert seen == {
        "method": "DELETE",
        "url": "https://auth.example.com/auth/v1/admin/users/user-1",
        "authorization": "Bearer service-key",
        "apikey": "service-key",
    }


def test_delete_auth_user_treats_missing_user_as_deleted(monkeypatch):
    _mock_provider(monkeypatch, lambda request: httpx.Response(404))
    assert asyncio.run(auth_provider.delete_auth_user("user-1")) is True


def test_delete_auth_user_reports_failure(monkeypatch):
    _mock_provider(monkeypatch, lambda request: httpx.Response(500, text="boom"))
    assert asyncio.run(auth_provider.delete_auth_user("user-1")) is False


def test_delete_auth_user_network_error(monkeypatch):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    _mock_provider(monkeypatch, handler)
    assert asyncio.run(auth_provider.delete_auth_user("user-1")) is False
