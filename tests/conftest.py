import os
import uuid
from datetime import date, datetime, timedelta

# Configure the app for tests before anything imports app.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTH_JWT_SECRET"] = "test-jwt-secret"
os.environ["AUTH_JWT_AUDIENCE"] = "authenticated"
os.environ["AUTH_PROVIDER_URL"] = ""
os.environ["AUTH_SERVICE_ROLE_KEY"] = ""
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.database import Base, SessionLocal, engine
from app.main import app
from app.routes import upload
from app.models import (
    BOOKING_PENDING,
    GUIDE_APPROVED,
    ROLE_ADMIN,
    ROLE_GUIDE,
    ROLE_TOURIST,
    Booking,
    Guide,
    GuideAvailability,
    GuideItinerary,
    TouristProfile,
    User,
)

TEST_SECRET = os.environ["AUTH_JWT_SECRET"]


def make_token(user_id: str, email: str = None, expires_in: int = 3600, secret: str = TEST_SECRET, **claims) -> str:
    """Mint an HS256 access token the way the auth provider does"""
    now = datetime.utcnow()
    payload = {
        "sub": user_id,
        "aud": "authenticated",
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
        "role": "authenticated",
    }
    if email:
        payload["email"] = email
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(user_or_id) -> dict:
    if isinstance(user_or_id, User):
        return {"Authorization": f"Bearer {make_token(user_or_id.id, user_or_id.email)}"}
    return {"Authorization": f"Bearer {make_token(user_or_id)}"}


class FakeStorageClient:
    """In-memory stand-in for the S3 client"""

    def __init__(self, fail_put=False):
        self.objects = {}
        self.fail_put = fail_put

    def put_object(self, Bucket, Key, Body, ContentType):
        if self.fail_put:
            raise RuntimeError("bucket unavailable")
        self.objects[Key] = {"bucket": Bucket, "body": Body, "content_type": ContentType}

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        return f"https://storage.example.com/{Params['Bucket']}/{Params['Key']}?expires={ExpiresIn}"


@pytest.fixture(autouse=True)
def storage(monkeypatch):
    fake = FakeStorageClient()
    monkeypatch.setattr(upload, "get_storage_client", lambda: fake)
    return fake


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make_user(role=None, email=None):
        user_id = str(uuid.uuid4())
        user = User(id=user_id, email=email or f"{user_id[:8]}@example.com", role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user(role=ROLE_ADMIN, email="admin@example.com")


@pytest.fixture
def make_guide(db, make_user):
    def _make_guide(status=GUIDE_APPROVED, name="Ravi Kumar", location="Jaipur, Rajasthan",
                    languages=None, is_deactivated=False):
        user = make_user(role=ROLE_GUIDE)
        guide = Guide(
            user_id=user.id,
            name=name,
            phone_number="+919876543210",
            email=user.email,
            location=location,
            languages=languages or ["English", "Hindi"],
            document_type="aadhar",
            document_url=f"document/{user.id}/doc.pdf",
            status=status,
            is_deactivated=is_deactivated,
        )
        db.add(guide)
        db.commit()
        db.refresh(guide)
        return guide

    return _make_guide


@pytest.fixture
def make_tourist(db, make_user):
    def _make_tourist(name="Asha Mehta", location="Mumbai"):
        user = make_user(role=ROLE_TOURIST)
        db.add(TouristProfile(user_id=user.id, name=name, location=location, email=user.email))
        db.commit()
        return user

    return _make_tourist


@pytest.fixture
def make_availability(db):
    def _make_availability(guide, start=None, end=None, is_available=True):
        start = start or date.today()
        end = end or start + timedelta(days=30)
        availability = GuideAvailability(
            guide_id=guide.id,
            user_id=guide.user_id,
            start_date=start,
            end_date=end,
            is_available=is_available,
        )
        db.add(availability)
        db.commit()
        db.refresh(availability)
        return availability

    return _make_availability


@pytest.fixture
def make_itinerary(db):
    def _make_itinerary(guide, price=2500, price_type="per_day"):
        itinerary = GuideItinerary(
            guide_id=guide.id,
            user_id=guide.user_id,
            number_of_days=2,
            timings="9 AM - 5 PM",
            description="Forts and bazaars of the Pink City",
            places_to_visit="Amber Fort, Hawa Mahal, City Palace",
            price=price,
            price_type=price_type,
        )
        db.add(itinerary)
        db.commit()
        db.refresh(itinerary)
        return itinerary

    return _make_itinerary


@pytest.fixture
def make_booking(db):
    def _make_booking(tourist, guide, itinerary, status=BOOKING_PENDING, booking_date=None):
        booking = Booking(
            tourist_id=tourist.id,
            guide_id=guide.id,
            itinerary_id=itinerary.id if itinerary else None,
            booking_date=booking_date or date.today() + timedelta(days=3),
            status=status,
            price=itinerary.price if itinerary else 100,
            price_type=itinerary.price_type if itinerary else "per_trip",
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make_booking


@pytest.fixture
def bookable_guide(make_guide, make_availability, make_itinerary):
    """An approved guide with an open window and one itinerary"""
    guide = make_guide()
    make_availability(guide)
    itinerary = make_itinerary(guide)
    return guide, itinerary
