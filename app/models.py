import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base


def generate_uuid():
    """Generate a string UUID primary key"""
    return str(uuid.uuid4())


def utcnow():
    return datetime.utcnow()


# Roles
ROLE_ADMIN = "admin"
ROLE_GUIDE = "guide"
ROLE_TOURIST = "tourist"

# Guide verification statuses
GUIDE_PENDING = "pending"
GUIDE_APPROVED = "approved"
GUIDE_REJECTED = "rejected"

# Booking statuses
BOOKING_PENDING = "pending"
BOOKING_ACCEPTED = "accepted"
BOOKING_REJECTED = "rejected"
BOOKING_CANCELLED = "cancelled"
BOOKING_COMPLETED = "completed"
BOOKING_PAST = "past"

BOOKING_STATUSES = (
    BOOKING_PENDING,
    BOOKING_ACCEPTED,
    BOOKING_REJECTED,
    BOOKING_CANCELLED,
    BOOKING_COMPLETED,
    BOOKING_PAST,
)
ACTIVE_BOOKING_STATUSES = (BOOKING_PENDING, BOOKING_ACCEPTED)


class User(Base):
    __tablename__ = "users"

    # Same id as the auth provider's user (token "sub" claim)
    id = Column(String(36), primary_key=True, index=True)
    email = Column(String(255), index=True, nullable=True)
    role = Column(String(20), nullable=True)  # admin, guide, tourist - null until registration
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    guide = relationship("Guide", back_populates="user", uselist=False)
    tourist_profile = relationship("TouristProfile", back_populates="user", uselist=False)


class Guide(Base):
    __tablename__ = "guides"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone_number = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    location = Column(String(255), nullable=False)
    languages = Column(JSON, default=list, nullable=False)
    profile_picture_url = Column(String(500), nullable=True)  # storage key
    document_url = Column(String(500), nullable=True)  # storage key
    document_type = Column(String(30), nullable=True)  # aadhar, driving_licence
    status = Column(String(20), default=GUIDE_PENDING, nullable=False, index=True)
    rejection_reason = Column(Text, nullable=True)
    is_deactivated = Column(Boolean, default=False, nullable=False)
    deactivation_reason = Column(Text, nullable=True)
    is_resubmitted = Column(Boolean, default=False, nullable=False)
    trips_completed = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="guide")
    availability = relationship(
        "GuideAvailability", back_populates="guide", cascade="all, delete-orphan"
    )
    itineraries = relationship(
        "GuideItinerary", back_populates="guide", cascade="all, delete-orphan"
    )


class TouristProfile(Base):
    __tablename__ = "tourist_profiles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone_number = Column(String(20), nullable=True)
    location = Column(String(255), nullable=False)
    profile_picture_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="tourist_profile")


class GuideAvailability(Base):
    __tablename__ = "guide_availability"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    guide_id = Column(String(36), ForeignKey("guides.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)  # False = on leave
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    guide = relationship("Guide", back_populates="availability")

    def covers(self, day) -> bool:
        return self.start_date <= day <= self.end_date


class GuideItinerary(Base):
    __tablename__ = "guide_itineraries"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    guide_id = Column(String(36), ForeignKey("guides.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False)
    number_of_days = Column(Integer, nullable=False)
    timings = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    places_to_visit = Column(Text, nullable=False)
    instructions = Column(Text, nullable=True)
    image_1_url = Column(String(500), nullable=True)
    image_2_url = Column(String(500), nullable=True)
    price = Column(Float, default=100, nullable=False)
    price_type = Column(String(20), default="per_trip", nullable=False)  # per_day, per_trip
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    guide = relationship("Guide", back_populates="itineraries")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    tourist_id = Column(String(36), nullable=False, index=True)
    # guide_id and itinerary_id outlive their rows: history stays when a guide
    # removes an itinerary or is deleted, and rebooking detects the missing row
    guide_id = Column(String(36), nullable=False, index=True)
    itinerary_id = Column(String(36), nullable=True, index=True)
    booking_date = Column(Date, nullable=False)
    status = Column(String(20), default=BOOKING_PENDING, nullable=False, index=True)
    price = Column(Float, nullable=False)
    price_type = Column(String(20), nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    guide = relationship(
        "Guide", primaryjoin="foreign(Booking.guide_id) == Guide.id", viewonly=True
    )
    itinerary = relationship(
        "GuideItinerary",
        primaryjoin="foreign(Booking.itinerary_id) == GuideItinerary.id",
        viewonly=True,
    )
    tourist = relationship(
        "TouristProfile",
        primaryjoin="foreign(Booking.tourist_id) == TouristProfile.user_id",
        viewonly=True,
    )


class RatingReview(Base):
    __tablename__ = "ratings_reviews"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    booking_id = Column(String(36), unique=True, nullable=False, index=True)
    tourist_id = Column(String(36), nullable=False, index=True)
    guide_id = Column(String(36), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1-5
    review_text = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    guide = relationship(
        "Guide", primaryjoin="foreign(RatingReview.guide_id) == Guide.id", viewonly=True
    )
    tourist = relationship(
        "TouristProfile",
        primaryjoin="foreign(RatingReview.tourist_id) == TouristProfile.user_id",
        viewonly=True,
    )


class SavedGuide(Base):
    __tablename__ = "saved_guides"
    __table_args__ = (UniqueConstraint("tourist_id", "guide_id", name="uq_saved_guide"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    tourist_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    guide_id = Column(String(36), ForeignKey("guides.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON, nullable=True)
    related_user_id = Column(String(36), nullable=True)
    related_guide_id = Column(String(36), nullable=True)
    related_booking_id = Column(String(36), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    read_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
