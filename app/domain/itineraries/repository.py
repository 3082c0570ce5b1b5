"""Itinerary repository - Database operations for guide itineraries"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import GuideItinerary


class ItineraryRepository:
    """Repository for itinerary database operations"""

    @staticmethod
    def get_for_guide(db: Session, guide_id: str) -> list[GuideItinerary]:
        """All itineraries of a guide, newest first"""
        return (
            db.query(GuideItinerary)
            .filter(GuideItinerary.guide_id == guide_id)
            .order_by(GuideItinerary.created_at.desc())
            .all()
        )

    @staticmethod
    def get_by_id(db: Session, itinerary_id: str, guide_id: Optional[str] = None) -> Optional[GuideItinerary]:
        query = db.query(GuideItinerary).filter(GuideItinerary.id == itinerary_id)
        if guide_id:
            query = query.filter(GuideItinerary.guide_id == guide_id)
        return query.first()

    @staticmethod
    def create(db: Session, **fields) -> GuideItinerary:
        itinerary = GuideItinerary(**fields)
        db.add(itinerary)
        db.commit()
        db.refresh(itinerary)
        return itinerary

    @staticmethod
    def update(db: Session, itinerary: GuideItinerary, **updates) -> GuideItinerary:
        for key, value in updates.items():
            if hasattr(itinerary, key):
                setattr(itinerary, key, value)
        db.commit()
        db.refresh(itinerary)
        return itinerary

    @staticmethod
    def delete(db: Session, itinerary: GuideItinerary) -> None:
        db.delete(itinerary)
        db.commit()
