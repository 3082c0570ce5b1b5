"""Itinerary service - Tour plans a guide offers to tourists"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Guide, GuideItinerary
from ...utils.sanitization import ITINERARY_TEXT_MAX_LENGTH, clean_text_fields
from .repository import ItineraryRepository
from .schemas import ItineraryCreate, ItineraryUpdate

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("timings", "description", "places_to_visit", "instructions")
REQUIRED_TEXT_FIELDS = ("timings", "description", "places_to_visit")


def _clean_itinerary_text(fields: dict) -> dict:
    try:
        clean_text_fields(fields, TEXT_FIELDS, ITINERARY_TEXT_MAX_LENGTH)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    for key in REQUIRED_TEXT_FIELDS:
        if key in fields and fields[key] is None:
            raise HTTPException(status_code=400, detail=f"{key} cannot be blank")
    return fields


class ItineraryService:
    """Service layer for itinerary business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ItineraryRepository()

    def get_itineraries(self, guide_id: str) -> list[GuideItinerary]:
        return self.repo.get_for_guide(self.db, guide_id)

    def create_itinerary(self, guide: Guide, data: ItineraryCreate) -> GuideItinerary:
        fields = _clean_itinerary_text(data.model_dump())
        itinerary = self.repo.create(self.db, guide_id=guide.id, user_id=guide.user_id, **fields)
        logger.info(f"🗺️ Guide {guide.id} created itinerary {itinerary.id}")
        return itinerary

    def _get_owned(self, guide: Guide, itinerary_id: str) -> GuideItinerary:
        itinerary = self.repo.get_by_id(self.db, itinerary_id)
        if not itinerary:
            raise HTTPException(status_code=404, detail="Itinerary not found")
        if itinerary.guide_id != guide.id:
            logger.warning(f"⚠️ Guide {guide.id} tried to modify itinerary {itinerary_id} of another guide")
            raise HTTPException(status_code=403, detail="You can only modify your own itineraries")
        return itinerary

    def update_itinerary(self, guide: Guide, itinerary_id: str, data: ItineraryUpdate) -> GuideItinerary:
        itinerary = self._get_owned(guide, itinerary_id)
        updates = _clean_itinerary_text(data.model_dump(exclude_unset=True, exclude_none=True))
        if not updates:
            raise HTTPException(status_code=400, detail="No fields to update")
        return self.repo.update(self.db, itinerary, **updates)

    def delete_itinerary(self, guide: Guide, itinerary_id: str) -> dict:
        """Delete an itinerary; bookings that reference it keep their price snapshot"""
        itinerary = self._get_owned(guide, itinerary_id)
        self.repo.delete(self.db, itinerary)
        logger.info(f"🗑️ Guide {guide.id} deleted itinerary {itinerary_id}")
        return {"message": "Itinerary deleted"}
